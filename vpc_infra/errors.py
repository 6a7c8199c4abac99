"""Errors raised while validating a network configuration."""

from typing import Any


class NetworkConfigError(ValueError):
    """Base class for configuration problems found before planning.

    Attributes:
        value: The offending input (a CIDR, a pair of CIDRs, a zone list).
        rule: Short name of the rule that was violated.
    """

    kind = "NetworkConfigError"

    def __init__(self, message: str, value: Any = None, rule: str = ""):
        super().__init__(message)
        self.message = message
        self.value = value
        self.rule = rule

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.kind,
            "rule": self.rule,
            "message": self.message,
            "value": self.value,
        }


class InvalidConfig(NetworkConfigError):
    """A CIDR is malformed, out of range, or outside the VPC block."""

    kind = "InvalidConfig"


class OverlappingSubnets(NetworkConfigError):
    """Two subnet ranges intersect."""

    kind = "OverlappingSubnets"

    def __init__(self, first: str, second: str):
        super().__init__(
            f"Subnet {first} overlaps subnet {second}",
            value=[first, second],
            rule="no-overlap",
        )
        self.pair = (first, second)


class InsufficientAvailabilityZones(NetworkConfigError):
    """The zone pool is smaller than the number of subnets per tier."""

    kind = "InsufficientAvailabilityZones"

    def __init__(self, required: int, available: list[str]):
        super().__init__(
            f"Need {required} availability zones, got {len(available)}: "
            f"{', '.join(available) or '(none)'}",
            value=list(available),
            rule="zone-count",
        )
        self.required = required
        self.available = len(available)


class EmptyTopology(UserWarning):
    """Both subnet lists are empty. The plan is still valid."""
