"""CIDR parsing, containment and overlap checks."""

import ipaddress
from typing import Optional, Sequence

from vpc_infra.errors import InvalidConfig

# AWS accepts VPC and subnet blocks between /16 and /28.
MIN_PREFIX = 16
MAX_PREFIX = 28


def parse_cidr(value: str, label: str = "CIDR") -> ipaddress.IPv4Network:
    """Parse an IPv4 CIDR block, rejecting host bits and IPv6.

    Args:
        value: CIDR string such as "10.0.1.0/24".
        label: Where the value came from, used in the error message.

    Raises:
        InvalidConfig: If the value is not a canonical IPv4 network.
    """
    if not isinstance(value, str) or "/" not in value or value != value.strip():
        raise InvalidConfig(
            f"{label} {value!r} is not in CIDR notation",
            value=value,
            rule="cidr-syntax",
        )
    try:
        network = ipaddress.ip_network(value, strict=True)
    except ValueError as e:
        raise InvalidConfig(f"{label} {value!r} is invalid: {e}", value=value, rule="cidr-syntax")

    if not isinstance(network, ipaddress.IPv4Network):
        raise InvalidConfig(f"{label} {value!r} is not IPv4", value=value, rule="cidr-syntax")
    return network


def parse_vpc_cidr(value: str) -> ipaddress.IPv4Network:
    network = parse_cidr(value, "VPC CIDR")
    if not MIN_PREFIX <= network.prefixlen <= MAX_PREFIX:
        raise InvalidConfig(
            f"VPC CIDR {value} must have a prefix between /{MIN_PREFIX} and /{MAX_PREFIX}",
            value=value,
            rule="cidr-range",
        )
    return network


def parse_subnet_cidr(value: str, label: str) -> ipaddress.IPv4Network:
    network = parse_cidr(value, label)
    if network.prefixlen > MAX_PREFIX:
        raise InvalidConfig(
            f"{label} {value} is smaller than /{MAX_PREFIX}",
            value=value,
            rule="cidr-range",
        )
    return network


def is_contained(subnet: ipaddress.IPv4Network, parent: ipaddress.IPv4Network) -> bool:
    return subnet.subnet_of(parent)


def find_overlap(
    networks: Sequence[tuple[str, ipaddress.IPv4Network]],
) -> Optional[tuple[str, str]]:
    """Return the labels of the first overlapping pair, or None.

    Sorts by start address and sweeps once, tracking the block that reaches
    furthest so far. Two CIDR blocks either nest or are disjoint, so any
    block that starts before that furthest end overlaps it.

    Args:
        networks: (label, network) pairs in caller order.
    """
    ordered = sorted(networks, key=lambda item: (item[1].network_address, item[1].prefixlen))

    widest: Optional[tuple[str, ipaddress.IPv4Network]] = None
    for label, network in ordered:
        if widest is not None and network.network_address <= widest[1].broadcast_address:
            return widest[0], label
        if widest is None or network.broadcast_address > widest[1].broadcast_address:
            widest = (label, network)
    return None
