"""VPC network planning and provisioning."""

from vpc_infra.config import NetworkConfig
from vpc_infra.errors import (
    EmptyTopology,
    InsufficientAvailabilityZones,
    InvalidConfig,
    NetworkConfigError,
    OverlappingSubnets,
)
from vpc_infra.plan import NetworkPlan, SubnetPlan, build_network_plan, validate_network_config

__all__ = [
    "NetworkConfig",
    "NetworkPlan",
    "SubnetPlan",
    "build_network_plan",
    "validate_network_config",
    "NetworkConfigError",
    "InvalidConfig",
    "OverlappingSubnets",
    "InsufficientAvailabilityZones",
    "EmptyTopology",
]

__version__ = "0.1.0"
