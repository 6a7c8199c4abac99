"""VPC infrastructure components."""

from vpc_infra.components.networking import Networking

__all__ = ["Networking"]
