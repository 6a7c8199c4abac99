"""Network plan builder.

Turns a ``NetworkConfig`` and an already-shuffled availability zone pool
into a ``NetworkPlan``: the full list of VPC resources to create, with their
names and cross references. Building a plan performs no I/O; realizing it
is the job of ``vpc_infra.components.networking.Networking``.

Example:
    >>> config = NetworkConfig(
    ...     project_name="demo",
    ...     public_subnet_cidrs=("10.0.0.0/24",),
    ...     private_subnet_cidrs=("10.0.1.0/24",),
    ... )
    >>> plan = build_network_plan(config, ["us-east-1a", "us-east-1b"])
    >>> [s.name for s in plan.subnets]
    ['demo-pub-sn-az-1', 'demo-pvt-sn-az-1']
"""

import dataclasses
import ipaddress
import warnings
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from vpc_infra import naming
from vpc_infra.cidr import find_overlap, is_contained, parse_subnet_cidr, parse_vpc_cidr
from vpc_infra.config import NetworkConfig
from vpc_infra.errors import (
    EmptyTopology,
    InsufficientAvailabilityZones,
    InvalidConfig,
    NetworkConfigError,
    OverlappingSubnets,
)
from vpc_infra.log_config import get_logger

logger = get_logger(__name__)

ANY_IPV4 = "0.0.0.0/0"
INTERNET_GATEWAY = "internet_gateway"


# =============================================================================
# PLAN TYPES
# =============================================================================


@dataclass(frozen=True)
class VpcPlan:
    name: str
    cidr: str
    enable_dns_hostnames: bool
    enable_dns_support: bool


@dataclass(frozen=True)
class InternetGatewayPlan:
    name: str


@dataclass(frozen=True)
class RoutePlan:
    """A route entry. ``target`` names the planned resource traffic goes to."""

    destination_cidr: str
    target: str


@dataclass(frozen=True)
class RouteTablePlan:
    name: str
    routes: tuple[RoutePlan, ...] = ()

    @property
    def has_default_route(self) -> bool:
        return any(route.destination_cidr == ANY_IPV4 for route in self.routes)


@dataclass(frozen=True)
class NaclRulePlan:
    rule_no: int
    protocol: str
    action: str
    cidr_block: str
    from_port: int
    to_port: int


# Allow everything, in both directions
ALLOW_ALL_RULE = NaclRulePlan(
    rule_no=100,
    protocol="-1",
    action="allow",
    cidr_block=ANY_IPV4,
    from_port=0,
    to_port=0,
)


@dataclass(frozen=True)
class NaclAssociationPlan:
    name: str
    subnet_name: str
    network_acl_name: str


@dataclass(frozen=True)
class NetworkAclPlan:
    """The single ACL shared by every subnet in the VPC."""

    name: str
    ingress: tuple[NaclRulePlan, ...]
    egress: tuple[NaclRulePlan, ...]
    associations: tuple[NaclAssociationPlan, ...] = ()


@dataclass(frozen=True)
class SubnetPlan:
    index: int  # 1-based position within its tier
    cidr: str
    availability_zone: str
    is_public: bool
    name: str
    route_table: RouteTablePlan
    nacl_association: NaclAssociationPlan


@dataclass(frozen=True)
class NetworkPlan:
    project_name: str
    ci_build_suffix: str
    vpc: VpcPlan
    internet_gateway: Optional[InternetGatewayPlan]
    public_subnets: tuple[SubnetPlan, ...]
    private_subnets: tuple[SubnetPlan, ...]
    network_acl: NetworkAclPlan
    availability_zones: tuple[str, ...]

    @property
    def subnets(self) -> tuple[SubnetPlan, ...]:
        return self.public_subnets + self.private_subnets

    @property
    def public_route_tables(self) -> tuple[RouteTablePlan, ...]:
        return tuple(subnet.route_table for subnet in self.public_subnets)

    @property
    def private_route_tables(self) -> tuple[RouteTablePlan, ...]:
        return tuple(subnet.route_table for subnet in self.private_subnets)

    @property
    def is_empty(self) -> bool:
        return not self.subnets

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view of the plan, suitable for JSON."""
        data = dataclasses.asdict(self)
        data["public_route_tables"] = [dataclasses.asdict(rt) for rt in self.public_route_tables]
        data["private_route_tables"] = [dataclasses.asdict(rt) for rt in self.private_route_tables]
        return data


# =============================================================================
# VALIDATION
# =============================================================================


def validate_network_config(config: NetworkConfig) -> list[ipaddress.IPv4Network]:
    """Check the VPC and subnet CIDRs of a configuration.

    Returns the parsed subnet networks, public first. In relaxed mode
    (``strict_validation=False``) containment and overlap problems are
    logged instead of raised; malformed CIDRs always raise.

    Raises:
        InvalidConfig: Malformed CIDR, or a subnet outside the VPC block.
        OverlappingSubnets: Two subnet blocks intersect.
    """
    if not config.project_name:
        raise InvalidConfig("project_name is required", value=config.project_name, rule="required")

    vpc = parse_vpc_cidr(config.vpc_cidr)

    labelled: list[tuple[str, ipaddress.IPv4Network]] = []
    for tier, cidrs in (("public", config.public_subnet_cidrs), ("private", config.private_subnet_cidrs)):
        for i, cidr in enumerate(cidrs):
            label = f"{tier}[{i}] {cidr}"
            network = parse_subnet_cidr(cidr, f"{tier.capitalize()} subnet CIDR")
            if not is_contained(network, vpc):
                _reject(
                    config,
                    InvalidConfig(
                        f"{tier.capitalize()} subnet CIDR {cidr} is not inside VPC CIDR {config.vpc_cidr}",
                        value=cidr,
                        rule="containment",
                    ),
                )
            labelled.append((label, network))

    overlap = find_overlap(labelled)
    if overlap:
        _reject(config, OverlappingSubnets(*overlap))

    return [network for _, network in labelled]


def _reject(config: NetworkConfig, error: NetworkConfigError) -> None:
    if config.strict_validation:
        raise error
    logger.warning(f"Ignoring {error.kind} ({error.rule}): {error.message}")


# =============================================================================
# BUILDER
# =============================================================================


def build_network_plan(config: NetworkConfig, az_pool: Sequence[str]) -> NetworkPlan:
    """Build the resource plan for a VPC.

    Args:
        config: Validated or unvalidated network configuration.
        az_pool: Availability zones, already shuffled by the caller. Public
            subnet ``i`` gets ``az_pool[i]``; private subnets continue the
            rotation after the public ones, wrapping around the pool.

    Returns:
        The immutable plan. Identical inputs give equal plans.

    Raises:
        InvalidConfig: Malformed or out-of-range CIDR.
        OverlappingSubnets: Two subnet blocks intersect.
        InsufficientAvailabilityZones: ``az_pool`` is smaller than the
            larger of the two subnet lists.
    """
    validate_network_config(config)

    public_cidrs = list(config.public_subnet_cidrs)
    private_cidrs = list(config.private_subnet_cidrs)
    zones = list(az_pool)

    zone_count = max(len(public_cidrs), len(private_cidrs))
    if len(zones) < zone_count:
        raise InsufficientAvailabilityZones(zone_count, zones)

    project = config.project_name
    suffix = config.ci_build_suffix
    acl_name = naming.network_acl_name(project, suffix)

    internet_gateway = None
    if public_cidrs:
        internet_gateway = InternetGatewayPlan(name=naming.internet_gateway_name(project, suffix))

    def subnet_plan(i: int, cidr: str, is_public: bool, zone: str) -> SubnetPlan:
        name = naming.subnet_name(project, i + 1, is_public, suffix)
        routes: tuple[RoutePlan, ...] = ()
        if is_public and internet_gateway is not None:
            routes = (RoutePlan(destination_cidr=ANY_IPV4, target=INTERNET_GATEWAY),)
        return SubnetPlan(
            index=i + 1,
            cidr=cidr,
            availability_zone=zone,
            is_public=is_public,
            name=name,
            route_table=RouteTablePlan(
                name=naming.route_table_name(project, i + 1, is_public, suffix),
                routes=routes,
            ),
            nacl_association=NaclAssociationPlan(
                name=naming.nacl_association_name(name),
                subnet_name=name,
                network_acl_name=acl_name,
            ),
        )

    public_subnets = tuple(
        subnet_plan(i, cidr, True, zones[i % len(zones)]) for i, cidr in enumerate(public_cidrs)
    )
    private_subnets = tuple(
        subnet_plan(i, cidr, False, zones[(len(public_cidrs) + i) % len(zones)])
        for i, cidr in enumerate(private_cidrs)
    )

    subnets = public_subnets + private_subnets
    if not subnets:
        warnings.warn(
            f"{project}: no public or private subnets configured, planning an empty VPC",
            EmptyTopology,
            stacklevel=2,
        )
        logger.warning(f"{project}: empty topology, the VPC will have no subnets")

    used_zones: list[str] = []
    for subnet in subnets:
        if subnet.availability_zone not in used_zones:
            used_zones.append(subnet.availability_zone)

    plan = NetworkPlan(
        project_name=project,
        ci_build_suffix=suffix,
        vpc=VpcPlan(
            name=naming.vpc_name(project, suffix),
            cidr=config.vpc_cidr,
            enable_dns_hostnames=config.enable_dns_hostnames,
            enable_dns_support=config.enable_dns_support,
        ),
        internet_gateway=internet_gateway,
        public_subnets=public_subnets,
        private_subnets=private_subnets,
        network_acl=NetworkAclPlan(
            name=acl_name,
            ingress=(ALLOW_ALL_RULE,),
            egress=(ALLOW_ALL_RULE,),
            associations=tuple(subnet.nacl_association for subnet in subnets),
        ),
        availability_zones=tuple(used_zones),
    )

    logger.debug(
        f"Planned {plan.vpc.name}: {len(public_subnets)} public, "
        f"{len(private_subnets)} private subnets across {len(used_zones)} zones"
    )
    return plan
