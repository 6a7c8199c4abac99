"""Network configuration schema and loaders."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import pulumi
import yaml

from vpc_infra.errors import InvalidConfig

DEFAULT_VPC_CIDR = "10.0.0.0/16"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class NetworkConfig:
    """Configuration for one VPC."""

    # Identity
    project_name: str
    vpc_cidr: str = DEFAULT_VPC_CIDR

    # VPC DNS attributes
    enable_dns_hostnames: bool = True
    enable_dns_support: bool = True

    # Subnet layout, in the order subnets are numbered
    public_subnet_cidrs: tuple[str, ...] = ()
    private_subnet_cidrs: tuple[str, ...] = ()

    # Appended to every resource name, e.g. "-042" for CI build 42
    ci_build_suffix: str = ""

    # Zones and region
    availability_zones: tuple[str, ...] = ()
    aws_region: str = DEFAULT_REGION

    # Raise on containment/overlap problems instead of logging them
    strict_validation: bool = True

    tags: dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def subnet_configuration(self) -> dict[str, list[str]]:
        return {
            "public": list(self.public_subnet_cidrs),
            "private": list(self.private_subnet_cidrs),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NetworkConfig":
        """Build a config from a snake_case mapping (YAML file, API body).

        Subnets are read from ``subnet_configuration: {public: [...],
        private: [...]}``.

        Raises:
            InvalidConfig: If the project name is missing or a list field
                has the wrong shape.
        """
        project_name = data.get("project_name")
        if not project_name or not isinstance(project_name, str):
            raise InvalidConfig("project_name is required", value=project_name, rule="required")

        subnets = data.get("subnet_configuration") or {}
        if not isinstance(subnets, Mapping):
            raise InvalidConfig(
                "subnet_configuration must be a mapping with 'public' and 'private' lists",
                value=subnets,
                rule="subnet-configuration",
            )

        return cls(
            project_name=project_name,
            vpc_cidr=data.get("vpc_cidr") or DEFAULT_VPC_CIDR,
            enable_dns_hostnames=_as_bool(data.get("enable_dns_hostnames"), True),
            enable_dns_support=_as_bool(data.get("enable_dns_support"), True),
            public_subnet_cidrs=_as_tuple(subnets.get("public"), "subnet_configuration.public"),
            private_subnet_cidrs=_as_tuple(subnets.get("private"), "subnet_configuration.private"),
            ci_build_suffix=data.get("ci_build_suffix") or "",
            availability_zones=_as_tuple(data.get("availability_zones"), "availability_zones"),
            aws_region=data.get("aws_region") or DEFAULT_REGION,
            strict_validation=_as_bool(data.get("strict_validation"), True),
            tags=dict(data.get("tags") or {}),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "project_name": self.project_name,
            "vpc_cidr": self.vpc_cidr,
            "enable_dns_hostnames": self.enable_dns_hostnames,
            "enable_dns_support": self.enable_dns_support,
            "subnet_configuration": self.subnet_configuration,
            "ci_build_suffix": self.ci_build_suffix,
            "availability_zones": list(self.availability_zones),
            "aws_region": self.aws_region,
            "strict_validation": self.strict_validation,
            "tags": dict(self.tags),
        }


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_tuple(value: Any, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    # Comma-separated strings are accepted the same way the stack config takes them
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if not isinstance(value, (list, tuple)):
        raise InvalidConfig(f"{name} must be a list", value=value, rule="list")
    return tuple(str(item).strip() for item in value)


def load_config_file(path: Path) -> NetworkConfig:
    """Load a network configuration from a YAML (or JSON) file.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidConfig: If the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, Mapping):
        raise InvalidConfig(f"{path} does not contain a mapping", value=str(path), rule="document")
    return NetworkConfig.from_mapping(data)


def load_network_config(config: Optional[pulumi.Config] = None) -> NetworkConfig:
    """Load network configuration from Pulumi stack config."""
    config = config or pulumi.Config()

    subnets = config.get_object("subnetConfiguration") or {}
    strict = config.get_bool("strictValidation")
    dns_hostnames = config.get_bool("enableDnsHostnames")
    dns_support = config.get_bool("enableDnsSupport")

    return NetworkConfig(
        project_name=config.require("projectName"),
        vpc_cidr=config.get("vpcCidr") or DEFAULT_VPC_CIDR,
        enable_dns_hostnames=True if dns_hostnames is None else dns_hostnames,
        enable_dns_support=True if dns_support is None else dns_support,
        public_subnet_cidrs=_as_tuple(subnets.get("public"), "subnetConfiguration.public"),
        private_subnet_cidrs=_as_tuple(subnets.get("private"), "subnetConfiguration.private"),
        ci_build_suffix=config.get("ciBuildSuffix") or "",
        # Comma-separated string; empty means look them up in the region
        availability_zones=_as_tuple(config.get("availabilityZones"), "availabilityZones"),
        aws_region=config.get("awsRegion") or DEFAULT_REGION,
        strict_validation=True if strict is None else strict,
        tags=config.get_object("tags") or {},
    )
