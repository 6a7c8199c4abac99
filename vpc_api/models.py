"""Pydantic models for API requests and responses."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from vpc_infra.config import NetworkConfig

REGION_PATTERN = r"^[a-z]{2}(-[a-z]+)+-\d+$"
ZONE_PATTERN = r"^[a-z]{2}(-[a-z0-9]+)+$"

ZoneName = Annotated[str, Field(pattern=ZONE_PATTERN, max_length=64)]


# =============================================================================
# ENUMS
# =============================================================================


class DeploymentStatus(str, Enum):
    """Status of a deployment."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DESTROYING = "destroying"
    DESTROYED = "destroyed"


# =============================================================================
# NETWORK CONFIG MODELS
# =============================================================================


class SubnetConfiguration(BaseModel):
    """Subnet CIDRs per tier, in numbering order."""

    public: list[str] = Field(default_factory=list)
    private: list[str] = Field(default_factory=list)


class NetworkConfigModel(BaseModel):
    """Configuration for one VPC."""

    project_name: str = Field(
        ...,
        description="Prefix for every resource name",
        pattern=r"^[A-Za-z0-9-]+$",
        min_length=1,
        max_length=64,
    )
    vpc_cidr: str = Field(default="10.0.0.0/16")
    enable_dns_hostnames: bool = Field(default=True)
    enable_dns_support: bool = Field(default=True)
    subnet_configuration: SubnetConfiguration = Field(default_factory=SubnetConfiguration)
    ci_build_suffix: str = Field(default="", max_length=32)
    availability_zones: Optional[list[ZoneName]] = Field(default=None)
    aws_region: str = Field(default="us-east-1", pattern=REGION_PATTERN)
    strict_validation: bool = Field(default=True)

    def to_network_config(self) -> NetworkConfig:
        return NetworkConfig.from_mapping(self.model_dump())


# =============================================================================
# PLAN MODELS
# =============================================================================


class PlanRequest(BaseModel):
    """Request to preview a network plan."""

    config: NetworkConfigModel
    availability_zones: Optional[list[ZoneName]] = Field(
        default=None,
        description="Zone pool; defaults to config.availability_zones",
    )
    shuffle_seed: Optional[str] = Field(
        default=None,
        description="Shuffle the zone pool with this seed before planning",
    )


class PlanResponse(BaseModel):
    """A resolved network plan."""

    plan: dict[str, Any]
    warnings: list[str] = Field(default_factory=list)


class ConfigResponse(BaseModel):
    """Response for config operations."""

    project: str
    environment: str
    message: str
    config: Optional[NetworkConfigModel] = None


# =============================================================================
# DEPLOYMENT MODELS
# =============================================================================


class DestroyRequest(BaseModel):
    """Request to destroy infrastructure."""

    confirm: bool = Field(default=False)


class DeploymentResponse(BaseModel):
    """Response for deployment operations."""

    project: str
    environment: str
    stack_name: str
    status: DeploymentStatus
    message: str
    deployment_id: Optional[str] = None


class Deployment(BaseModel):
    """Deployment record."""

    id: int
    project: str
    environment: str
    stack_name: str
    aws_region: str
    status: DeploymentStatus
    pulumi_deployment_id: Optional[str] = None
    outputs: Optional[dict] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
