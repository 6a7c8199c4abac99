"""Config endpoints."""

from fastapi import APIRouter, HTTPException

from vpc_api.config_store import config_store
from vpc_api.models import ConfigResponse, NetworkConfigModel

router = APIRouter(prefix="/api/v1/projects", tags=["Config"])


@router.post("/{project}/environments/{environment}/config", response_model=ConfigResponse)
async def save_config(
    project: str,
    environment: str,
    config: NetworkConfigModel,
) -> ConfigResponse:
    """Save network configuration after checking its CIDRs."""
    saved = config_store.save(project, environment, config)

    return ConfigResponse(
        project=project,
        environment=environment,
        message="Configuration saved",
        config=saved,
    )


@router.get("/{project}/environments/{environment}/config", response_model=ConfigResponse)
async def get_config(project: str, environment: str) -> ConfigResponse:
    """Get network configuration."""
    config = config_store.get(project, environment)
    if not config:
        raise HTTPException(
            status_code=404,
            detail=f"Config for {project}/{environment} not found",
        )

    return ConfigResponse(
        project=project,
        environment=environment,
        message="Configuration retrieved",
        config=config,
    )


@router.delete("/{project}/environments/{environment}/config", response_model=ConfigResponse)
async def delete_config(project: str, environment: str) -> ConfigResponse:
    """Delete network configuration."""
    if not config_store.delete(project, environment):
        raise HTTPException(
            status_code=404,
            detail=f"Config for {project}/{environment} not found",
        )

    return ConfigResponse(
        project=project,
        environment=environment,
        message="Configuration deleted",
    )
