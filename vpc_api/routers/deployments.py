"""Deployment endpoints."""

from fastapi import APIRouter, BackgroundTasks, HTTPException

from vpc_api.config_store import config_store
from vpc_api.database import db
from vpc_api.models import (
    Deployment,
    DeploymentResponse,
    DeploymentStatus,
    DestroyRequest,
)
from vpc_api.services.deployment import deployment_service
from vpc_api.settings import settings

router = APIRouter(prefix="/api/v1/projects", tags=["Deployments"])


@router.post("/{project}/environments/{environment}/deploy", response_model=DeploymentResponse)
async def deploy(
    project: str,
    environment: str,
    background_tasks: BackgroundTasks,
) -> DeploymentResponse:
    """Deploy the saved network configuration."""
    stack_name = settings.stack_name(project, environment)

    config = config_store.get(project, environment)
    if not config:
        raise HTTPException(
            status_code=404,
            detail=f"Config for {project}/{environment} not found. Save config first.",
        )

    if not settings.deployments_enabled:
        raise HTTPException(
            status_code=503,
            detail="Pulumi Deployments are not configured (PULUMI_ORG, PULUMI_ACCESS_TOKEN, GIT_REPO_URL)",
        )

    existing = db.get_deployment(project, environment)
    if existing:
        if existing.status in (DeploymentStatus.IN_PROGRESS, DeploymentStatus.DESTROYING):
            raise HTTPException(status_code=409, detail="Deployment already in progress")
        # Redeploying after a failure or a destroy reuses the stack
        db.delete_deployment(stack_name)

    try:
        db.create_deployment(
            project=project,
            environment=environment,
            aws_region=config.aws_region,
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))

    background_tasks.add_task(deployment_service.deploy, project, environment, config)

    return DeploymentResponse(
        project=project,
        environment=environment,
        stack_name=stack_name,
        status=DeploymentStatus.PENDING,
        message="Deployment initiated",
    )


@router.get("/{project}/environments/{environment}/status", response_model=Deployment)
async def get_status(project: str, environment: str) -> Deployment:
    """Get deployment status."""
    deployment = await deployment_service.sync_status(project, environment)
    if not deployment:
        raise HTTPException(
            status_code=404,
            detail=f"Deployment for {project}/{environment} not found",
        )
    return deployment


@router.get("", response_model=list[Deployment])
async def list_deployments() -> list[Deployment]:
    """List all deployments."""
    return [deployment_service._to_model(record) for record in db.list_deployments()]


@router.delete("/{project}/environments/{environment}", response_model=DeploymentResponse)
async def destroy(
    project: str,
    environment: str,
    request: DestroyRequest,
    background_tasks: BackgroundTasks,
) -> DeploymentResponse:
    """Destroy infrastructure."""
    if not request.confirm:
        raise HTTPException(status_code=400, detail="Must set confirm=true")

    deployment = db.get_deployment(project, environment)
    if not deployment:
        raise HTTPException(
            status_code=404,
            detail=f"Deployment for {project}/{environment} not found",
        )

    if deployment.status == DeploymentStatus.DESTROYING:
        raise HTTPException(status_code=409, detail="Destruction already in progress")

    background_tasks.add_task(deployment_service.destroy, project, environment)

    return DeploymentResponse(
        project=project,
        environment=environment,
        stack_name=deployment.stack_name,
        status=DeploymentStatus.DESTROYING,
        message="Destruction initiated",
    )
