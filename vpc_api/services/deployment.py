"""Deployment service."""

import json

import httpx

from vpc_api.database import DeploymentRecord, db
from vpc_api.models import Deployment, DeploymentStatus, NetworkConfigModel
from vpc_api.services.pulumi_client import get_pulumi_client
from vpc_api.settings import settings
from vpc_infra.log_config import get_logger

logger = get_logger(__name__)


class DeploymentService:
    """Service for deployment operations."""

    async def deploy(
        self,
        project: str,
        environment: str,
        config: NetworkConfigModel,
    ) -> None:
        """Run deployment."""
        stack_name = settings.stack_name(project, environment)

        try:
            client = get_pulumi_client()

            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.IN_PROGRESS,
            )

            # Create stack if needed
            try:
                await client.create_stack(stack_name)
            except httpx.HTTPStatusError as e:
                if e.response.status_code != 409:
                    raise
                logger.info(f"Stack {stack_name} already exists")

            # Configure and trigger
            await client.configure_deployment(stack_name, config)

            result = await client.trigger_deployment(stack_name, "update")

            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.IN_PROGRESS,
                pulumi_deployment_id=result.get("id", ""),
            )
            logger.info(f"Triggered update of {stack_name}: {result.get('id', '')}")

        except Exception as e:
            logger.error(f"Deployment of {stack_name} failed: {e}")
            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.FAILED,
                error_message=str(e),
            )

    async def destroy(self, project: str, environment: str) -> None:
        """Destroy infrastructure."""
        stack_name = settings.stack_name(project, environment)

        try:
            client = get_pulumi_client()

            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.DESTROYING,
            )

            result = await client.trigger_deployment(stack_name, "destroy")

            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.DESTROYING,
                pulumi_deployment_id=result.get("id", ""),
            )
            logger.info(f"Triggered destroy of {stack_name}: {result.get('id', '')}")

        except Exception as e:
            logger.error(f"Destroy of {stack_name} failed: {e}")
            db.update_deployment_status(
                stack_name=stack_name,
                status=DeploymentStatus.FAILED,
                error_message=str(e),
            )

    async def sync_status(self, project: str, environment: str) -> Deployment | None:
        """Sync and return deployment status."""
        record = db.get_deployment(project, environment)
        if not record:
            return None

        # Check Pulumi for updates if in progress
        active = (DeploymentStatus.IN_PROGRESS, DeploymentStatus.DESTROYING)
        if record.status in active and record.pulumi_deployment_id:
            try:
                record = await self._refresh(record) or record
            except httpx.HTTPError as e:
                logger.warning(f"Could not refresh status of {record.stack_name}: {e}")

        return self._to_model(record)

    async def _refresh(self, record: DeploymentRecord) -> DeploymentRecord | None:
        client = get_pulumi_client()
        status = await client.get_deployment_status(record.stack_name, record.pulumi_deployment_id)

        pulumi_status = status.get("status", "")
        if pulumi_status == "succeeded":
            if record.status == DeploymentStatus.DESTROYING:
                return db.update_deployment_status(
                    stack_name=record.stack_name,
                    status=DeploymentStatus.DESTROYED,
                )
            outputs = await client.get_stack_outputs(record.stack_name)
            return db.update_deployment_status(
                stack_name=record.stack_name,
                status=DeploymentStatus.SUCCEEDED,
                outputs=json.dumps(outputs),
            )
        if pulumi_status == "failed":
            return db.update_deployment_status(
                stack_name=record.stack_name,
                status=DeploymentStatus.FAILED,
                error_message=status.get("message", "Deployment failed"),
            )
        return None

    def _to_model(self, record: DeploymentRecord) -> Deployment:
        """Convert record to model."""
        return Deployment(
            id=record.id,
            project=record.project,
            environment=record.environment,
            stack_name=record.stack_name,
            aws_region=record.aws_region,
            status=record.status,
            pulumi_deployment_id=record.pulumi_deployment_id,
            outputs=json.loads(record.outputs) if record.outputs else None,
            error_message=record.error_message,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


deployment_service = DeploymentService()
