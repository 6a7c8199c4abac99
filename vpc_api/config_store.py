"""Saved network configurations, one JSON document per stack."""

import json
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from vpc_api.models import NetworkConfigModel
from vpc_api.settings import settings
from vpc_infra.errors import InvalidConfig
from vpc_infra.log_config import get_logger
from vpc_infra.plan import validate_network_config

logger = get_logger(__name__)


class ConfigStore:
    """Keep validated network configurations under ``settings.config_dir``.

    Documents hold the normalized config (``NetworkConfig.to_mapping()``)
    and are checked again on every read, so a file edited by hand cannot
    reach a deployment without passing the CIDR checks.
    """

    def __init__(self, config_dir: Optional[str] = None):
        self.config_dir = Path(config_dir or settings.config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, project: str, environment: str) -> Path:
        return self.config_dir / f"{settings.stack_name(project, environment)}.json"

    def save(self, project: str, environment: str, config: NetworkConfigModel) -> NetworkConfigModel:
        """Validate and store a configuration, returning the normalized form.

        Raises:
            NetworkConfigError: If the CIDRs do not pass validation; nothing
                is written in that case.
        """
        network_config = config.to_network_config()
        networks = validate_network_config(network_config)

        document = {
            "project": project,
            "environment": environment,
            "stack_name": settings.stack_name(project, environment),
            "config": network_config.to_mapping(),
        }
        path = self.path_for(project, environment)
        path.write_text(json.dumps(document, indent=2) + "\n")
        logger.info(f"Saved {network_config.vpc_cidr} with {len(networks)} subnets to {path}")

        return NetworkConfigModel(**document["config"])

    def get(self, project: str, environment: str) -> Optional[NetworkConfigModel]:
        """Load a stored configuration, or None if there is none.

        Raises:
            InvalidConfig: If the document is unreadable or no longer valid.
            NetworkConfigError: If its CIDRs fail validation.
        """
        path = self.path_for(project, environment)
        if not path.exists():
            return None

        try:
            document = json.loads(path.read_text())
            config = NetworkConfigModel(**document["config"])
        except (ValueError, KeyError, TypeError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            detail = e.errors()[0]["msg"] if isinstance(e, ValidationError) else str(e)
            raise InvalidConfig(
                f"Stored config {path.name} is unreadable: {detail}",
                value=path.name,
                rule="stored-config",
            )

        validate_network_config(config.to_network_config())
        return config

    def delete(self, project: str, environment: str) -> bool:
        """Delete a stored configuration."""
        path = self.path_for(project, environment)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted {path}")
        return True


config_store = ConfigStore()
