"""Pulumi Deployments API client."""

import shlex
from typing import Any, Optional

import httpx

from vpc_api.models import NetworkConfigModel
from vpc_api.settings import settings

PULUMI_API_BASE = "https://api.pulumi.com"
REQUEST_TIMEOUT = 30.0


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_pre_run_commands(stack_id: str, config: NetworkConfigModel) -> list[str]:
    """Stack config commands run before each deployment.

    Keys match what ``vpc_infra.config.load_network_config`` reads. The
    runner executes these through a shell, so every value is quoted.
    """
    set_cmd = f"pulumi config set --stack {shlex.quote(stack_id)}"

    def config_set(key: str, value: str) -> str:
        # "--" keeps values such as the "-042" suffix from being parsed as flags
        return f"{set_cmd} {key} -- {shlex.quote(value)}"

    commands = [
        config_set("projectName", config.project_name),
        config_set("vpcCidr", config.vpc_cidr),
        config_set("enableDnsHostnames", _flag(config.enable_dns_hostnames)),
        config_set("enableDnsSupport", _flag(config.enable_dns_support)),
        config_set("awsRegion", config.aws_region),
        config_set("strictValidation", _flag(config.strict_validation)),
    ]

    if config.ci_build_suffix:
        commands.append(config_set("ciBuildSuffix", config.ci_build_suffix))

    if config.availability_zones:
        commands.append(config_set("availabilityZones", ",".join(config.availability_zones)))

    for tier in ("public", "private"):
        cidrs = getattr(config.subnet_configuration, tier)
        for i, cidr in enumerate(cidrs):
            path = shlex.quote(f"subnetConfiguration.{tier}[{i}]")
            commands.append(config_set(f"--path {path}", cidr))

    return commands


class PulumiClient:
    """Client for the Pulumi Deployments REST API, scoped to one project."""

    def __init__(self, project_name: Optional[str] = None):
        self.organization = settings.pulumi_org
        self.project_name = project_name or settings.pulumi_project
        self.github_token = settings.github_token or None

        self.headers = {
            "Authorization": f"token {settings.pulumi_access_token}",
            "Content-Type": "application/json",
        }

    def _stack_url(self, stack_name: str, path: str = "") -> str:
        return f"{PULUMI_API_BASE}/api/stacks/{self.organization}/{self.project_name}/{stack_name}{path}"

    async def _request(self, method: str, url: str, payload: Optional[dict] = None) -> dict[str, Any]:
        async with httpx.AsyncClient() as client:
            response = await client.request(
                method, url, headers=self.headers, json=payload, timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()

    async def create_stack(self, stack_name: str) -> dict[str, Any]:
        """Create a new Pulumi stack."""
        url = f"{PULUMI_API_BASE}/api/stacks/{self.organization}/{self.project_name}"
        return await self._request("POST", url, {"stackName": stack_name})

    async def configure_deployment(
        self,
        stack_name: str,
        config: NetworkConfigModel,
    ) -> dict[str, Any]:
        """Point the stack at the git source and set its network config."""
        stack_id = f"{self.organization}/{self.project_name}/{stack_name}"

        git: dict[str, Any] = {
            "repoUrl": settings.git_repo_url,
            "branch": f"refs/heads/{settings.git_repo_branch}",
            "repoDir": settings.git_repo_dir,
        }
        if self.github_token:
            git["gitAuth"] = {"accessToken": {"secret": self.github_token}}

        payload = {
            "sourceContext": {"git": git},
            "operationContext": {
                "preRunCommands": build_pre_run_commands(stack_id, config),
                "environmentVariables": {
                    "AWS_ACCESS_KEY_ID": settings.aws_access_key_id,
                    "AWS_SECRET_ACCESS_KEY": {"secret": settings.aws_secret_access_key},
                    "AWS_REGION": config.aws_region,
                },
            },
        }
        return await self._request("POST", self._stack_url(stack_name, "/deployments/settings"), payload)

    async def trigger_deployment(self, stack_name: str, operation: str = "update") -> dict[str, Any]:
        """Start an update (or destroy) with the stored deployment settings."""
        payload = {"operation": operation, "inheritSettings": True}
        return await self._request("POST", self._stack_url(stack_name, "/deployments"), payload)

    async def get_deployment_status(self, stack_name: str, deployment_id: str) -> dict[str, Any]:
        return await self._request("GET", self._stack_url(stack_name, f"/deployments/{deployment_id}"))

    async def get_stack_outputs(self, stack_name: str) -> dict[str, Any]:
        """Stack exports: vpc_id, subnet ids, route table ids, nacl ids."""
        data = await self._request("GET", self._stack_url(stack_name, "/export"))

        for resource in data.get("deployment", {}).get("resources", []):
            if resource.get("type") == "pulumi:pulumi:Stack":
                return resource.get("outputs", {})
        return {}


def get_pulumi_client() -> PulumiClient:
    """Get Pulumi client instance."""
    return PulumiClient()
