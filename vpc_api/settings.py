"""Application settings loaded from environment variables or .env file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings.

    Read from the environment (case-insensitive) or a .env file in the
    working directory. Only the Pulumi and git settings are needed to
    deploy; plan previews and the config store work without them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Pulumi Deployments
    pulumi_access_token: str = ""
    pulumi_org: str = ""
    pulumi_project: str = Field(default="vpc-network", description="Must match Pulumi.yaml")

    # Source of the Pulumi program
    git_repo_url: str = ""
    git_repo_branch: str = "main"
    git_repo_dir: str = "."
    github_token: str = ""

    # Passed to the deployment runner
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""

    # Local state
    config_dir: str = "./configs"
    database_url: str = "sqlite:///./vpc_network.db"

    log_level: str = "INFO"

    @property
    def deployments_enabled(self) -> bool:
        return bool(self.pulumi_org and self.pulumi_access_token and self.git_repo_url)

    def stack_name(self, project: str, environment: str) -> str:
        return f"{project}-{environment}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
