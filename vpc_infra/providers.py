"""AWS provider configuration."""

import pulumi
import pulumi_aws as aws

from vpc_infra.config import NetworkConfig


def default_tags(config: NetworkConfig, stack: str) -> dict[str, str]:
    """Tags applied by the provider to every resource it creates."""
    return {
        "ManagedBy": "Pulumi",
        "Project": config.project_name,
        "Stack": stack,
        **config.tags,
    }


def create_aws_provider(config: NetworkConfig) -> aws.Provider:
    """Create the AWS provider for the configured region.

    Credentials come from the environment (AWS_ACCESS_KEY_ID and friends,
    or the Pulumi Deployments runner).
    """
    return aws.Provider(
        f"{config.project_name}-aws",
        region=config.aws_region,
        default_tags=aws.ProviderDefaultTagsArgs(
            tags=default_tags(config, pulumi.get_stack()),
        ),
    )
