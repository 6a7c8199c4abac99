"""VPC network - Main entry point for Pulumi infrastructure deployment."""

import pulumi

from vpc_infra.components.networking import Networking
from vpc_infra.config import load_network_config
from vpc_infra.plan import build_network_plan
from vpc_infra.providers import create_aws_provider
from vpc_infra.zones import lookup_availability_zones, shuffle_zones

# Load network configuration from stack config
config = load_network_config()

# AWS provider for the target region
aws_provider = create_aws_provider(config)

# 1. Availability zones: configured list, or every available zone in the region.
# Shuffled with the stack name as seed so the order is stable across updates.
zones = list(config.availability_zones) or lookup_availability_zones(aws_provider)
az_pool = shuffle_zones(zones, seed=pulumi.get_stack())

# 2. Plan (validation errors abort the update here, before any resource exists)
plan = build_network_plan(config, az_pool)

# 3. Networking (VPC, subnets, internet gateway, route tables, NACL)
networking = Networking(
    name=config.project_name,
    plan=plan,
    provider=aws_provider,
    tags=config.tags,
)

# Exports
for key, value in networking.outputs().items():
    pulumi.export(key, value)
pulumi.export("availability_zones", list(plan.availability_zones))
