"""Shared fixtures.

The API modules read their settings and open their stores at import time,
so point them at a scratch directory before anything imports vpc_api.
"""

import os
import tempfile

import pytest

_STATE_DIR = tempfile.mkdtemp(prefix="vpc-network-tests-")
os.environ["CONFIG_DIR"] = os.path.join(_STATE_DIR, "configs")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_STATE_DIR, 'deployments.db')}"
for _name in ("PULUMI_ORG", "PULUMI_ACCESS_TOKEN", "GIT_REPO_URL"):
    os.environ.pop(_name, None)

from vpc_infra.config import NetworkConfig  # noqa: E402

DEMO_ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]


@pytest.fixture
def demo_config() -> NetworkConfig:
    """Two public subnets, one private, CI build 42."""
    return NetworkConfig(
        project_name="demo",
        vpc_cidr="10.0.0.0/16",
        public_subnet_cidrs=("10.0.0.0/24", "10.0.2.0/24"),
        private_subnet_cidrs=("10.0.1.0/24",),
        ci_build_suffix="-042",
    )


@pytest.fixture
def demo_zones() -> list[str]:
    return list(DEMO_ZONES)


@pytest.fixture
def demo_mapping() -> dict:
    return {
        "project_name": "demo",
        "vpc_cidr": "10.0.0.0/16",
        "subnet_configuration": {
            "public": ["10.0.0.0/24", "10.0.2.0/24"],
            "private": ["10.0.1.0/24"],
        },
        "ci_build_suffix": "-042",
        "availability_zones": list(DEMO_ZONES),
    }
