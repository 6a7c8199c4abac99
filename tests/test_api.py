"""Tests for the HTTP API."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from vpc_api.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _body(project: str = "demo", public=None, private=None, **extra) -> dict:
    return {
        "project_name": project,
        "vpc_cidr": "10.0.0.0/16",
        "subnet_configuration": {
            "public": ["10.0.0.0/24", "10.0.2.0/24"] if public is None else public,
            "private": ["10.0.1.0/24"] if private is None else private,
        },
        "ci_build_suffix": "-042",
        **extra,
    }


ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestPlans:
    """Tests for POST /api/v1/plans."""

    def test_preview(self, client) -> None:
        response = client.post("/api/v1/plans", json={"config": _body(), "availability_zones": ZONES})
        assert response.status_code == 200

        body = response.json()
        plan = body["plan"]
        assert body["warnings"] == []
        assert plan["internet_gateway"]["name"] == "demo-igw-042"
        assert [s["name"] for s in plan["public_subnets"]] == ["demo-pub-sn-az-1-042", "demo-pub-sn-az-2-042"]
        assert plan["private_subnets"][0]["availability_zone"] == "us-east-1c"
        assert len(plan["network_acl"]["associations"]) == 3

    def test_zones_from_config(self, client) -> None:
        config = _body(availability_zones=["eu-west-1a", "eu-west-1b", "eu-west-1c"])
        response = client.post("/api/v1/plans", json={"config": config})
        assert response.status_code == 200
        assert response.json()["plan"]["public_subnets"][0]["availability_zone"] == "eu-west-1a"

    def test_empty_topology_warns(self, client) -> None:
        config = _body(public=[], private=[])
        response = client.post("/api/v1/plans", json={"config": config, "availability_zones": ZONES})
        assert response.status_code == 200

        body = response.json()
        assert body["plan"]["internet_gateway"] is None
        assert body["plan"]["network_acl"]["associations"] == []
        assert len(body["warnings"]) == 1

    def test_overlap_rejected(self, client) -> None:
        config = _body(public=["10.0.0.0/24"], private=["10.0.0.0/25"])
        response = client.post("/api/v1/plans", json={"config": config, "availability_zones": ZONES})
        assert response.status_code == 422

        body = response.json()
        assert body["error"] == "OverlappingSubnets"
        assert body["rule"] == "no-overlap"
        assert len(body["value"]) == 2

    def test_insufficient_zones(self, client) -> None:
        response = client.post(
            "/api/v1/plans", json={"config": _body(), "availability_zones": ["us-east-1a"]}
        )
        assert response.status_code == 422
        assert response.json()["error"] == "InsufficientAvailabilityZones"

    def test_invalid_cidr(self, client) -> None:
        config = _body(public=["10.0.0.0/33"])
        response = client.post("/api/v1/plans", json={"config": config, "availability_zones": ZONES})
        assert response.status_code == 422
        assert response.json()["error"] == "InvalidConfig"
        assert response.json()["value"] == "10.0.0.0/33"

    def test_bad_project_name(self, client) -> None:
        config = _body(project="not a slug")
        response = client.post("/api/v1/plans", json={"config": config, "availability_zones": ZONES})
        assert response.status_code == 422
        assert "detail" in response.json()


class TestConfig:
    """Tests for the config endpoints."""

    def test_save_get_delete(self, client) -> None:
        url = "/api/v1/projects/cfg/environments/dev/config"

        response = client.post(url, json=_body(project="cfg"))
        assert response.status_code == 200
        assert response.json()["message"] == "Configuration saved"

        response = client.get(url)
        assert response.status_code == 200
        config = response.json()["config"]
        assert config["subnet_configuration"]["private"] == ["10.0.1.0/24"]
        assert config["ci_build_suffix"] == "-042"

        assert client.delete(url).status_code == 200
        assert client.get(url).status_code == 404

    def test_invalid_config_not_saved(self, client) -> None:
        url = "/api/v1/projects/badcfg/environments/dev/config"
        response = client.post(url, json=_body(project="badcfg", private=["192.168.0.0/24"]))

        assert response.status_code == 422
        assert response.json()["rule"] == "containment"
        assert client.get(url).status_code == 404

    def test_region_must_be_an_aws_name(self, client) -> None:
        url = "/api/v1/projects/badregion/environments/dev/config"
        response = client.post(url, json=_body(project="badregion", aws_region="us-east-1; id"))

        assert response.status_code == 422
        assert client.get(url).status_code == 404

    def test_delete_missing(self, client) -> None:
        response = client.delete("/api/v1/projects/nothing/environments/dev/config")
        assert response.status_code == 404


class TestDeployments:
    """Tests for the deployment endpoints that do not reach Pulumi."""

    def test_deploy_without_config(self, client) -> None:
        response = client.post("/api/v1/projects/unsaved/environments/dev/deploy", json={})
        assert response.status_code == 404
        assert "Save config first" in response.json()["detail"]

    def test_status_missing(self, client) -> None:
        response = client.get("/api/v1/projects/unknown/environments/dev/status")
        assert response.status_code == 404

    def test_destroy_requires_confirm(self, client) -> None:
        response = client.request(
            "DELETE", "/api/v1/projects/demo/environments/dev", json={"confirm": False}
        )
        assert response.status_code == 400

    def test_destroy_missing(self, client) -> None:
        response = client.request(
            "DELETE", "/api/v1/projects/unknown/environments/dev", json={"confirm": True}
        )
        assert response.status_code == 404

    def test_list(self, client) -> None:
        response = client.get("/api/v1/projects")
        assert response.status_code == 200
        assert isinstance(response.json(), list)

    def test_deploy_needs_pulumi_settings(self, client) -> None:
        client.post("/api/v1/projects/nopulumi/environments/dev/config", json=_body(project="nopulumi"))

        response = client.post("/api/v1/projects/nopulumi/environments/dev/deploy", json={})
        assert response.status_code == 503
        assert client.get("/api/v1/projects/nopulumi/environments/dev/status").status_code == 404


def test_stack_naming() -> None:
    from vpc_api.settings import Settings

    settings = Settings(pulumi_org="acme", pulumi_project="vpc-network")
    assert settings.stack_name("demo", "dev") == "demo-dev"


def test_deployment_model_reads_records() -> None:
    from vpc_api.database import DeploymentRecord
    from vpc_api.models import Deployment, DeploymentStatus

    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    record = DeploymentRecord(
        id=7,
        project="demo",
        environment="dev",
        stack_name="demo-dev",
        aws_region="us-east-1",
        status=DeploymentStatus.SUCCEEDED,
        created_at=now,
        updated_at=now,
    )

    deployment = Deployment.model_validate(record)
    assert deployment.stack_name == "demo-dev"
    assert deployment.status == DeploymentStatus.SUCCEEDED
