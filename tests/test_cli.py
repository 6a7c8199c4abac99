"""Tests for the vpc-plan command line."""

import json

import pytest
import yaml

from vpc_infra.cli import main


@pytest.fixture
def config_file(tmp_path, demo_mapping):
    path = tmp_path / "network.yml"
    path.write_text(yaml.safe_dump(demo_mapping))
    return path


class TestPlanCommand:
    """Tests for `vpc-plan plan`."""

    def test_prints_plan(self, config_file, capsys) -> None:
        main(["plan", str(config_file)])

        plan = json.loads(capsys.readouterr().out)
        assert plan["vpc"]["name"] == "demo-vpc-042"
        assert [s["availability_zone"] for s in plan["public_subnets"]] == ["us-east-1a", "us-east-1b"]
        assert plan["private_subnets"][0]["availability_zone"] == "us-east-1c"

    def test_zones_override(self, config_file, capsys) -> None:
        main(["plan", str(config_file), "--zones", "eu-west-1b,eu-west-1a,eu-west-1c"])

        plan = json.loads(capsys.readouterr().out)
        assert plan["public_subnets"][0]["availability_zone"] == "eu-west-1b"

    def test_seeded_shuffle_is_stable(self, config_file, capsys) -> None:
        main(["plan", str(config_file), "--seed", "prod"])
        first = capsys.readouterr().out
        main(["plan", str(config_file), "--seed", "prod"])
        assert capsys.readouterr().out == first

    def test_writes_output_file(self, config_file, tmp_path, capsys) -> None:
        output = tmp_path / "plan.json"
        main(["plan", str(config_file), "-o", str(output)])

        assert "demo-vpc-042" in capsys.readouterr().out
        assert json.loads(output.read_text())["network_acl"]["name"] == "demo-nacl-042"

    def test_overlap_exits_2(self, tmp_path, demo_mapping, capsys) -> None:
        demo_mapping["subnet_configuration"] = {"public": ["10.0.0.0/24"], "private": ["10.0.0.0/25"]}
        path = tmp_path / "overlap.yml"
        path.write_text(yaml.safe_dump(demo_mapping))

        with pytest.raises(SystemExit) as exc_info:
            main(["plan", str(path)])

        assert exc_info.value.code == 2
        assert "OverlappingSubnets" in capsys.readouterr().err

    def test_too_few_zones_exits_2(self, config_file, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["plan", str(config_file), "--zones", "us-east-1a"])

        assert exc_info.value.code == 2
        assert "InsufficientAvailabilityZones" in capsys.readouterr().err

    def test_missing_file_exits_2(self, tmp_path, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["plan", str(tmp_path / "missing.yml")])

        assert exc_info.value.code == 2
        assert "not found" in capsys.readouterr().err


class TestValidateCommand:
    """Tests for `vpc-plan validate`."""

    def test_valid(self, config_file, capsys) -> None:
        main(["validate", str(config_file)])
        assert "with 3 subnets is valid" in capsys.readouterr().out

    def test_outside_vpc(self, tmp_path, demo_mapping, capsys) -> None:
        demo_mapping["subnet_configuration"] = {"public": ["172.16.0.0/24"]}
        path = tmp_path / "outside.yml"
        path.write_text(yaml.safe_dump(demo_mapping))

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", str(path)])

        assert exc_info.value.code == 2
        assert "InvalidConfig" in capsys.readouterr().err
