"""Tests for JsonFileRuntimeProperties - persistent runtime properties."""

import json
from pathlib import Path

import jsonschema
import pytest

from versionflow.domain.exceptions import UserConfigurationError
from versionflow.domain.models import NodePath
from versionflow.infrastructure.persistence.filesystem import JsonFileRuntimeProperties
from versionflow.schemas import get_runtime_properties_schema, validate_runtime_properties


def write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        properties = JsonFileRuntimeProperties(tmp_path / "missing.json")

        assert properties.initial_properties() == {}

    def test_loads_scoped_properties(self, tmp_path: Path) -> None:
        path = write_json(
            tmp_path / "properties.json",
            {
                "version": "1.0",
                "properties": {
                    "CAN_REUSE_DYNAMIC_VERSION": "ALWAYS",
                    "app.core.CURRENT_PHASE": "beta",
                    "CONTINUOUS_RELEASE_MAPPING.main": "D/master:S/1.0",
                },
            },
        )

        properties = JsonFileRuntimeProperties(path)

        assert properties.path == path
        assert properties.get_property(NodePath.parse("app/core"), "CURRENT_PHASE") == "beta"
        assert properties.get_property(None, "CAN_REUSE_DYNAMIC_VERSION") == "ALWAYS"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "properties.json"
        path.write_text("{not json")

        with pytest.raises(UserConfigurationError, match="not valid JSON"):
            JsonFileRuntimeProperties(path)

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"properties": []},
            {"properties": {"NAME": 1}},
            {"properties": {"lowercase": "x"}},
            {"properties": {}, "extra": True},
        ],
    )
    def test_schema_violation(self, tmp_path: Path, data: object) -> None:
        path = write_json(tmp_path / "properties.json", data)

        with pytest.raises(UserConfigurationError, match="Invalid runtime properties"):
            JsonFileRuntimeProperties(path)


class TestSave:
    def test_save_writes_merged_properties(self, tmp_path: Path) -> None:
        path = write_json(
            tmp_path / "properties.json",
            {"properties": {"CURRENT_PHASE": "beta", "REUSE_BASE_VERSION": "D/master"}},
        )
        properties = JsonFileRuntimeProperties(path)
        properties.set_property(None, "REUSE_BASE_VERSION", None)
        properties.set_property(NodePath.parse("app"), "CAN_REUSE_BASE_VERSION", "NEVER")

        properties.save()

        data = json.loads(path.read_text())
        assert data == {
            "version": "1.0",
            "properties": {"CURRENT_PHASE": "beta", "app.CAN_REUSE_BASE_VERSION": "NEVER"},
        }
        assert not path.with_suffix(".tmp").exists()

    def test_saved_file_reloads(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "properties.json"
        properties = JsonFileRuntimeProperties(path)
        properties.set_property(None, "REUSE_DYNAMIC_VERSION", "D/feature")
        properties.save()

        reloaded = JsonFileRuntimeProperties(path)

        assert reloaded.get_property(None, "REUSE_DYNAMIC_VERSION") == "D/feature"
        validate_runtime_properties(json.loads(path.read_text()))


class TestSchema:
    def test_schema_is_valid_draft7(self) -> None:
        jsonschema.Draft7Validator.check_schema(get_runtime_properties_schema())

    def test_validate_raises_validation_error(self) -> None:
        with pytest.raises(jsonschema.ValidationError):
            validate_runtime_properties({"properties": {"NAME": None}})
