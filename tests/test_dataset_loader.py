"""
Tests for dataset loading and structure validation

Run with: pytest tests/test_dataset_loader.py -v
"""

import json
import logging

import pytest

from parking_validator.errors import IoError, ParseError, SchemaError, ValidatorError
from parking_validator.validation.dataset_loader import (
    load_dataset,
    parse_dataset,
    save_dataset,
    validate_structure,
)
from parking_validator.validation.parking_models import VehicleType

ALL_TYPES = list(VehicleType)


class TestLoadDataset:
    def test_loads_and_keeps_raw_text(self, tmp_path, write_dataset, two_locations):
        path = write_dataset(tmp_path / "parkir-data.json", two_locations)
        loaded = load_dataset(path, ALL_TYPES)

        assert loaded.raw_text == path.read_text(encoding="utf-8")
        assert [loc["name"] for loc in loaded.locations] == ["A", "B"]
        assert loaded.synthesized_slots == []

    def test_missing_file_names_path(self, tmp_path):
        path = tmp_path / "nope.json"
        with pytest.raises(IoError) as exc_info:
            load_dataset(path, ALL_TYPES)

        assert str(path) in str(exc_info.value)
        assert exc_info.value.exit_code == 1

    def test_malformed_json_is_parse_error(self, tmp_path, write_dataset):
        path = write_dataset(tmp_path / "bad.json", '{"locations": [\n  {"name": "A",,}\n]}')
        with pytest.raises(ParseError) as exc_info:
            load_dataset(path, ALL_TYPES)

        err = exc_info.value
        assert not isinstance(err, SchemaError)
        assert err.line == 2
        assert "Invalid JSON format" in str(err)


class TestValidateStructure:
    @pytest.mark.parametrize(
        "data, problem",
        [
            ({"statistics": {}}, 'Data must contain "locations" array'),
            ({"locations": {}, "statistics": {}}, 'Data must contain "locations" array'),
            ({"locations": []}, 'Data must contain "statistics" object'),
            ({"locations": ["x"], "statistics": {}}, "Location at index 0 must be an object"),
            ({"locations": [{"bus": {}}], "statistics": {}}, 'Location at index 0 missing "name"'),
        ],
    )
    def test_schema_problems(self, data, problem):
        with pytest.raises(SchemaError) as exc_info:
            validate_structure(data, ALL_TYPES)

        assert problem in exc_info.value.problems
        assert str(exc_info.value).startswith("Data structure validation failed:")

    def test_top_level_array_rejected(self):
        with pytest.raises(SchemaError):
            validate_structure([], ALL_TYPES)

    def test_all_problems_reported_together(self):
        with pytest.raises(SchemaError) as exc_info:
            validate_structure({}, ALL_TYPES)
        assert len(exc_info.value.problems) == 2

    def test_missing_slot_synthesized_with_warning(self, caplog):
        data = {"locations": [{"name": "A", "bus": {"total": 1, "available": 1}}], "statistics": {}}
        with caplog.at_level(logging.WARNING):
            synthesized = validate_structure(data, ALL_TYPES)

        assert synthesized == [(0, VehicleType.MOBIL), (0, VehicleType.MOTOR)]
        assert data["locations"][0]["mobil"] == {"total": 0, "available": 0}
        assert 'Location "A" missing "motor" data' in caplog.text

    def test_errors_are_validator_errors(self):
        assert issubclass(SchemaError, ValidatorError)
        assert issubclass(ParseError, ValidatorError)


def test_parse_dataset_reports_source():
    with pytest.raises(ParseError) as exc_info:
        parse_dataset("{", source="input.json")
    assert "input.json" in str(exc_info.value)


def test_save_dataset_pretty_prints(tmp_path, two_locations):
    path = tmp_path / "out.json"
    size = save_dataset(path, two_locations)

    text = path.read_text(encoding="utf-8")
    assert size == len(text.encode("utf-8"))
    assert json.loads(text) == two_locations
    assert '\n  "locations"' in text
