"""
Shared fixtures for parking validator tests.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from parking_validator.utils.config import AppConfig

FIXED_NOW = datetime(2026, 1, 16, 8, 30, 0, tzinfo=timezone.utc)


def slot(total, available):
    return {"total": total, "available": available}


@pytest.fixture
def two_locations():
    """Locations A and B: 105 total spaces, 55 available."""
    return {
        "locations": [
            {"name": "A", "bus": slot(10, 3), "mobil": slot(20, 10), "motor": slot(30, 20)},
            {"name": "B", "bus": slot(5, 2), "mobil": slot(15, 5), "motor": slot(25, 15)},
        ],
        "statistics": {},
    }


@pytest.fixture
def make_config(tmp_path):
    """AppConfig with every path under tmp_path; keyword overrides on top."""

    def _make(**overrides):
        values = {
            "data_path": tmp_path / "data" / "parkir-data.json",
            "backup_dir": tmp_path / "data" / "backups",
            "report_dir": tmp_path / "data" / "reports",
            "log_dir": tmp_path / "data" / "logs",
            "pending_updates_path": tmp_path / "data" / "pending-updates.json",
            "invalid_updates_dir": tmp_path / "data" / "updates" / "invalid",
        }
        values.update(overrides)
        return AppConfig(**values)

    return _make


@pytest.fixture
def write_dataset():
    def _write(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fixed_now():
    return lambda: FIXED_NOW
