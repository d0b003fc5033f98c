# src/parking_validator/updates/pending_updates.py

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

import pandas as pd

from parking_validator.errors import SchemaError
from parking_validator.utils.file_utils import ensure_directories, read_text, write_json
from parking_validator.utils.logger import get_logger
from parking_validator.utils.timestamps import iso_timestamp, utc_now
from parking_validator.validation.dataset_loader import parse_dataset
from parking_validator.validation.parking_models import VehicleType

log = get_logger(__name__)

NOTES_MAX_LENGTH = 500


@dataclass
class UpdateValidationSummary:
    valid: int = 0
    invalid: int = 0
    cleaned: List[Dict[str, Any]] = field(default_factory=list)
    invalid_file: Optional[Path] = None


# ============================================================
# FIELD CHECKS
# ============================================================

def _is_count(value: Any) -> bool:
    """Numeric (or numeric string), finite and non-negative."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, float):
        num = value
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return False
    else:
        return False
    return math.isfinite(num) and num >= 0


def _parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return None
    try:
        ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def check_update(update: Any, known_locations: Set[str]) -> List[str]:
    """All problems with one queued update; empty when it is usable."""
    if not isinstance(update, dict):
        return ["Update must be an object"]

    errors: List[str] = []
    location_id = update.get("location_id")

    if not _non_empty_string(location_id):
        errors.append("Missing or invalid location_id")
    elif location_id.strip() not in known_locations:
        errors.append(f"Invalid location_id: {location_id}")

    if not _non_empty_string(update.get("petugas_name")):
        errors.append("Missing or invalid petugas_name")

    for vt in VehicleType:
        if vt.value in update and not _is_count(update[vt.value]):
            errors.append(f"Invalid {vt.value} value")

    if update.get("timestamp") and _parse_timestamp(update["timestamp"]) is None:
        errors.append("Invalid timestamp")

    return errors


def normalize_update(update: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {
        "location_id": update["location_id"].strip(),
        "petugas_name": update["petugas_name"].strip(),
        "timestamp": update.get("timestamp") or iso_timestamp(now),
        "status": "pending",
    }

    for vt in VehicleType:
        if vt.value in update:
            value = update[vt.value]
            cleaned[vt.value] = value if isinstance(value, int) else int(float(value))

    notes = update.get("notes")
    if notes:
        cleaned["notes"] = str(notes)[:NOTES_MAX_LENGTH]

    return cleaned


# ============================================================
# QUEUE
# ============================================================

def known_location_names(dataset_path: Path, logger: Optional[logging.Logger] = None) -> Set[str]:
    """Location names from the parking dataset (read only). Empty if the file is absent."""
    logger = logger or log
    dataset_path = Path(dataset_path)
    if not dataset_path.exists():
        logger.warning(f"Parking data not found, no locations to match: {dataset_path}")
        return set()

    data = parse_dataset(read_text(dataset_path), source=str(dataset_path))
    locations = data.get("locations") if isinstance(data, dict) else None
    if not isinstance(locations, list):
        raise SchemaError(['Data must contain "locations" array'])

    return {
        loc["name"].strip()
        for loc in locations
        if isinstance(loc, dict) and isinstance(loc.get("name"), str)
    }


def validate_and_clean_updates(
    pending_path: Path,
    dataset_path: Path,
    invalid_dir: Path,
    logger: Optional[logging.Logger] = None,
    now: Callable[[], datetime] = utc_now,
) -> UpdateValidationSummary:
    """
    Keep only valid queued updates (normalized) in the pending file and
    archive the rejected ones next to it for debugging.
    """
    logger = logger or log
    pending_path = Path(pending_path)

    if not pending_path.exists():
        logger.info("No pending updates file found")
        return UpdateValidationSummary()

    known = known_location_names(dataset_path, logger)

    updates = parse_dataset(read_text(pending_path), source=str(pending_path))
    if not isinstance(updates, list):
        raise SchemaError(["Pending updates file must contain a JSON array"])

    moment = now()
    summary = UpdateValidationSummary()
    rejected: List[Dict[str, Any]] = []

    for update in updates:
        errors = check_update(update, known)
        if errors:
            rejected.append({"original": update, "errors": errors, "failed_at": iso_timestamp(moment)})
        else:
            summary.cleaned.append(normalize_update(update, moment))

    write_json(pending_path, summary.cleaned)

    if rejected:
        ensure_directories([Path(invalid_dir)], logger)
        summary.invalid_file = Path(invalid_dir) / f"invalid-{int(moment.timestamp() * 1000)}.json"
        write_json(summary.invalid_file, rejected)
        logger.warning(
            f"Archived {len(rejected)} invalid updates: {summary.invalid_file}",
            extra={"data": {"errors": [r["errors"] for r in rejected]}},
        )

    summary.valid = len(summary.cleaned)
    summary.invalid = len(rejected)
    logger.info(f"Validated updates: {summary.valid} valid, {summary.invalid} invalid")
    return summary
