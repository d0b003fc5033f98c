"""
Dataset loading and structure validation.

Fatal:
- file missing / unreadable        -> IoError
- bytes are not JSON               -> ParseError
- required top-level shape missing -> SchemaError

Tolerated:
- a location missing a configured vehicle-type slot gets a zero-filled
  slot and a structural warning
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from parking_validator.errors import ParseError, SchemaError
from parking_validator.utils.file_utils import read_text, write_json
from parking_validator.utils.logger import get_logger
from parking_validator.validation.parking_models import VehicleType

log = get_logger(__name__)


@dataclass
class LoadedDataset:
    path: Path
    raw_text: str
    data: Dict[str, Any]
    synthesized_slots: List[Tuple[int, VehicleType]] = field(default_factory=list)

    @property
    def locations(self) -> List[Dict[str, Any]]:
        return self.data["locations"]


def empty_slot() -> Dict[str, int]:
    return {"total": 0, "available": 0}


def parse_dataset(raw_text: str, source: str = "<memory>") -> Any:
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON format in {source}: {e.msg} (line {e.lineno}, column {e.colno})",
            line=e.lineno,
            column=e.colno,
        ) from e
    except ValueError as e:
        # int literals past the interpreter's digit limit
        raise ParseError(f"Invalid JSON format in {source}: {e}") from e


def validate_structure(
    data: Any,
    vehicle_types: List[VehicleType],
    logger: Optional[logging.Logger] = None,
) -> List[Tuple[int, VehicleType]]:
    """
    Check the required shape and fill in missing vehicle-type slots.

    Returns the (location index, vehicle type) of every synthesized slot.
    """
    logger = logger or log

    if not isinstance(data, dict):
        raise SchemaError(["Data must be a JSON object with \"locations\" and \"statistics\""])

    errors: List[str] = []
    locations = data.get("locations")
    statistics = data.get("statistics")

    if not isinstance(locations, list):
        errors.append('Data must contain "locations" array')

    if not isinstance(statistics, dict):
        errors.append('Data must contain "statistics" object')

    synthesized: List[Tuple[int, VehicleType]] = []
    if isinstance(locations, list):
        for index, location in enumerate(locations):
            if not isinstance(location, dict):
                errors.append(f"Location at index {index} must be an object")
                continue

            if not location.get("name"):
                errors.append(f'Location at index {index} missing "name"')

            for vt in vehicle_types:
                if not isinstance(location.get(vt.value), dict):
                    logger.warning(
                        f'Location "{location.get("name")}" missing "{vt.value}" data',
                        extra={"data": {"index": index, "vehicle_type": vt.value}},
                    )
                    location[vt.value] = empty_slot()
                    synthesized.append((index, vt))

    if errors:
        raise SchemaError(errors)

    return synthesized


def load_dataset(
    path: Path,
    vehicle_types: List[VehicleType],
    logger: Optional[logging.Logger] = None,
) -> LoadedDataset:
    logger = logger or log
    path = Path(path)

    logger.debug("Loading data file", extra={"data": {"path": str(path)}})
    raw_text = read_text(path)
    data = parse_dataset(raw_text, source=str(path))
    synthesized = validate_structure(data, vehicle_types, logger)

    logger.info(f"Data loaded: {len(data['locations'])} locations")
    return LoadedDataset(path=path, raw_text=raw_text, data=data, synthesized_slots=synthesized)


def save_dataset(path: Path, data: Dict[str, Any], logger: Optional[logging.Logger] = None) -> int:
    logger = logger or log
    size = write_json(path, data)
    logger.info(f"Data saved to: {path}")
    logger.debug(f"File size: {size} bytes")
    return size
