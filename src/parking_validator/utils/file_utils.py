# src/parking_validator/utils/file_utils.py

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from parking_validator.errors import IoError
from parking_validator.utils.logger import get_logger

log = get_logger(__name__)


def ensure_directories(dirs: Iterable[Path], logger: Optional[logging.Logger] = None) -> None:
    """Create any missing directory (with parents)."""
    logger = logger or log
    for directory in dirs:
        directory = Path(directory)
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {directory}")


def read_text(path: Path) -> str:
    path = Path(path)
    if not path.exists():
        raise IoError(f"Data file not found: {path}", path=str(path))
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoError(f"Failed to read {path}: {e}", path=str(path)) from e


def write_text(path: Path, text: str) -> int:
    """Write text, returning the size in bytes."""
    path = Path(path)
    try:
        data = text.encode("utf-8")
        path.write_bytes(data)
    except OSError as e:
        raise IoError(f"Failed to write {path}: {e}", path=str(path)) from e
    return len(data)


def to_json(obj: Any) -> str:
    """Pretty-printed JSON (2-space indent, non-ASCII kept)."""
    return json.dumps(obj, indent=2, ensure_ascii=False, default=str)


def write_json(path: Path, obj: Any) -> int:
    return write_text(path, to_json(obj))
