# src/parking_validator/services/backup.py

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from parking_validator.errors import IoError
from parking_validator.utils.file_utils import write_text
from parking_validator.utils.logger import get_logger
from parking_validator.utils.timestamps import file_timestamp
from parking_validator.validation.parking_models import BackupInfo

BACKUP_PREFIX = "parkir-data-backup-"
BACKUP_SUFFIX = ".json"

log = get_logger(__name__)


def create_backup(
    raw_text: str,
    backup_dir: Path,
    moment: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> BackupInfo:
    """Snapshot the pre-run dataset text into the backup directory."""
    logger = logger or log
    stamp = file_timestamp(moment)
    backup_file = Path(backup_dir) / f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"

    try:
        size = write_text(backup_file, raw_text)
    except IoError as e:
        raise IoError(f"Failed to create backup: {e}", path=str(backup_file)) from e

    logger.info(f"Backup created: {backup_file}", extra={"data": {"size": size}})
    return BackupInfo(file=str(backup_file), timestamp=stamp, size=size)
