# src/parking_validator/services/retention.py

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Callable, List, Optional

from parking_validator.reports.report_builder import LATEST_REPORT_NAME, REPORT_PREFIX
from parking_validator.services.backup import BACKUP_PREFIX, BACKUP_SUFFIX
from parking_validator.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class RetentionResult:
    backups_removed: List[Path] = field(default_factory=list)
    reports_removed: List[Path] = field(default_factory=list)


def _matching(directory: Path, prefix: str, suffix: str) -> List[Path]:
    if not directory.exists():
        return []
    return [
        directory / name
        for name in os.listdir(directory)
        if name.startswith(prefix) and name.endswith(suffix)
    ]


class RetentionManager:
    """
    Backups: keep the newest ``max_backups`` by modification time.
    Reports: drop dated reports older than ``retention_days``; the latest
    alias is never removed.
    """

    def __init__(
        self,
        backup_dir: Path,
        report_dir: Path,
        max_backups: int,
        retention_days: int = 30,
        logger: Optional[logging.Logger] = None,
        now: Callable[[], float] = time.time,
    ):
        self.backup_dir = Path(backup_dir)
        self.report_dir = Path(report_dir)
        self.max_backups = max_backups
        self.retention_days = retention_days
        self.logger = logger or log
        self.now = now

    def prune_backups(self, removed: Optional[List[Path]] = None) -> List[Path]:
        """Delete backups beyond the newest N, appending each one to ``removed`` as it goes."""
        removed = [] if removed is None else removed
        backups = sorted(
            _matching(self.backup_dir, BACKUP_PREFIX, BACKUP_SUFFIX),
            key=lambda p: (os.path.getmtime(p), p.name),
            reverse=True,
        )

        for path in backups[self.max_backups:]:
            os.remove(path)
            removed.append(path)
            self.logger.debug(f"Removed old backup: {path.name}")
        return removed

    def prune_reports(self, removed: Optional[List[Path]] = None) -> List[Path]:
        removed = [] if removed is None else removed
        cutoff = self.now() - timedelta(days=self.retention_days).total_seconds()

        for path in _matching(self.report_dir, REPORT_PREFIX, ".json"):
            if path.name == LATEST_REPORT_NAME:
                continue
            if os.path.getmtime(path) < cutoff:
                os.remove(path)
                removed.append(path)
                self.logger.debug(f"Removed old report: {path.name}")
        return removed

    def run(self) -> RetentionResult:
        """Prune both directories. Filesystem errors are logged, not raised."""
        result = RetentionResult()
        steps = (
            ("backups", self.prune_backups, result.backups_removed),
            ("reports", self.prune_reports, result.reports_removed),
        )
        for target, prune, removed in steps:
            try:
                prune(removed)
            except OSError as e:
                self.logger.warning(
                    "Cleanup failed",
                    extra={"data": {"target": target, "error": str(e)}},
                )

        self.logger.info(
            f"Cleanup complete: {len(result.backups_removed)} backups and "
            f"{len(result.reports_removed)} reports deleted."
        )
        return result
