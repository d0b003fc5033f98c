# src/parking_validator/application/validation_app.py

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Dict, Optional

from parking_validator.errors import ValidatorError
from parking_validator.reports.report_builder import build_report, write_reports
from parking_validator.reports.text_summary import render_text_summary
from parking_validator.services.backup import create_backup
from parking_validator.services.retention import RetentionManager
from parking_validator.utils.config import AppConfig
from parking_validator.utils.file_utils import ensure_directories
from parking_validator.utils.git_info import get_git_info
from parking_validator.utils.logger import get_logger
from parking_validator.utils.timestamps import utc_now
from parking_validator.validation.aggregator import aggregate, apply_statistics
from parking_validator.validation.dataset_loader import load_dataset, save_dataset
from parking_validator.validation.parking_models import ProcessingMetrics, RunResult
from parking_validator.validation.record_processor import RecordProcessor

log = get_logger(__name__)


class ParkingValidationApplication:
    """
    Application-layer orchestration for one validation run.

    Load -> backup -> process -> aggregate -> persist -> report -> cleanup.
    Fatal errors become a failed RunResult; nothing is raised to the caller.
    """

    def __init__(
        self,
        config: AppConfig,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
        git_info: Callable[[], Dict[str, str]] = get_git_info,
    ):
        self.config = config
        self.logger = logger or log
        self.clock = clock
        self.now = now
        self.git_info = git_info

    def _elapsed_ms(self, started: float) -> int:
        return int((self.clock() - started) * 1000)

    def run(self) -> RunResult:
        cfg = self.config
        started = self.clock()
        metrics = ProcessingMetrics()

        try:
            self.logger.info("Starting parking data validation", extra={"data": cfg.summary()})

            ensure_directories(
                [cfg.backup_dir, cfg.report_dir, cfg.data_path.parent],
                self.logger,
            )

            # 1. Load + structure check
            loaded = load_dataset(cfg.data_path, cfg.vehicle_types, self.logger)

            # 2. Backup of the untouched input
            backup = None
            if cfg.dry_run:
                self.logger.info("Dry-run mode: Skipping backup")
            elif cfg.backup:
                backup = create_backup(loaded.raw_text, cfg.backup_dir, self.now(), self.logger)

            # 3. Per-location validation
            processor = RecordProcessor(cfg, self.logger, clock=self.clock, now=self.now)
            processing = processor.process(
                loaded.data,
                started_at=started,
                synthesized=loaded.synthesized_slots,
            )
            metrics = processing.metrics

            # 4. Dataset-wide statistics
            stats = aggregate(
                processing,
                loaded.data.get("statistics"),
                validation_mode=cfg.mode,
                total_locations=len(loaded.locations),
                moment=self.now(),
            )
            apply_statistics(loaded.data, stats, self._elapsed_ms(started))
            self.logger.info("Statistics updated successfully")

            # 5. Persist
            if cfg.dry_run:
                self.logger.info("Dry-run mode: Changes not saved")
            else:
                save_dataset(cfg.data_path, loaded.data, self.logger)

            # 6. Reports
            report = build_report(
                loaded.data,
                processing,
                stats,
                cfg,
                processing_time_ms=self._elapsed_ms(started),
                backup=backup,
                git_info=self.git_info(),
                moment=self.now(),
            )
            files = write_reports(report, render_text_summary(report), cfg.report_dir)
            self.logger.info(f"Report generated: {files.dated}")
            self.logger.info(f"Text summary generated: {files.summary}")

            # 7. Retention
            if not cfg.dry_run:
                RetentionManager(
                    cfg.backup_dir,
                    cfg.report_dir,
                    max_backups=cfg.max_backups,
                    retention_days=cfg.report_retention_days,
                    logger=self.logger,
                ).run()

            metrics.processing_time_ms = self._elapsed_ms(started)
            self.logger.info(f"Validation completed in {metrics.processing_time_ms}ms")
            self.logger.info(f"Processed {metrics.locations_processed} locations")
            self.logger.info(f"Found {metrics.issues_found} issues, applied {metrics.fixes_applied} fixes")

            return RunResult(
                success=True,
                metrics=metrics,
                report=report,
                statistics=stats,
                processing=processing,
                backup=backup,
            )

        except ValidatorError as e:
            metrics.processing_time_ms = self._elapsed_ms(started)
            self.logger.error(
                "Validation failed",
                exc_info=True,
                extra={"data": {"error": str(e), "error_type": type(e).__name__}},
            )
            return RunResult(success=False, metrics=metrics, error=str(e), error_type=type(e).__name__)

        except Exception as e:
            metrics.processing_time_ms = self._elapsed_ms(started)
            self.logger.error(
                "Unexpected error during validation",
                exc_info=True,
                extra={"data": {"error": str(e), "error_type": type(e).__name__}},
            )
            return RunResult(success=False, metrics=metrics, error=str(e), error_type=type(e).__name__)
