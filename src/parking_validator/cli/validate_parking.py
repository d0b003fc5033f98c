# src/parking_validator/cli/validate_parking.py

import argparse
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError

from parking_validator.application.validation_app import ParkingValidationApplication
from parking_validator.presentation.console import render_console_report
from parking_validator.utils.config import load_config
from parking_validator.utils.logger import configure_logging, shutdown_logging

# argparse dest -> AppConfig field
CONFIG_FIELDS = {
    "data": "data_path",
    "reports_dir": "report_dir",
    "backup_dir": "backup_dir",
    "log_dir": "log_dir",
    "mode": "mode",
    "threshold": "threshold",
    "max_backups": "max_backups",
    "dry_run": "dry_run",
    "force": "force",
    "verbose": "verbose",
    "log_level": "log_level",
    "backup": "backup",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate, fix and report on parking capacity data.",
        argument_default=argparse.SUPPRESS,
    )

    parser.add_argument("-m", "--mode", choices=["strict", "fix"],
                        help="strict reports out-of-range capacity; fix also corrects it.")
    parser.add_argument("-t", "--threshold", type=float,
                        help="Advisory utilization threshold (percent), shown in reports.")
    parser.add_argument("-b", "--max-backups", type=int, dest="max_backups",
                        help="Number of backup files to keep.")
    parser.add_argument("-d", "--dry-run", action="store_true", dest="dry_run",
                        help="Compute and report only: no backup, no save, no cleanup.")
    parser.add_argument("-f", "--force", action="store_true",
                        help="Correct out-of-range capacity values (clamp to bounds).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Echo structured log payloads to the console.")
    parser.add_argument("-l", "--log-level", choices=["error", "warn", "info", "debug"], dest="log_level")
    parser.add_argument("--backup", action=argparse.BooleanOptionalAction,
                        help="Create a backup before saving (default: on).")

    parser.add_argument("--data", type=str, help="Path to the parking data JSON file.")
    parser.add_argument("--reports-dir", type=str, dest="reports_dir")
    parser.add_argument("--backup-dir", type=str, dest="backup_dir")
    parser.add_argument("--log-dir", type=str, dest="log_dir")

    return parser.parse_args(argv)


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Only flags the user actually passed; everything else comes from env/defaults."""
    return {field: getattr(args, dest) for dest, field in CONFIG_FIELDS.items() if hasattr(args, dest)}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(**config_overrides(args))
    except (ValidationError, SettingsError) as exc:
        print(f"ERROR: invalid configuration\n{exc}", file=sys.stderr)
        return 1

    try:
        logger = configure_logging(config)
    except OSError as exc:
        print(f"ERROR: cannot open log directory {config.log_dir}: {exc}", file=sys.stderr)
        return 1

    try:
        result = ParkingValidationApplication(config, logger).run()

        if result.success:
            print(render_console_report(result.report))
            return 0

        print(f"\n❌ Validation failed: {result.error}", file=sys.stderr)
        return 1

    except Exception as exc:
        logger.error("Unexpected error", exc_info=True)
        print(f"\n💥 Unexpected error: {exc}", file=sys.stderr)
        return 1

    finally:
        shutdown_logging(logger)


if __name__ == "__main__":
    sys.exit(main())
