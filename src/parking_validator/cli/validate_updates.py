# src/parking_validator/cli/validate_updates.py

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError
from pydantic_settings import SettingsError

from parking_validator.errors import ValidatorError
from parking_validator.updates.pending_updates import validate_and_clean_updates
from parking_validator.utils.config import load_config
from parking_validator.utils.logger import configure_logging, shutdown_logging

CONFIG_FIELDS = {
    "pending": "pending_updates_path",
    "data": "data_path",
    "invalid_dir": "invalid_updates_dir",
    "log_dir": "log_dir",
    "log_level": "log_level",
    "verbose": "verbose",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate and clean the pending parking-update queue.",
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument("--pending", type=str, help="Pending updates JSON file.")
    parser.add_argument("--data", type=str, help="Parking data JSON file (location names).")
    parser.add_argument("--invalid-dir", type=str, dest="invalid_dir",
                        help="Where rejected updates are archived.")
    parser.add_argument("--log-dir", type=str, dest="log_dir")
    parser.add_argument("-l", "--log-level", choices=["error", "warn", "info", "debug"], dest="log_level")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(
            **{field: getattr(args, dest) for dest, field in CONFIG_FIELDS.items() if hasattr(args, dest)}
        )
    except (ValidationError, SettingsError) as exc:
        print(f"ERROR: invalid configuration\n{exc}", file=sys.stderr)
        return 1

    try:
        logger = configure_logging(config)
    except OSError as exc:
        print(f"ERROR: cannot open log directory {config.log_dir}: {exc}", file=sys.stderr)
        return 1

    try:
        summary = validate_and_clean_updates(
            config.pending_updates_path,
            config.data_path,
            config.invalid_updates_dir,
            logger=logger,
        )
        print(f"✅ Validated updates: {summary.valid} valid, {summary.invalid} invalid")
        return 0

    except ValidatorError as exc:
        logger.error("Update validation failed", exc_info=True, extra={"data": {"error": str(exc)}})
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    except Exception as exc:
        logger.error("Unexpected error", exc_info=True)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    finally:
        shutdown_logging(logger)


if __name__ == "__main__":
    sys.exit(main())
