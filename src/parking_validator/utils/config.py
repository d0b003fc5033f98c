# src/parking_validator/utils/config.py
"""
Run configuration, built once at startup and never mutated.

Sources, lowest priority first:
field defaults -> .env -> PARKING_* environment variables -> CLI flags.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parking_validator.validation.parking_models import VehicleType

# Load .env from the working directory (or the nearest parent holding one)
load_dotenv(find_dotenv(usecwd=True))


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PARKING_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # File paths
    data_path: Path = Path("data/parkir-data.json")
    backup_dir: Path = Path("data/backups")
    report_dir: Path = Path("data/reports")
    log_dir: Path = Path("data/logs")
    pending_updates_path: Path = Path("data/pending-updates.json")
    invalid_updates_dir: Path = Path("data/updates/invalid")

    # Validation settings
    vehicle_types: List[VehicleType] = Field(
        default_factory=lambda: [VehicleType.BUS, VehicleType.MOBIL, VehicleType.MOTOR],
        min_length=1,
    )
    min_capacity: int = Field(default=0, ge=0)
    max_capacity: int = 1000

    # Recommendation thresholds (percent)
    utilization_warning: float = 80
    utilization_critical: float = 95

    # Performance settings
    max_processing_time_ms: int = Field(default=30000, gt=0)
    batch_size: int = Field(default=50, ge=1)

    # Run options (mirrors CLI flags)
    mode: Literal["strict", "fix"] = "strict"
    dry_run: bool = False
    force: bool = False
    max_backups: int = Field(default=10, ge=0)
    threshold: float = 85
    log_level: Literal["error", "warn", "info", "debug"] = "info"
    backup: bool = True
    verbose: bool = False

    # Reporting
    report_retention_days: int = Field(default=30, ge=0)
    top_n: int = Field(default=5, ge=1)

    @model_validator(mode="after")
    def _check_bounds(self) -> "AppConfig":
        if self.min_capacity > self.max_capacity:
            raise ValueError("min_capacity must not exceed max_capacity")
        if self.utilization_warning > self.utilization_critical:
            raise ValueError("utilization_warning must not exceed utilization_critical")
        if len(set(self.vehicle_types)) != len(self.vehicle_types):
            raise ValueError("vehicle_types must not contain duplicates")
        return self

    @property
    def corrects_capacity(self) -> bool:
        """Out-of-range totals are clamped only in force or fix mode."""
        return self.force or self.mode == "fix"

    def summary(self) -> Dict[str, Any]:
        """Subset echoed into reports and logs."""
        return {
            "mode": self.mode,
            "force": self.force,
            "dry_run": self.dry_run,
            "max_backups": self.max_backups,
            "threshold": self.threshold,
        }

    def __repr__(self):
        return f"<AppConfig data={self.data_path} mode={self.mode} dry_run={self.dry_run}>"


def load_config(**overrides: Any) -> AppConfig:
    """Build the run configuration; keyword overrides win over the environment."""
    return AppConfig(**overrides)
