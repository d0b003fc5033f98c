"""
Parking Validation Domain Models

Rules:
- Pure data containers plus tiny derived properties
- No file access
- No formatting beyond the message text carried by issues
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# ------------------------------------------------------------
# Closed enumerations
# ------------------------------------------------------------
class VehicleType(str, Enum):
    BUS = "bus"
    MOBIL = "mobil"
    MOTOR = "motor"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


def utilization_pct(total: float, available: float) -> float:
    """(total - available) / total * 100, or 0 when there is no capacity."""
    if total > 0:
        return (total - available) / total * 100
    return 0.0


def location_slots(location: Dict[str, Any], vehicle_types: List[VehicleType]) -> Dict[VehicleType, Dict[str, Any]]:
    """
    Fixed mapping from each configured vehicle type to its slot dict.

    The loader guarantees every configured type has a dict slot, so a
    KeyError here means the location skipped structure validation.
    """
    return {vt: location[vt.value] for vt in vehicle_types}


# ------------------------------------------------------------
# Per-slot / per-location validation results
# ------------------------------------------------------------
@dataclass(frozen=True)
class ValidationIssue:
    vehicle_type: VehicleType
    message: str
    severity: Severity

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Recommendation:
    vehicle_type: VehicleType
    message: str
    severity: Severity

    def __str__(self) -> str:
        return self.message


@dataclass
class SlotResult:
    issues: List[ValidationIssue] = field(default_factory=list)
    fixes: List[str] = field(default_factory=list)


@dataclass
class LocationValidationResult:
    index: int
    location: str
    issues: List[ValidationIssue] = field(default_factory=list)
    fixes: List[str] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)

    def has_severity(self, severity: Severity) -> bool:
        return any(i.severity is severity for i in self.issues)


# ------------------------------------------------------------
# Running totals and metrics
# ------------------------------------------------------------
@dataclass
class TypeTotals:
    capacity: int = 0
    available: int = 0

    def add(self, total: int, available: int) -> None:
        self.capacity += total
        self.available += available

    @property
    def utilization(self) -> float:
        return utilization_pct(self.capacity, self.available)


@dataclass
class ProcessingMetrics:
    locations_processed: int = 0
    issues_found: int = 0
    warnings: int = 0
    fixes_applied: int = 0
    processing_time_ms: int = 0


@dataclass
class ProcessingResult:
    """Everything the record processor learned about one dataset."""

    vehicle_types: List[VehicleType]
    totals: Dict[VehicleType, TypeTotals]
    locations: List[LocationValidationResult]
    metrics: ProcessingMetrics

    @property
    def with_issues(self) -> List[LocationValidationResult]:
        return [r for r in self.locations if r.issues]

    @property
    def with_fixes(self) -> List[LocationValidationResult]:
        return [r for r in self.locations if r.fixes]

    @property
    def with_recommendations(self) -> List[LocationValidationResult]:
        return [r for r in self.locations if r.recommendations]


# ------------------------------------------------------------
# Dataset-wide aggregate
# ------------------------------------------------------------
@dataclass(frozen=True)
class TypeAggregate:
    vehicle_type: VehicleType
    capacity: int
    available: int
    utilization: float


@dataclass(frozen=True)
class AggregateStatistics:
    by_type: Dict[VehicleType, TypeAggregate]
    total_capacity: int
    total_available: int
    overall_utilization: float

    total_locations: int
    validation_mode: str
    issues_found: int
    fixes_applied: int
    update_count: int
    updated_at: str


# ------------------------------------------------------------
# Side artifacts
# ------------------------------------------------------------
@dataclass(frozen=True)
class BackupInfo:
    file: str
    timestamp: str
    size: int


@dataclass
class RunResult:
    success: bool
    metrics: ProcessingMetrics
    report: Optional[Dict[str, Any]] = None
    statistics: Optional[AggregateStatistics] = None
    processing: Optional[ProcessingResult] = None
    backup: Optional[BackupInfo] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
