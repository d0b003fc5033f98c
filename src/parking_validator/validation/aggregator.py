"""
Aggregation

Folds the record processor's running totals into dataset-wide figures and
writes the statistics block back into the dataset.

The update counter is the only state carried from one run to the next.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from parking_validator.validation.parking_models import (
    AggregateStatistics,
    ProcessingResult,
    TypeAggregate,
    utilization_pct,
)
from parking_validator.utils.timestamps import iso_timestamp


def previous_update_count(statistics: Optional[Dict[str, Any]]) -> int:
    """Counter from the last run's statistics block; 0 when absent or garbled."""
    if not isinstance(statistics, dict):
        return 0

    for section in ("performance", "metadata"):
        block = statistics.get(section)
        if isinstance(block, dict):
            value = block.get("updateCount")
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                return value
    return 0


def aggregate(
    processing: ProcessingResult,
    previous_statistics: Optional[Dict[str, Any]],
    validation_mode: str,
    total_locations: int,
    moment: Optional[datetime] = None,
) -> AggregateStatistics:
    by_type: Dict = {}
    for vt in processing.vehicle_types:
        t = processing.totals[vt]
        by_type[vt] = TypeAggregate(
            vehicle_type=vt,
            capacity=t.capacity,
            available=t.available,
            utilization=t.utilization,
        )

    total_capacity = sum(a.capacity for a in by_type.values())
    total_available = sum(a.available for a in by_type.values())

    return AggregateStatistics(
        by_type=by_type,
        total_capacity=total_capacity,
        total_available=total_available,
        overall_utilization=utilization_pct(total_capacity, total_available),
        total_locations=total_locations,
        validation_mode=validation_mode,
        issues_found=processing.metrics.issues_found,
        fixes_applied=processing.metrics.fixes_applied,
        update_count=previous_update_count(previous_statistics) + 1,
        updated_at=iso_timestamp(moment),
    )


def statistics_block(stats: AggregateStatistics, processing_time_ms: int) -> Dict[str, Any]:
    """The dataset's ``statistics`` object, in the persisted layout."""
    capacity = {vt.value: a.capacity for vt, a in stats.by_type.items()}
    capacity["total"] = stats.total_capacity

    available = {vt.value: a.available for vt, a in stats.by_type.items()}
    available["total"] = stats.total_available

    utilization = {vt.value: f"{a.utilization:.1f}" for vt, a in stats.by_type.items()}
    utilization["overall"] = f"{stats.overall_utilization:.1f}"

    return {
        "capacity": capacity,
        "available": available,
        "utilization": utilization,
        "metadata": {
            "lastUpdated": stats.updated_at,
            "validatedAt": stats.updated_at,
            "totalLocations": stats.total_locations,
            "validationMode": stats.validation_mode,
            "issuesFound": stats.issues_found,
            "fixesApplied": stats.fixes_applied,
            "updateCount": stats.update_count,
        },
        "performance": {
            "updateCount": stats.update_count,
            "lastProcessingTime": processing_time_ms,
        },
    }


def apply_statistics(data: Dict[str, Any], stats: AggregateStatistics, processing_time_ms: int) -> None:
    data["statistics"] = statistics_block(stats, processing_time_ms)
