"""
Advisory recommendations per location.

Read-only: looks at the corrected slots, never changes them.
"""

from __future__ import annotations

from typing import Dict, List

from parking_validator.validation.parking_models import (
    Recommendation,
    Severity,
    VehicleType,
    utilization_pct,
)


def recommend_for_slot(
    vehicle_type: VehicleType,
    total: int,
    available: int,
    warning_pct: float,
    critical_pct: float,
) -> List[Recommendation]:
    recs: List[Recommendation] = []
    name = vehicle_type.value
    utilization = utilization_pct(total, available)

    if total > 0 and utilization >= critical_pct:
        recs.append(
            Recommendation(
                vehicle_type,
                f"{name}: Critical utilization ({utilization:.1f}%) - Consider adding capacity",
                Severity.CRITICAL,
            )
        )
    elif total > 0 and utilization >= warning_pct:
        recs.append(
            Recommendation(
                vehicle_type,
                f"{name}: High utilization ({utilization:.1f}%) - Monitor closely",
                Severity.WARNING,
            )
        )

    if total == 0 and available == 0:
        recs.append(
            Recommendation(
                vehicle_type,
                f"{name}: No capacity defined - Consider adding parking spaces",
                Severity.INFO,
            )
        )

    return recs


def generate_recommendations(
    slots: Dict[VehicleType, Dict[str, int]],
    warning_pct: float,
    critical_pct: float,
) -> List[Recommendation]:
    recs: List[Recommendation] = []
    for vt, slot in slots.items():
        recs.extend(
            recommend_for_slot(vt, slot["total"], slot["available"], warning_pct, critical_pct)
        )
    return recs
