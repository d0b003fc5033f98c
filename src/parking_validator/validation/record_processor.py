"""
Record Processor

Per location, per configured vehicle type:
- coerce total / available with the safe-parse rule
- range check on total (correction only when capacity correction is on)
- consistency check on available (always corrected)
- record issues, fixes and recommendations
- accumulate per-type running totals

Locations are handled in batches; the time budget is checked between
batches. Mutates the dataset in place.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from parking_validator.errors import ProcessingTimeoutError
from parking_validator.utils.config import AppConfig
from parking_validator.utils.logger import get_logger
from parking_validator.utils.timestamps import iso_timestamp, utc_now
from parking_validator.validation.dataset_loader import empty_slot
from parking_validator.validation.number_parsing import coerce_number, parse_number
from parking_validator.validation.parking_models import (
    LocationValidationResult,
    ProcessingMetrics,
    ProcessingResult,
    Severity,
    SlotResult,
    TypeTotals,
    ValidationIssue,
    VehicleType,
    location_slots,
)
from parking_validator.validation.recommendations import generate_recommendations

log = get_logger(__name__)

DEFAULT_COUNT = 0


def _show(value: Any) -> str:
    return "missing" if value is None else str(value)


def _changed(original: Any, stored: int) -> bool:
    """Stored value differs from the input, or the input was not a plain int."""
    return type(original) is not int or original != stored


class RecordProcessor:
    def __init__(
        self,
        config: AppConfig,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.logger = logger or log
        self.clock = clock
        self.now = now

    # ============================================================
    # DATASET
    # ============================================================

    def process(
        self,
        data: Dict[str, Any],
        started_at: Optional[float] = None,
        synthesized: Iterable[Tuple[int, VehicleType]] = (),
    ) -> ProcessingResult:
        """
        Validate every location of an already structure-checked dataset.

        ``started_at`` is a reading of ``clock`` taken when the run began;
        the time budget covers everything since then. ``synthesized`` lists
        the slots the loader had to create, so they are reported as fixes.
        """
        started = self.clock() if started_at is None else started_at
        vehicle_types = list(self.config.vehicle_types)
        locations = data["locations"]
        batch_size = self.config.batch_size
        limit_ms = self.config.max_processing_time_ms

        totals: Dict[VehicleType, TypeTotals] = {vt: TypeTotals() for vt in vehicle_types}
        metrics = ProcessingMetrics()
        results: List[LocationValidationResult] = []

        created_at: Dict[int, Set[VehicleType]] = {}
        for i, vt in synthesized:
            created_at.setdefault(i, set()).add(vt)

        self.logger.info("Processing locations data")

        for start in range(0, len(locations), batch_size):
            batch = locations[start:start + batch_size]

            for offset, location in enumerate(batch):
                index = start + offset
                result = self.process_location(index, location, totals, created_at.get(index))
                results.append(result)

                metrics.locations_processed += 1
                metrics.issues_found += len(result.issues)
                metrics.warnings += sum(1 for i in result.issues if i.severity is Severity.WARNING)
                metrics.fixes_applied += len(result.fixes)

            elapsed_ms = (self.clock() - started) * 1000
            self.logger.debug(
                f"Processed batch {start // batch_size + 1} ({len(batch)} locations)",
                extra={"data": {"elapsed_ms": round(elapsed_ms, 1)}},
            )
            if elapsed_ms > limit_ms:
                raise ProcessingTimeoutError(elapsed_ms, limit_ms)

        metrics.processing_time_ms = int((self.clock() - started) * 1000)

        return ProcessingResult(
            vehicle_types=vehicle_types,
            totals=totals,
            locations=results,
            metrics=metrics,
        )

    # ============================================================
    # LOCATION
    # ============================================================

    def process_location(
        self,
        index: int,
        location: Dict[str, Any],
        totals: Dict[VehicleType, TypeTotals],
        created: Optional[Set[VehicleType]] = None,
    ) -> LocationValidationResult:
        name = location.get("name")
        result = LocationValidationResult(index=index, location=name)

        for vt in totals:
            missing = not isinstance(location.get(vt.value), dict)
            if missing:
                location[vt.value] = empty_slot()
            if missing or (created and vt in created):
                result.fixes.append(f"Created missing {vt.value} data structure")

            slot_result = self.process_slot(location[vt.value], vt)
            result.issues.extend(slot_result.issues)
            result.fixes.extend(slot_result.fixes)

            slot = location[vt.value]
            totals[vt].add(slot["total"], slot["available"])

        location["lastValidated"] = iso_timestamp(self.now())
        location["validationIssues"] = len(result.issues)

        result.recommendations = generate_recommendations(
            location_slots(location, list(totals)),
            self.config.utilization_warning,
            self.config.utilization_critical,
        )

        if result.issues:
            self.logger.debug(
                f'Location "{name}": {len(result.issues)} issues, {len(result.fixes)} fixes',
                extra={"data": {"issues": [str(i) for i in result.issues]}},
            )

        return result

    # ============================================================
    # SLOT
    # ============================================================

    def process_slot(self, slot: Dict[str, Any], vehicle_type: VehicleType) -> SlotResult:
        """Validate and correct one {total, available} pair in place."""
        cfg = self.config
        vt = vehicle_type.value
        result = SlotResult()

        def issue(message: str, severity: Severity) -> None:
            result.issues.append(ValidationIssue(vehicle_type, message, severity))

        original_total = slot.get("total")
        original_available = slot.get("available")

        # ----------------------------
        # Coercion
        # ----------------------------
        raw_total, total_valid = coerce_number(original_total)
        raw_available, available_valid = coerce_number(original_available)

        total = parse_number(original_total, DEFAULT_COUNT, self.logger)
        available = parse_number(original_available, DEFAULT_COUNT, self.logger)

        if not total_valid:
            issue(f"{vt}: Invalid total value ({original_total!r}), using default {DEFAULT_COUNT}", Severity.INFO)
        if not available_valid:
            issue(f"{vt}: Invalid available value ({original_available!r}), using default {DEFAULT_COUNT}", Severity.INFO)

        # ----------------------------
        # Range (policy threshold, correction gated)
        # ----------------------------
        checked_total = raw_total if raw_total is not None else total

        if checked_total < cfg.min_capacity:
            issue(
                f"{vt}: Total capacity ({checked_total}) below minimum ({cfg.min_capacity})",
                Severity.WARNING,
            )
            if cfg.corrects_capacity:
                total = cfg.min_capacity
                result.fixes.append(f"Forced total capacity to minimum: {cfg.min_capacity}")

        elif checked_total > cfg.max_capacity:
            issue(
                f"{vt}: Total capacity ({checked_total}) exceeds maximum ({cfg.max_capacity})",
                Severity.CRITICAL,
            )
            if cfg.corrects_capacity:
                total = cfg.max_capacity
                result.fixes.append(f"Capped total capacity to maximum: {cfg.max_capacity}")

        # ----------------------------
        # Consistency (physically impossible, always corrected)
        # ----------------------------
        checked_available = raw_available if raw_available is not None else available

        if checked_available < 0:
            issue(f"{vt}: Negative available spaces ({checked_available})", Severity.WARNING)
            available = 0
            result.fixes.append("Fixed negative available spaces to 0")

        if available > total:
            issue(f"{vt}: Available ({available}) exceeds total ({total})", Severity.CRITICAL)
            available = total
            result.fixes.append(f"Fixed available spaces to match total: {total}")

        slot["total"] = total
        slot["available"] = available

        if _changed(original_total, total) or _changed(original_available, available):
            result.fixes.append(
                f"Updated {vt}: {_show(original_total)}→{total}, {_show(original_available)}→{available}"
            )

        return result
