# src/parking_validator/reports/report_builder.py

from __future__ import annotations

import os
import platform
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from parking_validator import __version__
from parking_validator.utils.config import AppConfig
from parking_validator.utils.file_utils import write_json, write_text
from parking_validator.utils.timestamps import date_stamp, iso_timestamp
from parking_validator.validation.parking_models import (
    AggregateStatistics,
    BackupInfo,
    ProcessingResult,
    Severity,
    VehicleType,
    utilization_pct,
)

REPORT_PREFIX = "validation-report-"
LATEST_REPORT_NAME = "validation-report-latest.json"
SUMMARY_NAME = "validation-summary.txt"


@dataclass(frozen=True)
class ReportFiles:
    dated: Path
    latest: Path
    summary: Path


# ============================================================
# LOCATION RANKINGS
# ============================================================

def location_frame(locations: List[Dict[str, Any]], vehicle_types: List[VehicleType]) -> pd.DataFrame:
    """One row per location with aggregate capacity/available, in input order."""
    rows = []
    for order, location in enumerate(locations):
        capacity = 0
        available = 0
        for vt in vehicle_types:
            slot = location.get(vt.value) or {}
            capacity += slot.get("total") or 0
            available += slot.get("available") or 0

        rows.append(
            {
                "order": order,
                "name": location.get("name"),
                "capacity": capacity,
                "available": available,
                "utilization": utilization_pct(capacity, available),
            }
        )

    return pd.DataFrame(rows, columns=["order", "name", "capacity", "available", "utilization"])


def top_utilized_locations(frame: pd.DataFrame, limit: int = 5) -> List[Dict[str, Any]]:
    """Highest utilization first; zero-capacity locations excluded; ties keep input order."""
    ranked = (
        frame[frame["capacity"] > 0]
        .sort_values(["utilization", "order"], ascending=[False, True], kind="mergesort")
        .head(limit)
    )
    return [
        {
            "name": r.name,
            "capacity": int(r.capacity),
            "available": int(r.available),
            "utilization": f"{r.utilization:.1f}",
        }
        for r in ranked.itertuples(index=False)
    ]


def most_available_locations(frame: pd.DataFrame, limit: int = 5) -> List[Dict[str, Any]]:
    """Most raw available spaces first; ties keep input order."""
    ranked = frame.sort_values(["available", "order"], ascending=[False, True], kind="mergesort").head(limit)
    return [{"name": r.name, "available": int(r.available)} for r in ranked.itertuples(index=False)]


# ============================================================
# ISSUES
# ============================================================

def issues_by_severity(processing: ProcessingResult) -> Dict[str, int]:
    """
    Location counts per severity.

    critical / warning count locations holding at least one issue of that
    severity; info counts every issue-bearing location.
    """
    bearing = processing.with_issues
    return {
        "critical": sum(1 for r in bearing if r.has_severity(Severity.CRITICAL)),
        "warning": sum(1 for r in bearing if r.has_severity(Severity.WARNING)),
        "info": len(bearing),
    }


def _system_info() -> Dict[str, Any]:
    info = {
        "python_version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "platform": sys.platform,
        "pid": os.getpid(),
    }
    # ru_maxrss: kilobytes on Linux, bytes on macOS; unavailable on Windows
    if sys.platform != "win32":
        import resource

        info["max_rss"] = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return info


# ============================================================
# REPORT
# ============================================================

def build_report(
    data: Dict[str, Any],
    processing: ProcessingResult,
    stats: AggregateStatistics,
    config: AppConfig,
    processing_time_ms: int,
    backup: Optional[BackupInfo] = None,
    git_info: Optional[Dict[str, str]] = None,
    moment: Optional[datetime] = None,
) -> Dict[str, Any]:
    frame = location_frame(data["locations"], processing.vehicle_types)

    return {
        "timestamp": iso_timestamp(moment),
        "summary": {
            "total_locations": len(data["locations"]),
            "total_capacity": stats.total_capacity,
            "total_available": stats.total_available,
            "utilization_percent": f"{stats.overall_utilization:.1f}",
            "issues_found": stats.issues_found,
            "fixes_applied": stats.fixes_applied,
            "processing_time_ms": processing_time_ms,
        },
        "details": {
            "by_vehicle_type": {
                vt.value: {
                    "capacity": a.capacity,
                    "available": a.available,
                    "utilization": f"{a.utilization:.1f}",
                }
                for vt, a in stats.by_type.items()
            },
            "top_utilized_locations": top_utilized_locations(frame, config.top_n),
            "most_available_locations": most_available_locations(frame, config.top_n),
            "issues_by_severity": issues_by_severity(processing),
        },
        "issues": [
            {
                "location": r.location,
                "issues": [
                    {"vehicle_type": i.vehicle_type.value, "severity": i.severity.value, "message": i.message}
                    for i in r.issues
                ],
            }
            for r in processing.with_issues
        ],
        "issues_fixed": [
            {"location": r.location, "fixes": list(r.fixes)}
            for r in processing.with_fixes
        ],
        "recommendations": [
            {"location": r.location, "recommendations": [str(rec) for rec in r.recommendations]}
            for r in processing.with_recommendations
        ],
        "metadata": {
            "validator_version": __version__,
            "update_count": stats.update_count,
            "config": config.summary(),
            "git_info": git_info if git_info is not None else {"error": "Git information unavailable"},
            "system_info": _system_info(),
            "backup": asdict(backup) if backup else None,
        },
    }


def write_reports(report: Dict[str, Any], summary_text: str, report_dir: Path) -> ReportFiles:
    """Dated report, the latest alias, and the text summary."""
    report_dir = Path(report_dir)
    day = date_stamp(datetime.fromisoformat(report["timestamp"].replace("Z", "+00:00")))

    files = ReportFiles(
        dated=report_dir / f"{REPORT_PREFIX}{day}.json",
        latest=report_dir / LATEST_REPORT_NAME,
        summary=report_dir / SUMMARY_NAME,
    )
    write_json(files.dated, report)
    write_json(files.latest, report)
    write_text(files.summary, summary_text)
    return files
