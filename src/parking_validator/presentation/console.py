from __future__ import annotations

import io
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence


def _format_table(rows: Sequence[Sequence[object]], headers: List[str], max_rows: int | None = None) -> str:
    output = io.StringIO()
    rows = list(rows)

    if max_rows is not None and len(rows) > max_rows:
        shown = rows[:max_rows]
        omitted = len(rows) - max_rows
    else:
        shown = rows
        omitted = 0

    widths = [len(h) for h in headers]
    for row in shown:
        for i, v in enumerate(row):
            widths[i] = max(widths[i], len(str(v)))

    def fmt(r):
        return " ".join(str(r[i]).ljust(widths[i]) for i in range(len(headers))).rstrip()

    print(fmt(headers), file=output)
    print(" ".join("-" * w for w in widths), file=output)
    for row in shown:
        print(fmt(row), file=output)

    if omitted:
        print(f"... ({omitted} more rows omitted) ...", file=output)

    return output.getvalue()


def _status_icon(utilization: float) -> str:
    if utilization >= 90:
        return "🔴"
    if utilization >= 70:
        return "🟡"
    return "🟢"


def render_console_report(report: Dict[str, Any], finished_at: Optional[datetime] = None) -> str:
    """Final console report shown after a successful run."""
    s = report["summary"]
    d = report["details"]
    finished_at = finished_at or datetime.now()

    out = io.StringIO()

    print("\n" + "=" * 80, file=out)
    print("🎯 PARKING DATA VALIDATION - FINAL REPORT", file=out)
    print("=" * 80, file=out)

    print("\n📊 SUMMARY", file=out)
    print(f"   Locations: {s['total_locations']}", file=out)
    print(f"   Total Capacity: {s['total_capacity']}", file=out)
    print(f"   Available: {s['total_available']}", file=out)
    print(f"   Utilization: {s['utilization_percent']}%", file=out)
    print(f"   Issues Found: {s['issues_found']}", file=out)
    print(f"   Issues Fixed: {s['fixes_applied']}", file=out)

    print("\n🚗 VEHICLE BREAKDOWN\n", file=out)
    type_rows = [
        (
            _status_icon(float(t["utilization"])),
            vehicle_type.upper(),
            t["available"],
            t["capacity"],
            f"{t['utilization']}%",
        )
        for vehicle_type, t in d["by_vehicle_type"].items()
    ]
    print(_format_table(type_rows, ["", "type", "available", "capacity", "utilization"]), file=out, end="")

    if report["recommendations"]:
        print("\n💡 RECOMMENDATIONS", file=out)
        for rec in report["recommendations"]:
            print(f"   • {rec['location']}: {', '.join(rec['recommendations'])}", file=out)

    print("\n" + "=" * 80, file=out)
    print(f"✅ Validation completed at {finished_at.strftime('%H:%M:%S')}", file=out)
    print("=" * 80 + "\n", file=out)

    return out.getvalue()
