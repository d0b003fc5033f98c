# src/parking_validator/reports/text_summary.py

from typing import Any, Dict, List


def render_text_summary(report: Dict[str, Any]) -> str:
    """
    Plain-text rendering of a structured report.

    Presentation only: everything comes from the report dict.
    """
    s = report["summary"]
    d = report["details"]
    sev = d["issues_by_severity"]
    cfg = report["metadata"]["config"]

    lines: List[str] = []
    lines.append("PARKING DATA VALIDATION SUMMARY")
    lines.append("=" * 32)
    lines.append(f"Generated: {report['timestamp']}")
    lines.append("")

    lines.append("OVERVIEW")
    lines.append("-" * 8)
    lines.append(f"• Total Locations: {s['total_locations']}")
    lines.append(f"• Total Capacity: {s['total_capacity']} spaces")
    lines.append(f"• Available Spaces: {s['total_available']}")
    lines.append(f"• Utilization Rate: {s['utilization_percent']}%")
    lines.append(f"• Processing Time: {s['processing_time_ms']}ms")
    lines.append(f"• Issues Found: {s['issues_found']}")
    lines.append(f"• Fixes Applied: {s['fixes_applied']}")
    lines.append("")

    lines.append("BY VEHICLE TYPE")
    lines.append("-" * 15)
    for vehicle_type, t in d["by_vehicle_type"].items():
        lines.append(
            f"• {vehicle_type.upper()}: {t['available']}/{t['capacity']} available ({t['utilization']}% utilized)"
        )
    lines.append("")

    top = d["top_utilized_locations"]
    lines.append(f"TOP UTILIZED LOCATIONS ({len(top)})")
    lines.append("-" * 24)
    for i, loc in enumerate(top, start=1):
        lines.append(f"{i}. {loc['name']}: {loc['utilization']}% ({loc['available']}/{loc['capacity']})")
    lines.append("")

    most = d["most_available_locations"]
    lines.append(f"MOST AVAILABLE LOCATIONS ({len(most)})")
    lines.append("-" * 26)
    for i, loc in enumerate(most, start=1):
        lines.append(f"{i}. {loc['name']}: {loc['available']} spaces")
    lines.append("")

    lines.append("ISSUES SUMMARY")
    lines.append("-" * 14)
    lines.append(f"• Critical: {sev['critical']}")
    lines.append(f"• Warning: {sev['warning']}")
    lines.append(f"• Info: {sev['info']}")
    lines.append("")

    lines.append("RECOMMENDATIONS")
    lines.append("-" * 15)
    if report["recommendations"]:
        for rec in report["recommendations"]:
            lines.append(f"• {rec['location']}: {', '.join(rec['recommendations'])}")
    else:
        lines.append("No recommendations at this time.")
    lines.append("")

    lines.append("VALIDATION CONFIG")
    lines.append("-" * 17)
    lines.append(f"• Mode: {cfg['mode']}")
    lines.append(f"• Threshold: {cfg['threshold']}%")
    lines.append(f"• Max Backups: {cfg['max_backups']}")
    lines.append("")

    lines.append("=" * 32)
    lines.append("Validation completed successfully")

    return "\n".join(lines)
