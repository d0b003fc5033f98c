"""
Tests for report construction, rankings and the text summary

Run with: pytest tests/test_report_builder.py -v
"""

import json
from datetime import datetime, timezone

from parking_validator import __version__
from parking_validator.reports.report_builder import (
    LATEST_REPORT_NAME,
    SUMMARY_NAME,
    build_report,
    issues_by_severity,
    location_frame,
    most_available_locations,
    top_utilized_locations,
    write_reports,
)
from parking_validator.reports.text_summary import render_text_summary
from parking_validator.validation.aggregator import aggregate
from parking_validator.validation.parking_models import BackupInfo, VehicleType
from parking_validator.validation.record_processor import RecordProcessor

MOMENT = datetime(2026, 1, 16, 8, 30, 0, tzinfo=timezone.utc)
GIT = {"branch": "main", "commit": "abc123"}


def loc(name, bus, mobil=(0, 0), motor=(0, 0)):
    return {
        "name": name,
        "bus": {"total": bus[0], "available": bus[1]},
        "mobil": {"total": mobil[0], "available": mobil[1]},
        "motor": {"total": motor[0], "available": motor[1]},
    }


def make_report(config, data, backup=None):
    processing = RecordProcessor(config, now=lambda: MOMENT).process(data)
    stats = aggregate(processing, data.get("statistics"), config.mode, len(data["locations"]), MOMENT)
    report = build_report(
        data, processing, stats, config,
        processing_time_ms=42, backup=backup, git_info=GIT, moment=MOMENT,
    )
    return report, processing


class TestRankings:
    def test_top_utilized_excludes_zero_capacity(self):
        locations = [loc("Empty", (0, 0)), loc("Half", (10, 5)), loc("Full", (10, 0))]
        frame = location_frame(locations, list(VehicleType))

        top = top_utilized_locations(frame, limit=5)
        assert [t["name"] for t in top] == ["Full", "Half"]
        assert top[0] == {"name": "Full", "capacity": 10, "available": 0, "utilization": "100.0"}

    def test_ties_keep_input_order(self):
        locations = [loc("First", (10, 5)), loc("Second", (20, 10)), loc("Third", (4, 2))]
        frame = location_frame(locations, list(VehicleType))

        assert [t["name"] for t in top_utilized_locations(frame)] == ["First", "Second", "Third"]

    def test_most_available_by_raw_count(self):
        locations = [loc("Small", (5, 5)), loc("Big", (100, 40)), loc("Mid", (50, 40))]
        frame = location_frame(locations, list(VehicleType))

        most = most_available_locations(frame, limit=2)
        assert most == [{"name": "Big", "available": 40}, {"name": "Mid", "available": 40}]

    def test_limit_applies(self):
        locations = [loc(f"L{i}", (10, i)) for i in range(8)]
        frame = location_frame(locations, list(VehicleType))

        assert len(top_utilized_locations(frame, limit=5)) == 5
        assert top_utilized_locations(frame, limit=1)[0]["name"] == "L0"


class TestIssuesBySeverity:
    def test_counts_locations_per_severity(self, make_config):
        data = {
            "locations": [
                loc("Clean", (10, 5)),
                loc("Crit", (10, 20)),
                loc("Warn", (10, -1)),
                loc("Both", (-5, 10)),
            ],
            "statistics": {},
        }
        processing = RecordProcessor(make_config(), now=lambda: MOMENT).process(data)

        assert issues_by_severity(processing) == {"critical": 2, "warning": 2, "info": 3}


class TestBuildReport:
    def test_summary_and_details(self, make_config, two_locations):
        report, _ = make_report(make_config(), two_locations)

        assert report["timestamp"] == "2026-01-16T08:30:00.000Z"
        assert report["summary"] == {
            "total_locations": 2,
            "total_capacity": 105,
            "total_available": 55,
            "utilization_percent": "47.6",
            "issues_found": 0,
            "fixes_applied": 0,
            "processing_time_ms": 42,
        }
        assert report["details"]["by_vehicle_type"]["bus"] == {"capacity": 15, "available": 5, "utilization": "66.7"}
        assert report["issues"] == []
        assert report["issues_fixed"] == []

    def test_metadata(self, make_config, two_locations):
        backup = BackupInfo(file="b.json", timestamp="2026-01-16T08-30-00-000Z", size=10)
        report, _ = make_report(make_config(force=True), two_locations, backup=backup)

        meta = report["metadata"]
        assert meta["validator_version"] == __version__
        assert meta["update_count"] == 1
        assert meta["config"]["force"] is True
        assert meta["git_info"] == GIT
        assert meta["backup"] == {"file": "b.json", "timestamp": "2026-01-16T08-30-00-000Z", "size": 10}
        assert "python_version" in meta["system_info"]

    def test_issues_carry_severity(self, make_config):
        data = {"locations": [loc("Crit", (10, 20))], "statistics": {}}
        report, _ = make_report(make_config(), data)

        assert report["issues"] == [
            {
                "location": "Crit",
                "issues": [
                    {"vehicle_type": "bus", "severity": "critical", "message": "bus: Available (20) exceeds total (10)"}
                ],
            }
        ]
        assert report["issues_fixed"][0]["fixes"][0] == "Fixed available spaces to match total: 10"

    def test_report_is_json_serializable(self, make_config, two_locations):
        report, _ = make_report(make_config(), two_locations)
        assert json.loads(json.dumps(report)) == report


class TestTextSummary:
    def test_sections(self, make_config, two_locations):
        report, _ = make_report(make_config(), two_locations)
        text = render_text_summary(report)

        for heading in (
            "PARKING DATA VALIDATION SUMMARY",
            "OVERVIEW",
            "BY VEHICLE TYPE",
            "TOP UTILIZED LOCATIONS (2)",
            "MOST AVAILABLE LOCATIONS (2)",
            "ISSUES SUMMARY",
            "RECOMMENDATIONS",
            "VALIDATION CONFIG",
        ):
            assert heading in text

        assert "• Utilization Rate: 47.6%" in text
        assert "• BUS: 5/15 available (66.7% utilized)" in text
        assert "• Mode: strict" in text
        assert text.endswith("Validation completed successfully")

    def test_no_recommendations_line(self, make_config, two_locations):
        report, _ = make_report(make_config(), two_locations)
        assert report["recommendations"] == []
        assert "No recommendations at this time." in render_text_summary(report)

    def test_recommendations_listed(self, make_config):
        data = {"locations": [loc("Busy", (10, 0), (10, 5), (10, 5))], "statistics": {}}
        report, _ = make_report(make_config(), data)

        assert "• Busy: bus: Critical utilization (100.0%) - Consider adding capacity" in render_text_summary(report)


def test_write_reports(tmp_path, make_config, two_locations):
    report, _ = make_report(make_config(), two_locations)
    files = write_reports(report, render_text_summary(report), tmp_path)

    assert files.dated.name == "validation-report-2026-01-16.json"
    assert files.latest.name == LATEST_REPORT_NAME
    assert files.summary.name == SUMMARY_NAME
    assert json.loads(files.dated.read_text(encoding="utf-8")) == report
    assert files.latest.read_text(encoding="utf-8") == files.dated.read_text(encoding="utf-8")
