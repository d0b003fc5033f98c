# src/parking_validator/utils/timestamps.py

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """2026-01-16T08:30:00.123Z"""
    moment = moment or utc_now()
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def file_timestamp(moment: Optional[datetime] = None) -> str:
    """Sortable and filename-safe: 2026-01-16T08-30-00-123Z"""
    return iso_timestamp(moment).replace(":", "-").replace(".", "-")


def date_stamp(moment: Optional[datetime] = None) -> str:
    """2026-01-16 (UTC calendar day)"""
    return iso_timestamp(moment).split("T")[0]
