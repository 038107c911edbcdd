from __future__ import annotations

from datetime import date, datetime

_DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)


def parse_iso_date(value) -> date:
    """Parse a calendar day from ``YYYY-MM-DD`` (time part, if any, is dropped).

    The string is split into (year, month, day) integers explicitly; it is never
    reinterpreted as an instant, so the result does not depend on the local zone.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value or "").strip().split("T")[0].split(" ")[0]
    parts = text.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid date: {value!r}")
    year, month, day = (int(p) for p in parts)
    return date(year, month, day)


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def format_long_date(value: date) -> str:
    """``Senin, 20 Mei 2024``."""

    return f"{_DAY_NAMES[value.weekday()]}, {value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def format_sync_timestamp(value: datetime) -> str:
    return value.strftime("%d/%m/%Y %H:%M:%S")
