"""Attendance gate: decides whether a calendar day accepts attendance.

A day is closed when it falls on Saturday/Sunday or when it equals the date of
any declared holiday. Every attendance mutation (single marking and bulk import)
must consult the gate first and refuse closed days.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..academic.model import Holiday
from ..common.datetime_utils import parse_iso_date
from ..core.constants import WEEKEND_REASON
from ..core.exceptions import DayOffError
from .model import DayCheck

SATURDAY = 5
SUNDAY = 6


def is_weekend(day) -> bool:
    # weekday() works on the calendar date itself, no instant involved.
    return parse_iso_date(day).weekday() in (SATURDAY, SUNDAY)


def find_holiday(day, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    target = parse_iso_date(day)
    for h in holidays:
        if h.date == target:
            return h
    return None


def check_day(day, holidays: Iterable[Holiday]) -> DayCheck:
    target = parse_iso_date(day)
    holiday = find_holiday(target, holidays)
    return DayCheck(
        date=target,
        is_weekend=is_weekend(target),
        holiday_description=holiday.description if holiday else None,
    )


def is_non_attendance_day(day, holidays: Iterable[Holiday]) -> bool:
    return check_day(day, holidays).blocked


def refusal_message(check: DayCheck) -> str:
    if check.is_holiday:
        what = f"Hari Libur: {check.holiday_description}"
    else:
        what = "Akhir Pekan (Sabtu/Minggu)"
    return f"Tidak dapat menyimpan absensi. Hari ini adalah {what}."


def ensure_attendance_day(day, holidays: Iterable[Holiday]) -> date:
    """Return the parsed day, or raise :class:`DayOffError` when it is closed."""

    check = check_day(day, holidays)
    if check.blocked:
        raise DayOffError(check.date, check.reason or WEEKEND_REASON, refusal_message(check))
    return check.date
