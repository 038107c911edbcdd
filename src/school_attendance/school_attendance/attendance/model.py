from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..common.ids import attendance_record_id
from ..core.constants import WEEKEND_REASON
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu catatan absensi per (siswa, tanggal)."""

    id: str
    student_id: str
    date: date
    status: AttendanceStatus
    academic_year: str

    @classmethod
    def create(cls, *, student_id: str, day: date, status: AttendanceStatus, academic_year: str) -> "AttendanceRecord":
        return cls(
            id=attendance_record_id(student_id, format_iso_date(day)),
            student_id=student_id,
            date=day,
            status=status,
            academic_year=academic_year,
        )

    @property
    def key(self) -> tuple[str, date]:
        return (self.student_id, self.date)


@dataclass(frozen=True)
class DayCheck:
    """Verdict of the attendance gate for one calendar day."""

    date: date
    is_weekend: bool
    holiday_description: Optional[str] = None

    @property
    def is_holiday(self) -> bool:
        return self.holiday_description is not None

    @property
    def blocked(self) -> bool:
        return self.is_weekend or self.is_holiday

    @property
    def reason(self) -> Optional[str]:
        # Holiday description wins over "weekend" when both apply.
        if self.holiday_description is not None:
            return self.holiday_description
        if self.is_weekend:
            return WEEKEND_REASON
        return None


@dataclass(frozen=True)
class SheetRow:
    """One line of the per-day attendance sheet of a class."""

    student_id: str
    nisn: str
    name: str
    status: AttendanceStatus
    parent_phone: Optional[str] = None
