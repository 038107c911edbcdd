from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..staff.model import Headmaster, Teacher
from ..students.model import Student

# Day-grid cell codes besides the status codes themselves.
CELL_HOLIDAY = "L"
CELL_WEEKEND = ""
CELL_UNMARKED = "-"


@dataclass(frozen=True)
class StatusCounts:
    hadir: int = 0
    sakit: int = 0
    izin: int = 0
    alpa: int = 0

    def __add__(self, other: "StatusCounts") -> "StatusCounts":
        return StatusCounts(
            hadir=self.hadir + other.hadir,
            sakit=self.sakit + other.sakit,
            izin=self.izin + other.izin,
            alpa=self.alpa + other.alpa,
        )

    @property
    def marked(self) -> int:
        return self.hadir + self.sakit + self.izin + self.alpa

    def as_dict(self) -> dict:
        return {"H": self.hadir, "S": self.sakit, "I": self.izin, "A": self.alpa}


@dataclass(frozen=True)
class DayColumn:
    date: date
    is_weekend: bool
    is_holiday: bool

    @property
    def is_school_day(self) -> bool:
        return not (self.is_weekend or self.is_holiday)


@dataclass(frozen=True)
class StudentMonthRow:
    student: Student
    cells: list[str]
    counts: StatusCounts


@dataclass(frozen=True)
class MonthlyReport:
    """Read-model for the monthly recap (rekap bulanan) and its exports."""

    year: int
    month: int
    class_id: str
    days: list[DayColumn]
    rows: list[StudentMonthRow]
    totals: StatusCounts
    effective_days: int
    percentage: str
    academic_year: str
    headmaster: Headmaster
    homeroom_teacher: Optional[Teacher] = None


@dataclass(frozen=True)
class DailySummary:
    date: date
    total_students: int
    male: int
    female: int
    counts: StatusCounts

    @property
    def not_marked(self) -> int:
        return self.total_students - self.counts.marked


@dataclass(frozen=True)
class StudentMonthView:
    student: Student
    year: int
    month: int
    records: list[AttendanceRecord]
    counts: StatusCounts
