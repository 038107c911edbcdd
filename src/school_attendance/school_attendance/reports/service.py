from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Optional

from ..attendance.gate import check_day
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import parse_iso_date
from ..core.constants import ALL_CLASSES
from ..core.enums import AttendanceStatus, Gender
from ..core.exceptions import ValidationError
from ..store.store import DomainStore
from ..students.service import sort_students
from .model import (
    CELL_HOLIDAY,
    CELL_UNMARKED,
    CELL_WEEKEND,
    DailySummary,
    DayColumn,
    MonthlyReport,
    StatusCounts,
    StudentMonthRow,
    StudentMonthView,
)


def count_statuses(records: Iterable[AttendanceRecord]) -> StatusCounts:
    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status] += 1
    return StatusCounts(
        hadir=counts[AttendanceStatus.HADIR],
        sakit=counts[AttendanceStatus.SAKIT],
        izin=counts[AttendanceStatus.IZIN],
        alpa=counts[AttendanceStatus.ALPA],
    )


class ReportService:
    """Read-only projections of the store: monthly recap, dashboard, parent view."""

    def __init__(self, store: DomainStore):
        self._store = store

    def _month_days(self, year: int, month: int) -> list[DayColumn]:
        if not 1 <= month <= 12:
            raise ValidationError("Bulan tidak valid")
        holidays = self._store.holidays()
        out = []
        for d in range(1, calendar.monthrange(year, month)[1] + 1):
            check = check_day(date(year, month, d), holidays)
            out.append(DayColumn(date=check.date, is_weekend=check.is_weekend, is_holiday=check.is_holiday))
        return out

    def monthly_report(self, *, year: int, month: int, class_id: str = ALL_CLASSES) -> MonthlyReport:
        days = self._month_days(year, month)
        school_days = {d.date for d in days if d.is_school_day}

        students = sort_students(
            s for s in self._store.students() if s.is_active and (class_id == ALL_CLASSES or s.class_id == class_id)
        )
        by_key = {a.key: a for a in self._store.attendance() if a.date.year == year and a.date.month == month}

        rows: list[StudentMonthRow] = []
        totals = StatusCounts()
        for s in students:
            cells = []
            for d in days:
                # Holiday > weekend > recorded status > unmarked.
                if d.is_holiday:
                    cells.append(CELL_HOLIDAY)
                elif d.is_weekend:
                    cells.append(CELL_WEEKEND)
                else:
                    rec = by_key.get((s.id, d.date))
                    cells.append(rec.status.value if rec else CELL_UNMARKED)

            # Records left on a day that later became a holiday do not count.
            counts = count_statuses(
                r for (sid, day), r in by_key.items() if sid == s.id and day in school_days
            )
            rows.append(StudentMonthRow(student=s, cells=cells, counts=counts))
            totals = totals + counts

        possible = len(students) * len(school_days)
        percentage = f"{totals.hadir / possible * 100:.2f}" if possible > 0 else "0.00"

        active = self._store.active_academic_year()
        homeroom = None
        if class_id != ALL_CLASSES:
            homeroom = self._store.homeroom_teacher(class_id)

        return MonthlyReport(
            year=year,
            month=month,
            class_id=class_id,
            days=days,
            rows=rows,
            totals=totals,
            effective_days=len(school_days),
            percentage=percentage,
            academic_year=active.name if active else "-",
            headmaster=self._store.headmaster(),
            homeroom_teacher=homeroom,
        )

    def daily_summary(self, day, *, class_id: Optional[str] = None) -> DailySummary:
        target = parse_iso_date(day)
        students = [s for s in self._store.students() if s.is_active and (not class_id or s.class_id == class_id)]
        ids = {s.id for s in students}
        records = [a for a in self._store.attendance() if a.date == target and a.student_id in ids]
        return DailySummary(
            date=target,
            total_students=len(students),
            male=sum(1 for s in students if s.gender is Gender.LAKI_LAKI),
            female=sum(1 for s in students if s.gender is Gender.PEREMPUAN),
            counts=count_statuses(records),
        )

    def student_month(self, *, nisn: str, year: int, month: int) -> StudentMonthView:
        """Parent view: one student's records for a month, newest first."""

        student = self._store.find_student_by_nisn(nisn)
        if student is None:
            raise ValidationError("Data siswa tidak ditemukan")

        records = [
            a
            for a in self._store.attendance()
            if a.student_id == student.id and a.date.year == year and a.date.month == month
        ]
        records.sort(key=lambda r: r.date, reverse=True)
        return StudentMonthView(student=student, year=year, month=month, records=records, counts=count_statuses(records))
