from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Union

from ..academic.model import AcademicYear
from ..common.datetime_utils import parse_iso_date
from ..common.text_import import ImportResult, iter_tab_rows
from ..core.enums import AttendanceStatus
from ..core.exceptions import DayOffError, ValidationError
from ..store.store import DomainStore
from .gate import check_day, ensure_attendance_day
from .model import AttendanceRecord, DayCheck, SheetRow

logger = logging.getLogger(__name__)

StatusInput = Union[AttendanceStatus, str]


@dataclass(frozen=True)
class DaySheet:
    class_id: str
    check: DayCheck
    rows: list[SheetRow]


class AttendanceService:
    """Use case: daily attendance (absensi harian) behind the attendance gate."""

    def __init__(self, store: DomainStore):
        self._store = store

    def check_day(self, day) -> DayCheck:
        return check_day(day, self._store.holidays())

    def _open_day(self, day) -> date:
        try:
            return ensure_attendance_day(day, self._store.holidays())
        except DayOffError as e:
            logger.info("Attendance refused for %s: %s", e.day, e.reason)
            raise
        except ValueError:
            raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")

    def _require_active_year(self) -> AcademicYear:
        active = self._store.active_academic_year()
        if active is None:
            raise ValidationError("Pilih tahun pelajaran aktif di dashboard")
        return active

    @staticmethod
    def _parse_status(value: StatusInput) -> AttendanceStatus:
        if isinstance(value, AttendanceStatus):
            return value
        try:
            return AttendanceStatus.parse(value)
        except ValueError:
            raise ValidationError(f"Status kehadiran tidak valid: {value!r}")

    def day_sheet(self, class_id: str, day) -> DaySheet:
        """Active students of a class (by name) with their status on ``day``."""

        try:
            target = parse_iso_date(day)
        except ValueError:
            raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")

        by_student = {a.student_id: a.status for a in self._store.attendance() if a.date == target}
        students = sorted(
            (s for s in self._store.students() if s.is_active and s.class_id == class_id),
            key=lambda s: s.name.lower(),
        )
        rows = [
            SheetRow(
                student_id=s.id,
                nisn=s.nisn,
                name=s.name,
                status=by_student.get(s.id, AttendanceStatus.NONE),
                parent_phone=s.parent_phone,
            )
            for s in students
        ]
        return DaySheet(class_id=class_id, check=self.check_day(target), rows=rows)

    def mark_class_day(
        self,
        day,
        statuses: Mapping[str, StatusInput],
        *,
        class_id: Optional[str] = None,
    ) -> int:
        """Save one day's statuses (student id -> status); refused as a whole on a day off.

        Unmarked (``NONE``) entries are ignored. Returns the number of records written.
        """

        target = self._open_day(day)
        active = self._require_active_year()

        records: list[AttendanceRecord] = []
        for student_id, raw in statuses.items():
            status = self._parse_status(raw)
            if status is AttendanceStatus.NONE:
                continue
            student = self._store.get_student(student_id)
            if student is None:
                raise ValidationError(f"Siswa tidak ditemukan: {student_id}")
            if class_id and student.class_id != class_id:
                raise ValidationError(f"Siswa {student.name} bukan anggota kelas {class_id}")
            records.append(
                AttendanceRecord.create(student_id=student_id, day=target, status=status, academic_year=active.name)
            )

        return self._store.mark_attendance(records)

    def import_text(self, day, text: str) -> ImportResult:
        """Bulk mark one day from ``NISN<TAB>status`` lines.

        The gate is checked once before any line is read; unknown NISNs and
        unreadable statuses are skipped.
        """

        target = self._open_day(day)
        active = self._require_active_year()

        by_nisn = {s.nisn: s for s in self._store.students() if s.is_active}
        records: list[AttendanceRecord] = []
        skipped = 0
        for parts in iter_tab_rows(text):
            student = by_nisn.get(parts[0]) if parts else None
            if student is None or len(parts) < 2:
                skipped += 1
                continue
            try:
                status = AttendanceStatus.parse(parts[1])
            except ValueError:
                skipped += 1
                continue
            if status is AttendanceStatus.NONE:
                skipped += 1
                continue
            records.append(
                AttendanceRecord.create(student_id=student.id, day=target, status=status, academic_year=active.name)
            )

        self._store.mark_attendance(records)
        return ImportResult(imported=len(records), skipped=skipped)

    def record_for(self, student_id: str, day) -> Optional[AttendanceRecord]:
        return self._store.get_attendance(student_id, parse_iso_date(day))
