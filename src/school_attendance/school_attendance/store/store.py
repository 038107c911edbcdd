"""Domain store: the single owner of every entity collection.

All reads return lists in insertion order; sorting for display belongs to the
caller. Every mutation runs under one re-entrant lock on a detached draft of
the state; the draft is handed to ``on_change`` (the snapshot writer) and only
becomes the live state once that returns. A failing save leaves the store as
it was.

Operations that reference a missing id change nothing and return ``False``
(or ``None``); they are logged separately from applied changes.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, Iterator, Optional, Sequence

from ..academic.model import AcademicYear, Holiday
from ..attendance.model import AttendanceRecord
from ..common.ids import new_id
from ..core.constants import UNKNOWN_ACADEMIC_YEAR
from ..core.enums import AlumniReason
from ..core.exceptions import ValidationError
from ..staff.model import Headmaster, Teacher
from ..students.model import Alumni, Student
from .state import StoreState

logger = logging.getLogger(__name__)

ChangeListener = Callable[[StoreState], None]


class DomainStore:
    def __init__(self, state: Optional[StoreState] = None, *, on_change: Optional[ChangeListener] = None):
        self._state = state or StoreState()
        self._on_change = on_change
        self._lock = threading.RLock()

    # ---- plumbing ----

    @contextmanager
    def _change(self) -> Iterator[StoreState]:
        """Yield a draft; save it, then make it live. Any error discards it."""

        with self._lock:
            draft = self._state.copy()
            yield draft
            if self._on_change is not None:
                self._on_change(draft)
            self._state = draft

    def _missing(self, operation: str, kind: str, ref: str) -> None:
        logger.info("%s: %s %r not found; nothing changed", operation, kind, ref)

    def snapshot(self) -> StoreState:
        """Detached copy of the current state."""

        with self._lock:
            return self._state.copy()

    def replace_collections(
        self,
        *,
        students: Optional[Sequence[Student]] = None,
        teachers: Optional[Sequence[Teacher]] = None,
        attendance: Optional[Sequence[AttendanceRecord]] = None,
        alumni: Optional[Sequence[Alumni]] = None,
        holidays: Optional[Sequence[Holiday]] = None,
        academic_years: Optional[Sequence[AcademicYear]] = None,
        headmaster: Optional[Headmaster] = None,
        last_sync: Optional[str] = None,
    ) -> None:
        """Overwrite each collection that is given; ``None`` leaves it untouched."""

        with self._change() as s:
            if students is not None:
                s.students = list(students)
            if teachers is not None:
                s.teachers = list(teachers)
            if attendance is not None:
                s.attendance = list(attendance)
            if alumni is not None:
                s.alumni = list(alumni)
            if holidays is not None:
                s.holidays = list(holidays)
            if academic_years is not None:
                s.academic_years = list(academic_years)
            if headmaster is not None:
                s.headmaster = headmaster
            if last_sync is not None:
                s.last_sync = last_sync

    # ---- reads ----

    def students(self) -> list[Student]:
        with self._lock:
            return list(self._state.students)

    def alumni(self) -> list[Alumni]:
        with self._lock:
            return list(self._state.alumni)

    def teachers(self) -> list[Teacher]:
        with self._lock:
            return list(self._state.teachers)

    def attendance(self) -> list[AttendanceRecord]:
        with self._lock:
            return list(self._state.attendance)

    def academic_years(self) -> list[AcademicYear]:
        with self._lock:
            return list(self._state.academic_years)

    def holidays(self) -> list[Holiday]:
        with self._lock:
            return list(self._state.holidays)

    def headmaster(self) -> Headmaster:
        with self._lock:
            return self._state.headmaster

    @property
    def remote_endpoint(self) -> str:
        with self._lock:
            return self._state.remote_endpoint

    @property
    def last_sync(self) -> str:
        with self._lock:
            return self._state.last_sync

    def get_student(self, student_id: str) -> Optional[Student]:
        with self._lock:
            return next((s for s in self._state.students if s.id == student_id), None)

    def find_student_by_nisn(self, nisn: str) -> Optional[Student]:
        with self._lock:
            return next((s for s in self._state.students if s.nisn == nisn), None)

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        with self._lock:
            return next((t for t in self._state.teachers if t.id == teacher_id), None)

    def homeroom_teacher(self, class_id: str) -> Optional[Teacher]:
        # More than one homeroom teacher per class is possible; the first one wins.
        with self._lock:
            return next((t for t in self._state.teachers if t.class_id == class_id), None)

    def active_academic_year(self) -> Optional[AcademicYear]:
        with self._lock:
            return next((y for y in self._state.academic_years if y.is_active), None)

    def get_attendance(self, student_id: str, day: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return next(
                (a for a in self._state.attendance if a.student_id == student_id and a.date == day),
                None,
            )

    # ---- students ----

    def add_student(self, student: Student) -> Student:
        with self._change() as s:
            s.students.append(student)
        return student

    def update_student(self, student: Student) -> bool:
        with self._lock:
            if self.get_student(student.id) is None:
                self._missing("update_student", "student", student.id)
                return False
            with self._change() as s:
                s.students = [student if x.id == student.id else x for x in s.students]
        return True

    def delete_student(self, student_id: str) -> bool:
        with self._lock:
            if self.get_student(student_id) is None:
                self._missing("delete_student", "student", student_id)
                return False
            with self._change() as s:
                s.students = [x for x in s.students if x.id != student_id]
        return True

    def promote_student(self, student_id: str, new_class_id: str) -> bool:
        """Move a student to another class; attendance history is left as is."""

        with self._lock:
            student = self.get_student(student_id)
            if student is None:
                self._missing("promote_student", "student", student_id)
                return False
            return self.update_student(replace(student, class_id=new_class_id))

    def transfer_to_alumni(self, student_id: str, reason: AlumniReason, date_left: date) -> Optional[Alumni]:
        """Remove the student and append the matching alumni row in one step."""

        with self._lock:
            student = self.get_student(student_id)
            if student is None:
                self._missing("transfer_to_alumni", "student", student_id)
                return None

            active = self.active_academic_year()
            alumni = Alumni.from_student(
                student,
                reason=reason,
                date_left=date_left,
                academic_year=active.name if active else UNKNOWN_ACADEMIC_YEAR,
            )
            with self._change() as s:
                s.students = [x for x in s.students if x.id != student_id]
                s.alumni.append(alumni)
        logger.info("Student %s moved to alumni (%s)", student_id, reason.value)
        return alumni

    # ---- attendance ----

    def mark_attendance(self, records: Iterable[AttendanceRecord]) -> int:
        """Insert records, replacing any existing one with the same (student, day).

        The store trusts its input: callers check the attendance gate first.
        Returns the number of records written.
        """

        incoming: dict[tuple[str, date], AttendanceRecord] = {}
        for r in records:
            incoming[r.key] = r
        if not incoming:
            return 0

        with self._change() as s:
            s.attendance = [a for a in s.attendance if a.key not in incoming] + list(incoming.values())
        return len(incoming)

    # ---- teachers / headmaster ----

    def add_teacher(self, teacher: Teacher) -> Teacher:
        with self._change() as s:
            s.teachers.append(teacher)
        return teacher

    def update_teacher(self, teacher: Teacher) -> bool:
        with self._lock:
            if self.get_teacher(teacher.id) is None:
                self._missing("update_teacher", "teacher", teacher.id)
                return False
            with self._change() as s:
                s.teachers = [teacher if t.id == teacher.id else t for t in s.teachers]
        return True

    def delete_teacher(self, teacher_id: str) -> bool:
        with self._lock:
            if self.get_teacher(teacher_id) is None:
                self._missing("delete_teacher", "teacher", teacher_id)
                return False
            with self._change() as s:
                s.teachers = [t for t in s.teachers if t.id != teacher_id]
        return True

    def update_headmaster(self, headmaster: Headmaster) -> None:
        with self._change() as s:
            s.headmaster = headmaster

    # ---- academic years ----

    def add_academic_year(self, name: str, *, year_id: Optional[str] = None) -> AcademicYear:
        year = AcademicYear(id=year_id or new_id(), name=name, is_active=False)
        with self._change() as s:
            s.academic_years.append(year)
        return year

    def set_active_academic_year(self, year_id: str) -> bool:
        with self._lock:
            if not any(y.id == year_id for y in self._state.academic_years):
                self._missing("set_active_academic_year", "academic year", year_id)
                return False
            with self._change() as s:
                s.academic_years = [replace(y, is_active=(y.id == year_id)) for y in s.academic_years]
        return True

    def delete_academic_year(self, year_id: str) -> bool:
        with self._lock:
            year = next((y for y in self._state.academic_years if y.id == year_id), None)
            if year is None:
                self._missing("delete_academic_year", "academic year", year_id)
                return False
            if year.is_active:
                raise ValidationError("Tahun pelajaran aktif tidak dapat dihapus")
            with self._change() as s:
                s.academic_years = [y for y in s.academic_years if y.id != year_id]
        return True

    # ---- holidays ----

    def add_holiday(self, holiday: Holiday) -> Holiday:
        with self._change() as s:
            s.holidays.append(holiday)
        return holiday

    def delete_holiday(self, holiday_id: str) -> bool:
        with self._lock:
            if not any(h.id == holiday_id for h in self._state.holidays):
                self._missing("delete_holiday", "holiday", holiday_id)
                return False
            with self._change() as s:
                s.holidays = [h for h in s.holidays if h.id != holiday_id]
        return True

    # ---- sync metadata ----

    def set_remote_endpoint(self, url: str) -> None:
        with self._change() as s:
            s.remote_endpoint = (url or "").strip()

    def mark_synced(self, timestamp: str) -> None:
        with self._change() as s:
            s.last_sync = timestamp
