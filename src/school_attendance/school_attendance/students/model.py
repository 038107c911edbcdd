from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AlumniReason, Gender


@dataclass(frozen=True)
class Student:
    """Entitas domain: siswa aktif.

    Note: plain data object, no storage code here.
    """

    id: str
    nisn: str
    name: str
    gender: Gender
    class_id: str
    is_active: bool = True
    parent_phone: Optional[str] = None


@dataclass(frozen=True)
class Alumni:
    """Archived copy of a student who left the active roster."""

    id: str
    nisn: str
    name: str
    gender: Gender
    class_id: str
    reason: AlumniReason
    date_left: date
    last_class_id: str
    academic_year: str
    parent_phone: Optional[str] = None

    @classmethod
    def from_student(cls, student: Student, *, reason: AlumniReason, date_left: date, academic_year: str) -> "Alumni":
        return cls(
            id=student.id,
            nisn=student.nisn,
            name=student.name,
            gender=student.gender,
            class_id=student.class_id,
            reason=reason,
            date_left=date_left,
            last_class_id=student.class_id,
            academic_year=academic_year,
            parent_phone=student.parent_phone,
        )
