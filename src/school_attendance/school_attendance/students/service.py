from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import today_local
from ..common.ids import new_id
from ..common.text_import import ImportResult, iter_tab_rows
from ..common.validators import require_class_id, require_non_empty
from ..core.constants import CLASS_LIST, GRADUATE
from ..core.enums import AlumniReason, Gender
from ..core.exceptions import ValidationError
from ..store.store import DomainStore
from .model import Alumni, Student


def class_sort_key(class_id: str):
    """Numeric-aware class ordering ("2" before "10")."""

    return (0, int(class_id)) if class_id.isdigit() else (1, class_id)


def sort_students(students):
    return sorted(students, key=lambda s: (class_sort_key(s.class_id), s.name.lower()))


def suggest_next_class(class_id: str) -> str:
    """Next class for promotion, or ``LULUS`` (graduate) from the last class."""

    if class_id.isdigit() and int(class_id) < int(CLASS_LIST[-1]):
        return str(int(class_id) + 1)
    return GRADUATE


class StudentService:
    """Use case: manage the active roster (data siswa)."""

    def __init__(self, store: DomainStore):
        self._store = store

    def list_students(self, *, class_id: Optional[str] = None) -> list[Student]:
        rows = [s for s in self._store.students() if s.is_active]
        if class_id:
            rows = [s for s in rows if s.class_id == class_id]
        return sort_students(rows)

    def list_alumni(self) -> list[Alumni]:
        return self._store.alumni()

    def add_student(
        self,
        *,
        name: str,
        nisn: str,
        gender: str,
        class_id: str,
        parent_phone: Optional[str] = None,
    ) -> Student:
        try:
            g = Gender(str(gender).strip().upper())
        except ValueError:
            raise ValidationError("Jenis kelamin harus L atau P")

        student = Student(
            id=new_id(),
            nisn=require_non_empty(nisn, "NISN"),
            name=require_non_empty(name, "Nama"),
            gender=g,
            class_id=require_class_id(class_id),
            parent_phone=(parent_phone or "").strip() or None,
        )
        return self._store.add_student(student)

    def update_student(self, student_id: str, **changes) -> bool:
        unknown = set(changes) - {"name", "nisn", "class_id", "gender", "parent_phone"}
        if unknown:
            raise ValidationError(f"Kolom tidak dikenal: {', '.join(sorted(unknown))}")

        current = self._store.get_student(student_id)
        if current is None:
            return False

        if "name" in changes:
            changes["name"] = require_non_empty(changes["name"], "Nama")
        if "nisn" in changes:
            changes["nisn"] = require_non_empty(changes["nisn"], "NISN")
        if "class_id" in changes:
            changes["class_id"] = require_class_id(changes["class_id"])
        if "gender" in changes:
            try:
                changes["gender"] = Gender(str(changes["gender"]).strip().upper())
            except ValueError:
                raise ValidationError("Jenis kelamin harus L atau P")
        if "parent_phone" in changes:
            changes["parent_phone"] = (changes["parent_phone"] or "").strip() or None

        return self._store.update_student(replace(current, **changes))

    def delete_student(self, student_id: str) -> bool:
        return self._store.delete_student(student_id)

    def promote(self, student_id: str, target_class: str, *, today: Optional[date] = None) -> bool:
        """Naik kelas; choosing ``LULUS`` archives the student as graduated."""

        if target_class == GRADUATE:
            return self.transfer_to_alumni(student_id, AlumniReason.TAMAT, today or today_local()) is not None
        return self._store.promote_student(student_id, require_class_id(target_class))

    def transfer_to_alumni(self, student_id: str, reason, date_left: date) -> Optional[Alumni]:
        if not isinstance(reason, AlumniReason):
            try:
                reason = AlumniReason.parse(reason)
            except ValueError:
                raise ValidationError("Alasan keluar tidak valid")
        return self._store.transfer_to_alumni(student_id, reason, date_left)

    def import_text(self, text: str, *, class_id: str) -> ImportResult:
        """Bulk add from ``name<TAB>nisn[<TAB>gender[<TAB>phone]]`` lines."""

        class_id = require_class_id(class_id)
        imported = skipped = 0
        for parts in iter_tab_rows(text):
            if len(parts) < 2 or not parts[0] or not parts[1]:
                skipped += 1
                continue
            self._store.add_student(
                Student(
                    id=new_id(),
                    name=parts[0],
                    nisn=parts[1],
                    gender=Gender.PEREMPUAN if len(parts) > 2 and parts[2].upper() == "P" else Gender.LAKI_LAKI,
                    class_id=class_id,
                    parent_phone=(parts[3] if len(parts) > 3 else "") or None,
                )
            )
            imported += 1
        return ImportResult(imported=imported, skipped=skipped)
