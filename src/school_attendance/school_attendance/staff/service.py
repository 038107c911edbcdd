from __future__ import annotations

from dataclasses import replace
from typing import Optional

from werkzeug.security import generate_password_hash

from ..common.ids import new_id
from ..common.validators import require_class_id, require_non_empty
from ..core.exceptions import ValidationError
from ..store.store import DomainStore
from .model import Headmaster, Teacher


class TeacherService:
    """Use case: manage teachers (data guru) and the headmaster record."""

    def __init__(self, store: DomainStore):
        self._store = store

    def list_teachers(self) -> list[Teacher]:
        return self._store.teachers()

    def _check_username(self, username: Optional[str], *, teacher_id: Optional[str] = None) -> Optional[str]:
        username = (username or "").strip() or None
        if username and any(t.username == username and t.id != teacher_id for t in self._store.teachers()):
            raise ValidationError("Username sudah digunakan")
        return username

    def add_teacher(
        self,
        *,
        name: str,
        nip: str,
        class_id: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Teacher:
        teacher = Teacher(
            id=new_id(),
            name=require_non_empty(name, "Nama"),
            nip=(nip or "").strip() or "-",
            class_id=require_class_id(class_id) if class_id else None,
            username=self._check_username(username),
            password=generate_password_hash(password) if password else None,
        )
        return self._store.add_teacher(teacher)

    def update_teacher(self, teacher_id: str, **changes) -> bool:
        unknown = set(changes) - {"name", "nip", "class_id", "username", "password"}
        if unknown:
            raise ValidationError(f"Kolom tidak dikenal: {', '.join(sorted(unknown))}")

        current = self._store.get_teacher(teacher_id)
        if current is None:
            return False

        if "name" in changes:
            changes["name"] = require_non_empty(changes["name"], "Nama")
        if "class_id" in changes:
            changes["class_id"] = require_class_id(changes["class_id"]) if changes["class_id"] else None
        if "username" in changes:
            changes["username"] = self._check_username(changes["username"], teacher_id=teacher_id)
        if "password" in changes:
            # Empty password in an edit form means "keep the current one".
            if changes["password"]:
                changes["password"] = generate_password_hash(changes["password"])
            else:
                changes.pop("password")

        return self._store.update_teacher(replace(current, **changes))

    def delete_teacher(self, teacher_id: str) -> bool:
        return self._store.delete_teacher(teacher_id)

    def headmaster(self) -> Headmaster:
        return self._store.headmaster()

    def update_headmaster(self, *, name: str, nip: str) -> Headmaster:
        headmaster = Headmaster(name=require_non_empty(name, "Nama"), nip=(nip or "").strip())
        self._store.update_headmaster(headmaster)
        return headmaster
