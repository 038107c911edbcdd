from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..store.store import DomainStore

_HASH_PREFIXES = ("scrypt:", "pbkdf2:")


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    role: Role
    name: str
    id: Optional[str] = None
    class_id: Optional[str] = None

    def as_session(self) -> dict:
        return {"role": self.role.value, "name": self.name, "id": self.id, "class_id": self.class_id}

    @classmethod
    def from_session(cls, data: dict) -> "SessionUser":
        return cls(role=Role(data["role"]), name=data.get("name") or "", id=data.get("id"), class_id=data.get("class_id"))


def verify_password(stored: Optional[str], given: str) -> bool:
    if not stored or not given:
        return False
    if stored.startswith(_HASH_PREFIXES):
        try:
            return check_password_hash(stored, given)
        except ValueError:
            # e.g. a truncated hash coming back from the spreadsheet
            return False
    # Legacy rows restored from the sheet may still hold the plain value.
    return hmac.compare_digest(stored.encode("utf-8"), given.encode("utf-8"))


class AuthService:
    """Use case: resolve a role from credentials (login)."""

    def __init__(self, store: DomainStore, *, admin_username: str, admin_password: str):
        self._store = store
        self._admin_username = admin_username
        self._admin_password = admin_password

    def login_admin(self, username: str, password: str) -> SessionUser:
        if username == self._admin_username and verify_password(self._admin_password, password):
            return SessionUser(role=Role.ADMIN, name="Administrator")
        raise AuthenticationError("Username atau password salah")

    def login_teacher(self, username: str, password: str) -> SessionUser:
        teacher = next((t for t in self._store.teachers() if username and t.username == username), None)
        if teacher is None or not verify_password(teacher.password, password):
            raise AuthenticationError("Data guru tidak ditemukan")
        return SessionUser(role=Role.WALI_KELAS, name=teacher.name, id=teacher.id, class_id=teacher.class_id)

    def login_parent(self, nisn: str) -> SessionUser:
        student = self._store.find_student_by_nisn((nisn or "").strip())
        if student is None or not student.is_active:
            raise AuthenticationError("NISN tidak ditemukan")
        return SessionUser(role=Role.ORANG_TUA, name="Orang Tua Siswa", id=student.nisn, class_id=student.class_id)

    def authenticate(self, role: Role, *, username: str = "", password: str = "") -> SessionUser:
        if role == Role.ADMIN:
            return self.login_admin(username, password)
        if role == Role.WALI_KELAS:
            return self.login_teacher(username, password)
        return self.login_parent(username)


def require_role(user: Optional[SessionUser], *roles: Role) -> SessionUser:
    if user is None:
        raise AuthenticationError("Silakan login terlebih dahulu")
    if user.role not in roles:
        raise AuthorizationError("Anda tidak memiliki akses")
    return user


def require_class_access(user: SessionUser, class_id: str) -> None:
    """Homeroom teachers only see their own class."""

    if user.role == Role.WALI_KELAS and user.class_id != class_id:
        raise AuthorizationError("Anda hanya dapat mengakses kelas Anda sendiri")
