from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Guru. A teacher with ``class_id`` is the homeroom teacher (wali kelas) of that class."""

    id: str
    name: str
    nip: str
    class_id: Optional[str] = None
    username: Optional[str] = None
    # werkzeug hash, or a legacy plain-text value coming from the spreadsheet.
    password: Optional[str] = None


@dataclass(frozen=True)
class Headmaster:
    name: str
    nip: str
