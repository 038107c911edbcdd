from __future__ import annotations

import uuid


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def attendance_record_id(student_id: str, day_iso: str) -> str:
    """Composite key of an attendance record: one per (student, day)."""

    return f"{student_id}-{day_iso}"
