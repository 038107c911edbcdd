from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class AcademicYear:
    """Tahun pelajaran, e.g. ``2024/2025``. Exactly one should be active."""

    id: str
    name: str
    is_active: bool = False


@dataclass(frozen=True)
class Holiday:
    id: str
    date: date
    description: str
