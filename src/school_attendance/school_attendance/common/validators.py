from __future__ import annotations

from ..core.constants import CLASS_LIST
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} tidak boleh kosong")
    return str(value).strip()


def require_class_id(value: str) -> str:
    class_id = str(value or "").strip()
    if class_id not in CLASS_LIST:
        raise ValidationError(f"Kelas tidak valid: {value!r}")
    return class_id
