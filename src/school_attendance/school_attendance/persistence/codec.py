"""Row codec for every collection.

Rows use the spreadsheet column names (camelCase). Decoding coerces each field
to the type the entity expects, or raises :class:`PayloadError`; nothing
downstream has to guess the shape of a row.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from ..academic.model import AcademicYear, Holiday
from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.ids import attendance_record_id
from ..core import constants as c
from ..core.enums import AlumniReason, AttendanceStatus, Gender
from ..core.exceptions import PayloadError
from ..staff.model import Headmaster, Teacher
from ..students.model import Alumni, Student
from ..store.state import StoreState

_TRUE = {"true", "1", "yes", "y"}
_FALSE = {"false", "0", "no", "n", ""}


# ---- field coercion ----


def _raw(row: Mapping[str, Any], key: str):
    if not isinstance(row, Mapping):
        raise PayloadError(f"Row must be an object, got {type(row).__name__}")
    return row.get(key)


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _text(row: Mapping[str, Any], key: str, *, allow_empty: bool = True) -> str:
    value = _raw(row, key)
    if value is None:
        raise PayloadError(f"Missing field {key!r}")
    text = _as_text(value)
    if not text and not allow_empty:
        raise PayloadError(f"Empty field {key!r}")
    return text


def _optional_text(row: Mapping[str, Any], key: str) -> Optional[str]:
    value = _raw(row, key)
    if value is None:
        return None
    return _as_text(value) or None


def _bool(row: Mapping[str, Any], key: str, *, default: bool) -> bool:
    value = _raw(row, key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = _as_text(value).lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise PayloadError(f"Field {key!r} is not a boolean: {value!r}")


def _date(row: Mapping[str, Any], key: str):
    value = _raw(row, key)
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"Field {key!r} is not a date: {value!r}") from e


def _enum(parse: Callable[[str], Any], row: Mapping[str, Any], key: str):
    value = _text(row, key)
    try:
        return parse(value)
    except ValueError as e:
        raise PayloadError(f"Field {key!r} has unexpected value {value!r}") from e


def _gender(value: str) -> Gender:
    return Gender(value.upper())


# ---- students / alumni ----


def encode_student(s: Student) -> dict:
    return {
        "id": s.id,
        "nisn": s.nisn,
        "name": s.name,
        "gender": s.gender.value,
        "classId": s.class_id,
        "parentPhone": s.parent_phone or "",
        "isActive": s.is_active,
    }


def decode_student(row: Mapping[str, Any]) -> Student:
    return Student(
        id=_text(row, "id", allow_empty=False),
        nisn=_text(row, "nisn"),
        name=_text(row, "name"),
        gender=_enum(_gender, row, "gender"),
        class_id=_text(row, "classId"),
        is_active=_bool(row, "isActive", default=True),
        parent_phone=_optional_text(row, "parentPhone"),
    )


def encode_alumni(a: Alumni) -> dict:
    return {
        "id": a.id,
        "nisn": a.nisn,
        "name": a.name,
        "gender": a.gender.value,
        "classId": a.class_id,
        "parentPhone": a.parent_phone or "",
        "reason": a.reason.value,
        "dateLeft": format_iso_date(a.date_left),
        "lastClassId": a.last_class_id,
        "academicYear": a.academic_year,
    }


def decode_alumni(row: Mapping[str, Any]) -> Alumni:
    class_id = _text(row, "classId")
    return Alumni(
        id=_text(row, "id", allow_empty=False),
        nisn=_text(row, "nisn"),
        name=_text(row, "name"),
        gender=_enum(_gender, row, "gender"),
        class_id=class_id,
        reason=_enum(AlumniReason.parse, row, "reason"),
        date_left=_date(row, "dateLeft"),
        last_class_id=_optional_text(row, "lastClassId") or class_id,
        academic_year=_optional_text(row, "academicYear") or c.UNKNOWN_ACADEMIC_YEAR,
        parent_phone=_optional_text(row, "parentPhone"),
    )


# ---- staff ----


def encode_teacher(t: Teacher) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "nip": t.nip,
        "classId": t.class_id or "",
        "username": t.username or "",
        "password": t.password or "",
    }


def decode_teacher(row: Mapping[str, Any]) -> Teacher:
    return Teacher(
        id=_text(row, "id", allow_empty=False),
        name=_text(row, "name"),
        nip=_optional_text(row, "nip") or "-",
        class_id=_optional_text(row, "classId"),
        username=_optional_text(row, "username"),
        password=_optional_text(row, "password"),
    )


def encode_headmaster(h: Headmaster) -> dict:
    return {"name": h.name, "nip": h.nip}


def decode_headmaster(row: Mapping[str, Any]) -> Headmaster:
    return Headmaster(name=_text(row, "name"), nip=_optional_text(row, "nip") or "")


# ---- attendance ----


def encode_attendance(r: AttendanceRecord) -> dict:
    return {
        "id": r.id,
        "studentId": r.student_id,
        "date": format_iso_date(r.date),
        "status": r.status.value,
        "academicYear": r.academic_year,
    }


def decode_attendance(row: Mapping[str, Any]) -> AttendanceRecord:
    student_id = _text(row, "studentId", allow_empty=False)
    day = _date(row, "date")
    return AttendanceRecord(
        id=attendance_record_id(student_id, format_iso_date(day)),
        student_id=student_id,
        date=day,
        status=_enum(AttendanceStatus.parse, row, "status"),
        academic_year=_optional_text(row, "academicYear") or c.UNKNOWN_ACADEMIC_YEAR,
    )


# ---- academic calendar ----


def encode_academic_year(y: AcademicYear) -> dict:
    return {"id": y.id, "name": y.name, "isActive": y.is_active}


def decode_academic_year(row: Mapping[str, Any]) -> AcademicYear:
    return AcademicYear(
        id=_text(row, "id", allow_empty=False),
        name=_text(row, "name", allow_empty=False),
        is_active=_bool(row, "isActive", default=False),
    )


def encode_holiday(h: Holiday) -> dict:
    return {"id": h.id, "date": format_iso_date(h.date), "description": h.description}


def decode_holiday(row: Mapping[str, Any]) -> Holiday:
    return Holiday(
        id=_text(row, "id", allow_empty=False),
        date=_date(row, "date"),
        description=_text(row, "description"),
    )


# ---- whole documents ----

# (remote collection name, snapshot key, state attribute, encoder, decoder)
COLLECTIONS = (
    (c.COL_STUDENTS, "students", "students", encode_student, decode_student),
    (c.COL_TEACHERS, "teachers", "teachers", encode_teacher, decode_teacher),
    (c.COL_ATTENDANCE, "attendance", "attendance", encode_attendance, decode_attendance),
    (c.COL_ALUMNI, "alumni", "alumni", encode_alumni, decode_alumni),
    (c.COL_HOLIDAYS, "holidays", "holidays", encode_holiday, decode_holiday),
    (c.COL_ACADEMIC_YEARS, "academicYears", "academic_years", encode_academic_year, decode_academic_year),
)


def _decode_rows(rows: Any, decoder, name: str) -> list:
    if not isinstance(rows, list):
        raise PayloadError(f"Collection {name!r} must be a list")
    out = []
    for i, row in enumerate(rows):
        try:
            out.append(decoder(row))
        except PayloadError as e:
            raise PayloadError(f"{name}[{i}]: {e}") from e
    return out


def _unique_attendance(records: list[AttendanceRecord]) -> list[AttendanceRecord]:
    """One record per (student, day); a later row replaces an earlier one."""

    by_key: dict = {}
    for r in records:
        by_key[r.key] = r
    return list(by_key.values())


def _decode_collection(rows: Any, attr: str, decoder, name: str) -> list:
    items = _decode_rows(rows, decoder, name)
    if attr == "attendance":
        return _unique_attendance(items)
    return items


def encode_snapshot(state: StoreState) -> dict:
    """Local snapshot document: every collection plus sync metadata."""

    doc: dict[str, Any] = {}
    for _, key, attr, encoder, _ in COLLECTIONS:
        doc[key] = [encoder(x) for x in getattr(state, attr)]
    doc["headmaster"] = encode_headmaster(state.headmaster)
    doc["remoteEndpoint"] = state.remote_endpoint
    doc["lastSync"] = state.last_sync
    return doc


def decode_snapshot(doc: Any, *, fallback: StoreState) -> StoreState:
    """Decode a snapshot; keys missing from ``doc`` keep the ``fallback`` value."""

    if not isinstance(doc, Mapping):
        raise PayloadError("Snapshot must be an object")

    state = fallback.copy()
    for _, key, attr, _, decoder in COLLECTIONS:
        if key in doc:
            setattr(state, attr, _decode_collection(doc[key], attr, decoder, key))
    if doc.get("headmaster") is not None:
        state.headmaster = decode_headmaster(doc["headmaster"])
    if doc.get("remoteEndpoint") is not None:
        state.remote_endpoint = _as_text(doc["remoteEndpoint"])
    if doc.get("lastSync") is not None:
        state.last_sync = _as_text(doc["lastSync"])
    return state


def encode_remote(state: StoreState) -> dict:
    """Write payload ``data``: one list per remote collection."""

    data: dict[str, list] = {}
    for name, _, attr, encoder, _ in COLLECTIONS:
        data[name] = [encoder(x) for x in getattr(state, attr)]
    data[c.COL_HEADMASTER] = [encode_headmaster(state.headmaster)]
    return data


def decode_remote(doc: Any) -> dict:
    """Decode a read response into ``DomainStore.replace_collections`` kwargs.

    Collections absent from the response are absent from the result.
    """

    if not isinstance(doc, Mapping):
        raise PayloadError("Remote response must be an object")

    out: dict[str, Any] = {}
    for name, _, attr, _, decoder in COLLECTIONS:
        if doc.get(name) is not None:
            out[attr] = _decode_collection(doc[name], attr, decoder, name)

    rows = doc.get(c.COL_HEADMASTER)
    if isinstance(rows, list) and rows:
        out["headmaster"] = decode_headmaster(rows[0])
    return out
