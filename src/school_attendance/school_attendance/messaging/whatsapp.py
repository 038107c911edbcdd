"""WhatsApp message composition for parents and class groups.

Only builds text and ``wa.me`` links; sending is left to the user's device.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional
from urllib.parse import quote

from ..attendance.model import SheetRow
from ..common.datetime_utils import format_long_date
from ..core.constants import SCHOOL_NAME
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

_STATUS_TEXT = {
    AttendanceStatus.HADIR: ("HADIR", "✅"),
    AttendanceStatus.SAKIT: ("SAKIT", "\U0001f637"),
    AttendanceStatus.IZIN: ("IZIN", "\U0001f4e9"),
    AttendanceStatus.ALPA: ("ALPA (Tanpa Keterangan)", "❌"),
}

_RULE = "--------------------------------"


def format_phone(phone: Optional[str]) -> str:
    """Normalise to the international ``62...`` form, digits only."""

    p = re.sub(r"\D", "", phone or "")
    if p.startswith("0"):
        p = "62" + p[1:]
    elif p.startswith("8"):
        p = "62" + p
    return p


def wa_link(text: str, phone: str = "") -> str:
    return f"https://wa.me/{phone}?text={quote(text)}"


def student_notice(*, name: str, status: AttendanceStatus, day: date) -> str:
    if status not in _STATUS_TEXT:
        raise ValidationError("Pilih status kehadiran dulu")
    label, emoji = _STATUS_TEXT[status]
    return (
        f"Yth. Wali Murid ananda *{name}*,\n\n"
        f"Diberitahukan bahwa pada hari ini {format_long_date(day)}, siswa tersebut tercatat: *{label} {emoji}*.\n\n"
        f"Terima kasih.\n_Absensi {SCHOOL_NAME}_"
    )


def student_notice_link(row: SheetRow, day: date) -> str:
    """Link that opens a chat with the parent, prefilled with the notice."""

    phone = format_phone(row.parent_phone)
    if not phone:
        raise ValidationError(f"Nomor WA Orang Tua untuk {row.name} belum diisi di Data Siswa.")
    return wa_link(student_notice(name=row.name, status=row.status, day=day), phone)


def class_recap(*, class_id: str, day: date, rows: Iterable[SheetRow]) -> str:
    rows = list(rows)
    lines = [f"*LAPORAN ABSENSI KELAS {class_id}*", format_long_date(day), _RULE]

    for status, title in (
        (AttendanceStatus.SAKIT, "\U0001f637 SAKIT:"),
        (AttendanceStatus.IZIN, "\U0001f4e9 IZIN:"),
        (AttendanceStatus.ALPA, "❌ ALPA:"),
    ):
        names = [r.name for r in rows if r.status is status]
        if names:
            lines.append(f"*{title}*")
            lines.extend(f"{i}. {n}" for i, n in enumerate(names, start=1))
            lines.append("")

    hadir = sum(1 for r in rows if r.status is AttendanceStatus.HADIR)
    lines.append(f"✅ Hadir: {hadir} Siswa")
    not_marked = sum(1 for r in rows if r.status is AttendanceStatus.NONE)
    if not_marked > 0:
        lines.append(f"⚠️ Belum Absen: {not_marked} Siswa")
    lines.append(_RULE)
    lines.append(f"_{SCHOOL_NAME}_")
    return "\n".join(lines)
