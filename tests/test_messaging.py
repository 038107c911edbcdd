from __future__ import annotations

from datetime import date
from urllib.parse import unquote

import pytest

from src.school_attendance.school_attendance.attendance.model import SheetRow
from src.school_attendance.school_attendance.core.enums import AttendanceStatus
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.messaging.whatsapp import (
    class_recap,
    format_phone,
    student_notice,
    student_notice_link,
)

MONDAY = date(2024, 5, 20)


@pytest.mark.parametrize(
    "raw, expected",
    [("0812-3456-789", "628123456789"), ("8123456789", "628123456789"), ("+62 812", "62812"), (None, "")],
)
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


def test_student_notice_text():
    text = student_notice(name="Ahmad Dani", status=AttendanceStatus.HADIR, day=MONDAY)

    assert "*Ahmad Dani*" in text
    assert "Senin, 20 Mei 2024" in text
    assert "HADIR" in text


def test_unmarked_student_has_no_notice():
    with pytest.raises(ValidationError):
        student_notice(name="Ahmad Dani", status=AttendanceStatus.NONE, day=MONDAY)


def test_notice_link_needs_a_phone():
    row = SheetRow(student_id="s3", nisn="1", name="Candra", status=AttendanceStatus.SAKIT)

    with pytest.raises(ValidationError):
        student_notice_link(row, MONDAY)


def test_notice_link_targets_the_parent():
    row = SheetRow(student_id="s1", nisn="1", name="Ahmad Dani", status=AttendanceStatus.IZIN, parent_phone="081234")

    link = student_notice_link(row, MONDAY)

    assert link.startswith("https://wa.me/6281234?text=")
    assert "IZIN" in unquote(link)


def test_class_recap_lists_absences_and_unmarked():
    rows = [
        SheetRow(student_id="s1", nisn="1", name="Ahmad Dani", status=AttendanceStatus.HADIR),
        SheetRow(student_id="s2", nisn="2", name="Bunga Citra", status=AttendanceStatus.SAKIT),
        SheetRow(student_id="s5", nisn="5", name="Eka", status=AttendanceStatus.NONE),
    ]

    text = class_recap(class_id="1", day=MONDAY, rows=rows)

    assert text.startswith("*LAPORAN ABSENSI KELAS 1*")
    assert "1. Bunga Citra" in text
    assert "Hadir: 1 Siswa" in text
    assert "Belum Absen: 1 Siswa" in text
    assert "ALPA:" not in text
