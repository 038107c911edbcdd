from __future__ import annotations

import csv
import io
from datetime import date

import pytest

from src.school_attendance.school_attendance.academic.model import Holiday
from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.core.enums import AttendanceStatus
from src.school_attendance.school_attendance.core.exceptions import ValidationError
from src.school_attendance.school_attendance.reports.export import monthly_report_csv, monthly_report_filename
from src.school_attendance.school_attendance.reports.service import ReportService


def _mark(store, student_id, day, status):
    store.mark_attendance(
        [AttendanceRecord.create(student_id=student_id, day=day, status=status, academic_year="2023/2024")]
    )


@pytest.fixture
def may_store(store):
    _mark(store, "s1", date(2024, 5, 20), AttendanceStatus.HADIR)
    _mark(store, "s2", date(2024, 5, 20), AttendanceStatus.SAKIT)
    _mark(store, "s1", date(2024, 5, 21), AttendanceStatus.ALPA)
    return store


def test_monthly_report_for_one_class(may_store):
    report = ReportService(may_store).monthly_report(year=2024, month=5, class_id="1")

    # May 2024: 31 days, 8 weekend days, 1 May holiday.
    assert len(report.days) == 31
    assert report.effective_days == 22
    assert [r.student.name for r in report.rows] == ["Ahmad Dani", "Bunga Citra"]

    ahmad = report.rows[0]
    assert ahmad.cells[0] == "L"
    assert ahmad.cells[17] == ""
    assert ahmad.cells[19] == "H"
    assert ahmad.cells[20] == "A"
    assert ahmad.cells[21] == "-"
    assert ahmad.counts.as_dict() == {"H": 1, "S": 0, "I": 0, "A": 1}

    assert report.totals.as_dict() == {"H": 1, "S": 1, "I": 0, "A": 1}
    # 1 present out of 2 students x 22 school days.
    assert report.percentage == "2.27"
    assert report.homeroom_teacher.name == "Budi Santoso, S.Pd"
    assert report.academic_year == "2023/2024"
    assert report.headmaster.name == "Drs. H. Ahmad Fauzi, M.Pd"


def test_records_on_a_later_holiday_are_not_counted(may_store):
    may_store.add_holiday(Holiday(id="h9", date=date(2024, 5, 21), description="Libur Sekolah"))

    report = ReportService(may_store).monthly_report(year=2024, month=5, class_id="1")

    assert report.rows[0].cells[20] == "L"
    assert report.rows[0].counts.alpa == 0
    assert report.effective_days == 21


def test_all_classes_are_ordered_by_class_then_name(may_store):
    report = ReportService(may_store).monthly_report(year=2024, month=5)

    assert [r.student.id for r in report.rows] == ["s1", "s2", "s3", "s4"]
    assert report.homeroom_teacher is None


def test_empty_class_has_zero_percentage(store):
    report = ReportService(store).monthly_report(year=2024, month=5, class_id="5")

    assert report.rows == []
    assert report.percentage == "0.00"


def test_invalid_month_is_rejected(store):
    with pytest.raises(ValidationError):
        ReportService(store).monthly_report(year=2024, month=13)


def test_daily_summary(may_store):
    summary = ReportService(may_store).daily_summary(date(2024, 5, 20))

    assert (summary.total_students, summary.male, summary.female) == (4, 2, 2)
    assert summary.counts.as_dict() == {"H": 1, "S": 1, "I": 0, "A": 0}
    assert summary.not_marked == 2


def test_daily_summary_for_one_class(may_store):
    summary = ReportService(may_store).daily_summary("2024-05-21", class_id="1")

    assert summary.total_students == 2
    assert summary.counts.alpa == 1


def test_parent_month_view_is_newest_first(may_store):
    view = ReportService(may_store).student_month(nisn="0012345678", year=2024, month=5)

    assert [r.date.day for r in view.records] == [21, 20]
    assert view.counts.as_dict() == {"H": 1, "S": 0, "I": 0, "A": 1}


def test_parent_month_view_unknown_nisn(store):
    with pytest.raises(ValidationError):
        ReportService(store).student_month(nisn="000", year=2024, month=5)


def test_monthly_csv_export(may_store):
    report = ReportService(may_store).monthly_report(year=2024, month=5, class_id="1")

    rows = list(csv.reader(io.StringIO(monthly_report_csv(report))))

    assert rows[0][:3] == ["No", "NISN", "Nama Siswa"]
    assert rows[0][-4:] == ["H", "S", "I", "A"]
    assert rows[1][2] == "Ahmad Dani"
    assert rows[1][-4:] == ["1", "0", "0", "1"]
    assert len(rows) == 3
    assert monthly_report_filename(report) == "Absensi_Kelas_1_Mei_2024.csv"
