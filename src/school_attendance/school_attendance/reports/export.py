from __future__ import annotations

import csv
import io

from ..common.datetime_utils import MONTH_NAMES
from .model import MonthlyReport


def monthly_report_csv(report: MonthlyReport) -> str:
    """Monthly recap as CSV: one row per student, one column per day, then H/S/I/A."""

    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(["No", "NISN", "Nama Siswa", "Kelas", *[d.date.day for d in report.days], "H", "S", "I", "A"])
    for i, row in enumerate(report.rows, start=1):
        c = row.counts
        writer.writerow(
            [i, row.student.nisn, row.student.name, row.student.class_id, *row.cells, c.hadir, c.sakit, c.izin, c.alpa]
        )
    return out.getvalue()


def monthly_report_filename(report: MonthlyReport) -> str:
    month = MONTH_NAMES[report.month - 1]
    return f"Absensi_Kelas_{report.class_id}_{month}_{report.year}.csv"
