from __future__ import annotations

from flask import Flask, Response, g, request

from ..common.datetime_utils import format_iso_date, today_local
from ..common.web import ok, roles_required
from ..container import Container
from ..core.constants import ALL_CLASSES
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..persistence.codec import encode_attendance, encode_student
from .export import monthly_report_csv, monthly_report_filename
from .model import MonthlyReport


def _month_args() -> tuple[int, int]:
    today = today_local()
    try:
        year = int(request.args.get("year", today.year))
        month = int(request.args.get("month", today.month))
    except ValueError:
        raise ValidationError("Tahun/bulan tidak valid")
    return year, month


def _report_json(report: MonthlyReport) -> dict:
    homeroom = report.homeroom_teacher
    return {
        "year": report.year,
        "month": report.month,
        "classId": report.class_id,
        "days": [
            {"date": format_iso_date(d.date), "isWeekend": d.is_weekend, "isHoliday": d.is_holiday} for d in report.days
        ],
        "rows": [
            {"student": encode_student(r.student), "cells": r.cells, "counts": r.counts.as_dict()} for r in report.rows
        ],
        "totals": report.totals.as_dict(),
        "effectiveDays": report.effective_days,
        "percentage": report.percentage,
        "academicYear": report.academic_year,
        "headmaster": {"name": report.headmaster.name, "nip": report.headmaster.nip},
        "homeroomTeacher": {"name": homeroom.name, "nip": homeroom.nip} if homeroom else None,
    }


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _monthly() -> MonthlyReport:
        year, month = _month_args()
        class_id = request.args.get("class_id") or ALL_CLASSES
        if g.user.role == Role.WALI_KELAS:
            class_id = g.user.class_id or ""
        return reports.monthly_report(year=year, month=month, class_id=class_id)

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="report_monthly")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def report_monthly():
        return ok(_report_json(_monthly()))

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="report_monthly_csv")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def report_monthly_csv():
        report = _monthly()
        return Response(
            monthly_report_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={monthly_report_filename(report)}"},
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def dashboard():
        class_id = request.args.get("class_id") or None
        if g.user.role == Role.WALI_KELAS:
            class_id = g.user.class_id
        summary = reports.daily_summary(today_local(), class_id=class_id)
        active = container.calendar_service.active_year()
        return ok(
            {
                "date": format_iso_date(summary.date),
                "totalStudents": summary.total_students,
                "male": summary.male,
                "female": summary.female,
                "counts": summary.counts.as_dict(),
                "notMarked": summary.not_marked,
                "academicYear": active.name if active else None,
                "lastSync": container.sync_service.last_sync,
            }
        )

    @app.route("/api/parent/attendance", methods=["GET"], endpoint="parent_attendance")
    @roles_required(Role.ORANG_TUA)
    def parent_attendance():
        year, month = _month_args()
        view = reports.student_month(nisn=g.user.id or "", year=year, month=month)
        return ok(
            {
                "student": encode_student(view.student),
                "year": view.year,
                "month": view.month,
                "records": [encode_attendance(r) for r in view.records],
                "counts": view.counts.as_dict(),
            }
        )
