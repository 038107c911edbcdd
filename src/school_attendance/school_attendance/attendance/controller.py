from __future__ import annotations

import logging

from flask import Flask, g, request

from ..common.datetime_utils import format_iso_date, parse_iso_date, today_local
from ..common.web import body, ok, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..messaging.whatsapp import class_recap, student_notice_link, wa_link
from ..users.service import require_class_access
from .model import DayCheck, SheetRow

logger = logging.getLogger(__name__)


def _day_arg(value):
    try:
        return parse_iso_date(value) if value else today_local()
    except ValueError:
        raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")


def _check_json(check: DayCheck) -> dict:
    return {
        "date": format_iso_date(check.date),
        "isWeekend": check.is_weekend,
        "isHoliday": check.is_holiday,
        "holiday": check.holiday_description,
        "blocked": check.blocked,
    }


def _row_json(row: SheetRow) -> dict:
    return {
        "studentId": row.student_id,
        "nisn": row.nisn,
        "name": row.name,
        "status": row.status.value,
        "parentPhone": row.parent_phone or "",
    }


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service
    sync = container.sync_service

    @app.route("/api/attendance/check", methods=["GET"], endpoint="attendance_check")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def attendance_check():
        return ok(_check_json(attendance.check_day(_day_arg(request.args.get("date")))))

    @app.route("/api/attendance/<class_id>", methods=["GET"], endpoint="attendance_sheet")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def attendance_sheet(class_id: str):
        require_class_access(g.user, class_id)
        sheet = attendance.day_sheet(class_id, _day_arg(request.args.get("date")))
        return ok({"classId": sheet.class_id, "day": _check_json(sheet.check), "rows": [_row_json(r) for r in sheet.rows]})

    @app.route("/api/attendance/<class_id>", methods=["POST"], endpoint="attendance_mark")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def attendance_mark(class_id: str):
        require_class_access(g.user, class_id)
        data = body()
        statuses = data.get("statuses")
        if not isinstance(statuses, dict):
            raise ValidationError("Data absensi harus berupa objek {studentId: status}")

        count = attendance.mark_class_day(_day_arg(data.get("date")), statuses, class_id=class_id)
        logger.info("%s saved %d attendance records for class %s", g.user.name, count, class_id)
        sync.trigger_push()
        return ok({"saved": count}, "Absensi berhasil disimpan")

    @app.route("/api/attendance/import", methods=["POST"], endpoint="attendance_import")
    @roles_required(Role.ADMIN)
    def attendance_import():
        data = body()
        result = attendance.import_text(_day_arg(data.get("date")), data.get("text", ""))
        sync.trigger_push()
        return ok({"imported": result.imported, "skipped": result.skipped}, result.message)

    @app.route("/api/attendance/<class_id>/whatsapp", methods=["GET"], endpoint="attendance_whatsapp")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def attendance_whatsapp(class_id: str):
        require_class_access(g.user, class_id)
        day = _day_arg(request.args.get("date"))
        sheet = attendance.day_sheet(class_id, day)

        links = {}
        for row in sheet.rows:
            try:
                links[row.student_id] = student_notice_link(row, day)
            except ValidationError:
                # No phone or no status yet.
                links[row.student_id] = None

        recap = class_recap(class_id=class_id, day=day, rows=sheet.rows)
        return ok({"students": links, "recap": recap, "recapLink": wa_link(recap)})
