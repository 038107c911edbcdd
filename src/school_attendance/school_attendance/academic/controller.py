from __future__ import annotations

from flask import Flask

from ..common.web import body, ok, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..persistence.codec import encode_academic_year, encode_holiday


def register(app: Flask, container: Container) -> None:
    calendar = container.calendar_service
    sync = container.sync_service

    # ---- academic years ----

    @app.route("/api/academic-years", methods=["GET"], endpoint="years_list")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def years_list():
        return ok([encode_academic_year(y) for y in calendar.list_years()])

    @app.route("/api/academic-years", methods=["POST"], endpoint="years_add")
    @roles_required(Role.ADMIN)
    def years_add():
        year = calendar.add_year(body().get("name", ""))
        sync.trigger_push()
        return ok(encode_academic_year(year), "Tahun pelajaran ditambahkan", 201)

    @app.route("/api/academic-years/<year_id>/activate", methods=["POST"], endpoint="years_activate")
    @roles_required(Role.ADMIN)
    def years_activate(year_id: str):
        if not calendar.activate_year(year_id):
            raise ValidationError("Tahun pelajaran tidak ditemukan")
        sync.trigger_push()
        return ok(message="Tahun pelajaran aktif diperbarui")

    @app.route("/api/academic-years/<year_id>", methods=["DELETE"], endpoint="years_delete")
    @roles_required(Role.ADMIN)
    def years_delete(year_id: str):
        if not calendar.delete_year(year_id):
            raise ValidationError("Tahun pelajaran tidak ditemukan")
        sync.trigger_push()
        return ok(message="Tahun pelajaran dihapus")

    # ---- holidays ----

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def holidays_list():
        return ok([encode_holiday(h) for h in calendar.list_holidays()])

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_add")
    @roles_required(Role.ADMIN)
    def holidays_add():
        data = body()
        holiday = calendar.add_holiday(day=data.get("date", ""), description=data.get("description", ""))
        sync.trigger_push()
        return ok(encode_holiday(holiday), "Hari libur ditambahkan", 201)

    @app.route("/api/holidays/<holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @roles_required(Role.ADMIN)
    def holidays_delete(holiday_id: str):
        if not calendar.delete_holiday(holiday_id):
            raise ValidationError("Hari libur tidak ditemukan")
        sync.trigger_push()
        return ok(message="Hari libur dihapus")

    @app.route("/api/holidays/import", methods=["POST"], endpoint="holidays_import")
    @roles_required(Role.ADMIN)
    def holidays_import():
        result = calendar.import_text(body().get("text", ""))
        sync.trigger_push()
        return ok({"imported": result.imported, "skipped": result.skipped}, result.message)
