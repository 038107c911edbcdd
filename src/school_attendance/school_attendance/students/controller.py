from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.web import body, ok, roles_required
from ..container import Container
from ..core.constants import GRADUATE
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..persistence.codec import encode_alumni, encode_student
from ..users.service import require_class_access
from .service import suggest_next_class

_FIELDS = {"name": "name", "nisn": "nisn", "gender": "gender", "classId": "class_id", "parentPhone": "parent_phone"}


def register(app: Flask, container: Container) -> None:
    students = container.student_service
    sync = container.sync_service

    def _saved(message: str, data=None, status: int = 200):
        sync.trigger_push()
        return ok(data, message, status)

    def _not_found():
        raise ValidationError("Siswa tidak ditemukan")

    def _own_student(student_id: str):
        student = container.store.get_student(student_id)
        if student is None:
            _not_found()
        require_class_access(g.user, student.class_id)
        return student

    def _parse_day(value) -> object:
        try:
            return parse_iso_date(value) if value else today_local()
        except ValueError:
            raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_list():
        class_id = request.args.get("class_id") or None
        if g.user.role == Role.WALI_KELAS:
            class_id = g.user.class_id
        rows = [encode_student(s) for s in students.list_students(class_id=class_id)]
        return ok(rows)

    @app.route("/api/students", methods=["POST"], endpoint="students_add")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_add():
        data = body()
        class_id = str(data.get("classId", ""))
        require_class_access(g.user, class_id)
        s = students.add_student(
            name=data.get("name", ""),
            nisn=str(data.get("nisn", "")),
            gender=data.get("gender", "L"),
            class_id=class_id,
            parent_phone=data.get("parentPhone"),
        )
        return _saved("Siswa ditambahkan", encode_student(s), 201)

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_update(student_id: str):
        data = body()
        _own_student(student_id)
        changes = {attr: data[key] for key, attr in _FIELDS.items() if key in data}
        if "class_id" in changes:
            changes["class_id"] = str(changes["class_id"])
            require_class_access(g.user, changes["class_id"])
        if not students.update_student(student_id, **changes):
            _not_found()
        return _saved("Data siswa diperbarui")

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @roles_required(Role.ADMIN)
    def students_delete(student_id: str):
        if not students.delete_student(student_id):
            _not_found()
        return _saved("Siswa dihapus")

    @app.route("/api/students/import", methods=["POST"], endpoint="students_import")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_import():
        data = body()
        class_id = str(data.get("classId", ""))
        require_class_access(g.user, class_id)
        result = students.import_text(data.get("text", ""), class_id=class_id)
        return _saved(result.message, {"imported": result.imported, "skipped": result.skipped})

    @app.route("/api/students/<student_id>/promote", methods=["POST"], endpoint="students_promote")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_promote(student_id: str):
        data = body()
        current = _own_student(student_id)
        target = str(data.get("targetClass") or suggest_next_class(current.class_id))
        # A homeroom teacher may hand a student on to the next class; any other
        # target has to be a class they own.
        if target not in (GRADUATE, suggest_next_class(current.class_id)):
            require_class_access(g.user, target)
        if not students.promote(student_id, target):
            _not_found()
        return _saved("Status siswa diperbarui", {"targetClass": target})

    @app.route("/api/students/<student_id>/alumni", methods=["POST"], endpoint="students_to_alumni")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def students_to_alumni(student_id: str):
        data = body()
        _own_student(student_id)
        alumni = students.transfer_to_alumni(student_id, data.get("reason", "Pindah"), _parse_day(data.get("date")))
        if alumni is None:
            _not_found()
        return _saved("Siswa dipindahkan ke alumni", encode_alumni(alumni))

    @app.route("/api/alumni", methods=["GET"], endpoint="alumni_list")
    @roles_required(Role.ADMIN)
    def alumni_list():
        return ok([encode_alumni(a) for a in students.list_alumni()])
