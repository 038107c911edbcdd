from __future__ import annotations

from flask import Flask

from ..common.web import body, ok, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..persistence.codec import encode_headmaster, encode_teacher
from .model import Teacher

_FIELDS = {"name": "name", "nip": "nip", "classId": "class_id", "username": "username", "password": "password"}


def _public(t: Teacher) -> dict:
    data = encode_teacher(t)
    data.pop("password", None)
    return data


def register(app: Flask, container: Container) -> None:
    teachers = container.teacher_service
    sync = container.sync_service

    @app.route("/api/teachers", methods=["GET"], endpoint="teachers_list")
    @roles_required(Role.ADMIN)
    def teachers_list():
        return ok([_public(t) for t in teachers.list_teachers()])

    @app.route("/api/teachers", methods=["POST"], endpoint="teachers_add")
    @roles_required(Role.ADMIN)
    def teachers_add():
        data = body()
        t = teachers.add_teacher(
            name=data.get("name", ""),
            nip=str(data.get("nip", "")),
            class_id=str(data.get("classId") or "") or None,
            username=data.get("username"),
            password=data.get("password"),
        )
        sync.trigger_push()
        return ok(_public(t), "Guru ditambahkan", 201)

    @app.route("/api/teachers/<teacher_id>", methods=["PUT"], endpoint="teachers_update")
    @roles_required(Role.ADMIN)
    def teachers_update(teacher_id: str):
        data = body()
        changes = {attr: data[key] for key, attr in _FIELDS.items() if key in data}
        if not teachers.update_teacher(teacher_id, **changes):
            raise ValidationError("Guru tidak ditemukan")
        sync.trigger_push()
        return ok(message="Data guru diperbarui")

    @app.route("/api/teachers/<teacher_id>", methods=["DELETE"], endpoint="teachers_delete")
    @roles_required(Role.ADMIN)
    def teachers_delete(teacher_id: str):
        if not teachers.delete_teacher(teacher_id):
            raise ValidationError("Guru tidak ditemukan")
        sync.trigger_push()
        return ok(message="Guru dihapus")

    @app.route("/api/headmaster", methods=["GET"], endpoint="headmaster_get")
    @roles_required(Role.ADMIN, Role.WALI_KELAS)
    def headmaster_get():
        return ok(encode_headmaster(teachers.headmaster()))

    @app.route("/api/headmaster", methods=["PUT"], endpoint="headmaster_update")
    @roles_required(Role.ADMIN)
    def headmaster_update():
        data = body()
        hm = teachers.update_headmaster(name=data.get("name", ""), nip=str(data.get("nip", "")))
        sync.trigger_push()
        return ok(encode_headmaster(hm), "Data kepala sekolah diperbarui")
