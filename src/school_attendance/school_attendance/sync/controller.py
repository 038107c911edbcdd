from __future__ import annotations

from flask import Flask

from ..common.web import body, fail, ok, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    sync = container.sync_service

    def _status() -> dict:
        return {"endpoint": sync.endpoint, "lastSync": sync.last_sync, "isSyncing": sync.is_syncing}

    @app.route("/api/sync", methods=["GET"], endpoint="sync_status")
    @roles_required(Role.ADMIN)
    def sync_status():
        return ok(_status())

    @app.route("/api/sync/endpoint", methods=["PUT"], endpoint="sync_endpoint")
    @roles_required(Role.ADMIN)
    def sync_endpoint():
        sync.set_endpoint(str(body().get("url", "")).strip())
        return ok(_status(), "URL sinkronisasi disimpan")

    @app.route("/api/sync/push", methods=["POST"], endpoint="sync_push")
    @roles_required(Role.ADMIN)
    def sync_push():
        if not sync.push():
            return fail("Gagal mengirim data ke server", 502, _status())
        return ok(_status(), "Data berhasil dikirim ke server")

    @app.route("/api/sync/pull", methods=["POST"], endpoint="sync_pull")
    @roles_required(Role.ADMIN)
    def sync_pull():
        if not sync.pull():
            return fail("Gagal mengambil data dari server", 502, _status())
        return ok(_status(), "Data berhasil diambil dari server")
