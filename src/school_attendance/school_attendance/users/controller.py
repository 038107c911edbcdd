from __future__ import annotations

from flask import Flask, session

from ..common.web import body, current_user, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = body()
        try:
            role = Role(str(data.get("role", "")).upper())
        except ValueError:
            raise ValidationError("Peran tidak valid")

        user = container.auth_service.authenticate(
            role,
            username=str(data.get("username", "")).strip(),
            password=str(data.get("password", "")),
        )
        session.clear()
        session["user"] = user.as_session()
        return ok(user.as_session(), "Login berhasil")

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Berhasil keluar")

    @app.route("/api/me", endpoint="me")
    def me():
        user = current_user()
        if user is None:
            raise AuthenticationError("Silakan login terlebih dahulu")
        return ok(user.as_session())
