from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DayOffError, ValidationError
from ..users.service import SessionUser, require_role

logger = logging.getLogger(__name__)


def ok(data: Any = None, message: str = "Success", status: int = 200):
    return jsonify({"success": True, "data": data, "message": message}), status


def fail(message: str, status: int, data: Any = None):
    return jsonify({"success": False, "data": data, "message": message}), status


def current_user() -> Optional[SessionUser]:
    data = session.get("user")
    return SessionUser.from_session(data) if data else None


def roles_required(*roles: Role):
    """Allow only logged-in users with one of ``roles``; the user is put in ``g.user``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.user = require_role(current_user(), *roles)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Body harus berupa objek JSON")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DayOffError)
    def _day_off(e: DayOffError):
        return fail(str(e), 400, data={"date": e.day.isoformat(), "reason": e.reason})

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404, 405, ...).
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Kesalahan sistem: {e}", 500)
        return fail("Kesalahan sistem", 500)
