from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .academic.controller import register as register_academic
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import build_container
from .core.log import configure_logging
from .reports.controller import register as register_reports
from .staff.controller import register as register_staff
from .students.controller import register as register_students
from .sync.controller import register as register_sync
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(**overrides) -> Flask:
    """Build the Flask app.

    ``overrides`` replace settings of the selected module (upper-case names),
    e.g. ``create_app(DATA_DIR=tmp_path, AUTO_PUSH=False)`` in tests. A
    ``SESSION`` override is handed to the sync client instead of a real
    ``requests.Session``.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    def setting(name: str, default=None):
        return overrides.get(name, getattr(settings, name, default))

    configure_logging(setting("LOG_LEVEL", "INFO"))

    app.secret_key = setting("SECRET_KEY")
    app.config["DEBUG"] = bool(setting("DEBUG", False))
    app.config["TESTING"] = bool(setting("TESTING", False))
    app.config["DATA_DIR"] = str(setting("DATA_DIR", "data"))

    logger.info("Starting with settings=%s data_dir=%s", settings_module, app.config["DATA_DIR"])

    container = build_container(
        data_dir=app.config["DATA_DIR"],
        remote_endpoint=setting("REMOTE_ENDPOINT", "") or "",
        admin_username=setting("ADMIN_USERNAME", "admin"),
        admin_password=setting("ADMIN_PASSWORD", "admin"),
        auto_pull=bool(setting("AUTO_PULL_ON_START", False)),
        auto_push=bool(setting("AUTO_PUSH", False)),
        sync_timeout=setting("SYNC_TIMEOUT"),
        session=overrides.get("SESSION"),
    )
    app.extensions["school_attendance"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_staff(app, container)
    register_academic(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_sync(app, container)

    return app
