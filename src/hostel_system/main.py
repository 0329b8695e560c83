from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .allottees.controller import register as register_allottees
from .attendance.controller import register as register_attendance
from .common.http import ok, register_error_handlers
from .complaints.controller import register as register_complaints
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import ensure_indexes, list_collections, seed_demo_data
from .logging_config import configure_logging
from .rooms.controller import register as register_rooms

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        json_output=bool(getattr(settings, "LOG_JSON", False)),
    )
    logger.info("Starting with settings=%s db=%s", settings_module, db_config.get("database"))

    if container is None:
        container = build_container(db_config=db_config)
        if getattr(settings, "AUTO_INIT_DB", False):
            ensure_indexes(container.conn)
        if getattr(settings, "AUTO_SEED_DB", False):
            seed_demo_data(container.conn)

    app.extensions["hostel_container"] = container

    register_error_handlers(app)
    register_allottees(app, container)
    register_rooms(app, container)
    register_attendance(app, container)
    register_complaints(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        if container.conn is None:
            return ok({"status": "ok", "database": "not configured"})
        try:
            container.conn.ping()
        except Exception as e:
            logger.warning("Database ping failed: %s", e)
            return ok({"status": "degraded", "database": "unavailable"}, 503)
        return ok({"status": "ok", "database": "connected", "collections": list_collections(container.conn)[:10]})

    return app
