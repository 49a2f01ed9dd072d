from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .calendar.controller import register as register_calendar
from .container import Container, build_container
from .core.constants import DEFAULT_WORKING_DAYS
from .database.bootstrap import apply_schema, list_tables
from .shifts.controller import register as register_settings

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Tests pass a ready ``container`` (in-memory repositories); otherwise one
    is wired against MySQL from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # number of reverse proxies whose X-Forwarded-For entry is trusted
    proxy_hops = int(getattr(settings, "TRUSTED_PROXY_HOPS", 0))
    if proxy_hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_hops)
        logger.info("trusting X-Forwarded-For from %d proxy hop(s)", proxy_hops)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_settings=getattr(settings, "DEFAULT_ATTENDANCE_SETTINGS", None),
            default_working_days=getattr(settings, "DEFAULT_WORKING_DAYS", DEFAULT_WORKING_DAYS),
        )

    app.extensions["attendance_engine"] = container

    register_settings(app, container)
    register_attendance(app, container)
    register_calendar(app, container)

    return app
