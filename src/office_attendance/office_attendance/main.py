from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .attendance.rules import ClassificationRules
from .common.datetime_utils import parse_wall_clock
from .common.logger import configure_logging, get_logger
from .container import Container, build_container
from .core.constants import DEFAULT_AUTO_CLOCK_OUT_TIME, DEFAULT_SHIFT_TIMEZONE
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .users.controller import register as register_users

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def rules_from_settings(settings) -> ClassificationRules:
    return ClassificationRules.from_settings(
        late_threshold=getattr(settings, "LATE_THRESHOLD", "09:15:00"),
        half_day_min_hours=getattr(settings, "HALF_DAY_MIN_HOURS", 7.0),
        shift_timezone=getattr(settings, "SHIFT_TIMEZONE", DEFAULT_SHIFT_TIMEZONE),
    )


def create_app(container: Optional[Container] = None, *, settings=None) -> Flask:
    settings = settings or load_settings()
    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_file=getattr(settings, "LOG_FILE", None),
    )
    log = get_logger("main")

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CLOCK_IN_ALLOWED_IPS"] = list(getattr(settings, "CLOCK_IN_ALLOWED_IPS", []))
    app.config["SESSION_COOKIE_HTTPONLY"] = True

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        auto_clock_out = getattr(settings, "AUTO_CLOCK_OUT_TIME", None)
        container = build_container(
            db_config=db_config,
            rules=rules_from_settings(settings),
            auto_clock_out_time=parse_wall_clock(auto_clock_out) if auto_clock_out else DEFAULT_AUTO_CLOCK_OUT_TIME,
        )
        log.info(
            "settings=%s db=%s@%s:%s/%s",
            settings.__name__,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)) and container.conn is not None:
            apply_schema(container.conn, schema_path=SCHEMA_PATH)
            log.info("schema ready (tables=%s)", len(list_tables(container.conn)))
            if bool(getattr(settings, "AUTO_SEED_DB", False)):
                ensure_demo_users(container.conn)

    app.extensions["office_attendance"] = container

    register_users(app, container)
    register_attendance(app, container)

    return app
