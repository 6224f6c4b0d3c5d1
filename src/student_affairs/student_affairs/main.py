from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, session

from config import get_settings_module

from .common.http import PERIOD_SEMESTER_KEY, PERIOD_YEAR_KEY, json_body, ok, register_error_handlers, session_period
from .core.constants import DEFAULT_ACADEMIC_YEAR, DEFAULT_FETCH_WORKERS, DEFAULT_SEMESTER
from .core.period import PeriodScope
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_students, list_tables

from .container import Container, build_container
from .academic.controller import register as register_academic
from .dashboard.controller import register as register_dashboard
from .dormitory.controller import register as register_dormitory
from .entities.controller import register as register_entities

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=ROOT_DIR / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=ROOT_DIR / "database" / "seed.sql")
            ensure_demo_students(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            follow_up_store_path=ROOT_DIR / getattr(settings, "FOLLOW_UP_STORE_PATH", "instance/confirmed_ids.json"),
            default_period=PeriodScope.parse(
                getattr(settings, "DEFAULT_ACADEMIC_YEAR", DEFAULT_ACADEMIC_YEAR),
                getattr(settings, "DEFAULT_SEMESTER", DEFAULT_SEMESTER),
            ),
            fetch_workers=int(getattr(settings, "FETCH_WORKERS", DEFAULT_FETCH_WORKERS)),
        )

    register_error_handlers(app)

    @app.route("/session/period", methods=["GET"], endpoint="session_period_get")
    def session_period_get():
        period = session_period(container.default_period)
        return ok(period.as_row())

    @app.route("/session/period", methods=["POST"], endpoint="session_period_set")
    def session_period_set():
        body = json_body()
        period = PeriodScope.parse(body.get("academic_year"), body.get("semester"))
        session[PERIOD_YEAR_KEY] = period.academic_year
        session[PERIOD_SEMESTER_KEY] = period.semester
        return ok(period.as_row(), message="Academic period updated")

    register_entities(app, container)
    register_academic(app, container)
    register_dormitory(app, container)
    register_dashboard(app, container)

    return app
