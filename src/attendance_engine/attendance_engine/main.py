from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .automark.controller import register as register_automark
from .common.datetime_utils import parse_hhmm
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .projection.controller import register as register_projection
from .target.controller import register as register_target

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            staging_dir=getattr(settings, "STAGING_CACHE_DIR", "instance/staging"),
            scan_interval_seconds=getattr(settings, "AUTO_MARK_SCAN_INTERVAL_SECONDS", 3600),
            cutoff=parse_hhmm(getattr(settings, "AUTO_MARK_CUTOFF", "23:59")),
            fetch_workers=getattr(settings, "FETCH_WORKERS", 4),
            default_target_pct=getattr(settings, "DEFAULT_TARGET_PERCENTAGE", 75.0),
        )
        atexit.register(container.automark.shutdown)

    app.extensions["attendance_engine"] = container

    register_error_handlers(app)
    register_attendance(app, container)
    register_projection(app, container)
    register_target(app, container)
    register_automark(app, container)

    return app
