"""Factory helpers for constructing a session controller from settings."""

from __future__ import annotations

from functools import partial
from pathlib import Path

from sql_playground.core.config import Settings
from sql_playground.core.controller import SessionController
from sql_playground.core.database import DatabaseHandle
from sql_playground.core.lessons import load_catalog
from sql_playground.core.observability import JSONLSessionLogger, SessionObservationSink
from sql_playground.integrations.sqlite_engine import SQLiteEngine


def build_controller(settings: Settings) -> SessionController:
    """Create an un-bootstrapped controller wired according to *settings*."""

    engine = SQLiteEngine()
    database = DatabaseHandle(engine=engine)
    catalog_loader = partial(load_catalog, settings.paths.lessons_path)
    return SessionController(
        database=database,
        catalog_loader=catalog_loader,
        share_settings=settings.share,
        logger=_build_session_logger(settings),
    )


def _build_session_logger(settings: Settings) -> SessionObservationSink | None:
    base = settings.paths.session_logs_dir
    if not base:
        return None
    path = Path(base).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return JSONLSessionLogger(base_dir=path)
