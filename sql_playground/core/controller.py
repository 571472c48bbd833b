"""Session controller: the single stateful coordinator of a playground session.

The controller owns the database handle, the current query text and the
selected lesson. It starts in the ``uninitialized`` phase; `bootstrap` opens
and seeds the first database, loads the lesson catalog and optionally applies a
shared locator, after which every action runs synchronously and leaves the
session ``ready``.

Query failures, seed failures and undecodable locators are absorbed here and
turned into render blocks or silent no-ops. Only `BootstrapError` and
`SessionNotReadyError` propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Literal
from uuid import uuid4

from sql_playground.core import codec
from sql_playground.core.config import ShareSettings
from sql_playground.core.database import DatabaseHandle
from sql_playground.core.errors import BootstrapError, QueryError, SessionNotReadyError
from sql_playground.core.lessons import DEFAULT_LESSON_ID, Lesson, LessonCatalog, LessonGroup, load_catalog
from sql_playground.core.logging_utils import truncate_for_log
from sql_playground.core.observability import SessionObservationSink
from sql_playground.core.render import (
    NOTHING_TO_RUN_MESSAGE,
    RESET_MESSAGE,
    SHARED_MESSAGE,
    RenderBlock,
    RenderModel,
    message,
    render,
    render_error,
    render_schema,
)
from sql_playground.core.schema import SchemaInspector

LOGGER = logging.getLogger(__name__)

SessionPhase = Literal["uninitialized", "ready"]


@dataclass(frozen=True, slots=True)
class ShareResult:
    locator: str
    url: str
    annotation: RenderBlock


@dataclass
class SessionController:
    """Orchestrates run, reset, schema, lesson and share actions."""

    database: DatabaseHandle
    catalog_loader: Callable[[], LessonCatalog] = field(default=load_catalog)
    share_settings: ShareSettings = field(default_factory=ShareSettings)
    logger: SessionObservationSink | None = None
    clock: Callable[[], float] = field(default=time.time)
    session_id_factory: Callable[[], str] = field(default=lambda: f"session-{uuid4().hex[:8]}")

    def __post_init__(self) -> None:
        self.phase: SessionPhase = "uninitialized"
        self.session_id = self.session_id_factory()
        self.query_text = ""
        self.locator: str | None = None
        self.catalog: LessonCatalog | None = None
        self.current_lesson: Lesson | None = None
        self.inspector = SchemaInspector(self.database)
        self.last_render = RenderModel()
        self.schema_view = RenderModel()

    # lifecycle

    async def bootstrap(self, shared_locator: str | None = None) -> None:
        """Open and seed the first database, then move to ``ready``."""

        if self.phase == "ready":
            return
        LOGGER.info("Bootstrapping session %s", self.session_id)
        try:
            await asyncio.to_thread(self.database.create_database)
        except Exception as exc:
            LOGGER.exception("Embedded engine failed to initialise")
            raise BootstrapError(f"Embedded engine failed to initialise: {exc}") from exc

        try:
            self.catalog = self.catalog_loader()
        except Exception as exc:
            LOGGER.exception("Lesson catalog failed to load")
            self.database.close()
            raise BootstrapError(f"Lesson catalog failed to load: {exc}") from exc
        self.current_lesson = self.catalog.find_lesson(DEFAULT_LESSON_ID)
        self.phase = "ready"
        self._refresh_schema()
        if shared_locator:
            self.apply_locator(shared_locator)
        self._log("session_started", {"shared": bool(shared_locator)})

    def start(self, shared_locator: str | None = None) -> None:
        """Blocking wrapper around `bootstrap` for callers without a loop."""

        asyncio.run(self.bootstrap(shared_locator))

    def close(self) -> None:
        self.database.close()
        self.phase = "uninitialized"
        LOGGER.info("Session %s closed", self.session_id)

    @property
    def is_ready(self) -> bool:
        return self.phase == "ready"

    # actions

    def set_query(self, text: str) -> None:
        self._require_ready()
        self.query_text = text

    def run(self, sql: str | None = None) -> RenderModel:
        """Execute the current query text (replaced by *sql* when given)."""

        self._require_ready()
        if sql is not None:
            self.query_text = sql
        text = self.query_text
        if not text.strip():
            model = RenderModel([message(NOTHING_TO_RUN_MESSAGE)])
            self.last_render = model
            return model

        try:
            batch = self.database.execute(text)
        except QueryError as exc:
            LOGGER.info(
                "Query failed at statement %s: %s (%s)",
                exc.index,
                exc.message,
                truncate_for_log(exc.statement or text),
            )
            self._log("query_failed", {"error": exc.message, "statement_index": exc.index})
            model = render_error(exc.message)
        else:
            self._log("query_executed", {"result_sets": len(batch)})
            model = render(batch)
        self.last_render = model
        return model

    def reset(self) -> RenderModel:
        """Restore the pristine seeded database; the editor text is untouched."""

        self._require_ready()
        self.database.reset()
        LOGGER.info("Database reset for session %s", self.session_id)
        self._log("database_reset", {})
        self._refresh_schema()
        model = render([], RESET_MESSAGE)
        self.last_render = model
        return model

    def show_schema(self) -> RenderModel:
        self._require_ready()
        self._log("schema_requested", {})
        return self._refresh_schema()

    def select_lesson(self, lesson_id: Any) -> Lesson | None:
        self._require_ready()
        assert self.catalog is not None
        self.current_lesson = self.catalog.find_lesson(lesson_id)
        return self.current_lesson

    def load_example(self) -> str | None:
        """Copy the selected lesson's example into the query text."""

        self._require_ready()
        lesson = self.current_lesson
        if lesson is None:
            return None
        self.query_text = lesson.example_statement()
        self._log("example_loaded", {"lesson_id": lesson.id})
        return self.query_text

    def filter_lessons(self, query: str) -> list[LessonGroup]:
        self._require_ready()
        assert self.catalog is not None
        return self.catalog.filter(query)

    def share(self, base_url: str | None = None) -> ShareResult:
        """Encode the query text into the page locator and announce it briefly."""

        self._require_ready()
        locator = codec.encode(self.query_text)
        url = codec.with_locator(
            base_url or self.share_settings.base_url or "",
            locator,
            self.share_settings.param_name,
        )
        self.locator = locator
        annotation = message(
            SHARED_MESSAGE,
            "ok",
            expires_at=self.clock() + self.share_settings.confirmation_ttl_s,
        )
        self.last_render = RenderModel([annotation, *self.last_render.blocks])
        self._log("query_shared", {"locator_length": len(locator)})
        return ShareResult(locator=locator, url=url, annotation=annotation)

    def apply_locator(self, locator: str | None) -> bool:
        """Replace the query text with the decoded *locator* when it is usable."""

        self._require_ready()
        text = codec.decode(locator)
        if not text:
            return False
        self.query_text = text
        self.locator = locator
        self._log("locator_applied", {"length": len(text)})
        return True

    def apply_url(self, url: str) -> bool:
        return self.apply_locator(codec.read_locator(url, self.share_settings.param_name))

    def active_blocks(self, now: float | None = None) -> RenderModel:
        """The latest results without transient blocks that have expired."""

        return self.last_render.active(self.clock() if now is None else now)

    # internals

    def _refresh_schema(self) -> RenderModel:
        try:
            model = render_schema(self.inspector.summarize())
        except QueryError as exc:
            LOGGER.warning("Schema inspection failed: %s", exc.message)
            model = render_error(exc.message)
        self.schema_view = model
        return model

    def _require_ready(self) -> None:
        if self.phase != "ready":
            raise SessionNotReadyError("Session has not finished bootstrapping")

    def _log(self, event: str, payload: dict[str, Any]) -> None:
        if self.logger is not None:
            self.logger.log_event(self.session_id, event, payload)
