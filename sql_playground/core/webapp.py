"""FastAPI-powered presentation adapter for the SQL playground session."""

from __future__ import annotations

import argparse
import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, Literal

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from sql_playground.core.config import DEFAULT_CONFIG_PATH, load_settings
from sql_playground.core.controller import SessionController
from sql_playground.core.dependencies import build_controller
from sql_playground.core.lessons import Lesson
from sql_playground.core.logging_utils import truncate_for_log
from sql_playground.core.render import RenderModel

LOGGER = logging.getLogger(__name__)


class TableModel(BaseModel):
    columns: list[str]
    rows: list[list[str]]
    title: str | None = None


class BlockModel(BaseModel):
    kind: Literal["table", "message"]
    severity: Literal["ok", "error", "neutral"]
    text: str | None = None
    table: TableModel | None = None
    expires_at: float | None = None


class RenderResponse(BaseModel):
    blocks: list[BlockModel] = Field(default_factory=list)


class LessonModel(BaseModel):
    id: str
    title: str
    description: str
    example: str


class LessonGroupModel(BaseModel):
    title: str
    lessons: list[LessonModel]


class LessonsResponse(BaseModel):
    query: str
    groups: list[LessonGroupModel]


class SessionResponse(BaseModel):
    session_id: str
    query: str
    locator: str | None = None
    lesson: LessonModel | None = None


class QueryUpdateRequest(BaseModel):
    sql: str = ""


class RunRequest(BaseModel):
    sql: str | None = Field(None, description="Replaces the current query text before running")


class ShareRequest(BaseModel):
    base_url: str | None = Field(None, description="Page address the locator is attached to")


class ShareResponse(BaseModel):
    locator: str
    url: str
    annotation: BlockModel


def _render_response(model: RenderModel) -> RenderResponse:
    return RenderResponse(blocks=[BlockModel(**block.to_dict()) for block in model])


def _lesson_model(lesson: Lesson | None) -> LessonModel | None:
    if lesson is None:
        return None
    return LessonModel(**lesson.to_dict())


def _session_response(controller: SessionController) -> SessionResponse:
    return SessionResponse(
        session_id=controller.session_id,
        query=controller.query_text,
        locator=controller.locator,
        lesson=_lesson_model(controller.current_lesson),
    )


def create_app(
    config_path: str | None = None,
    *,
    controller: SessionController | None = None,
) -> FastAPI:
    LOGGER.info("Initialising web application with config '%s'", config_path)
    settings = load_settings(config_path)
    session = controller if controller is not None else build_controller(settings)
    # requests are served from a thread pool; actions must not overlap
    lock = threading.Lock()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await session.bootstrap()
        try:
            yield
        finally:
            with lock:
                session.close()

    app = FastAPI(title="SQL Playground", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.controller = session

    @app.get("/api/health")
    def healthcheck() -> dict[str, str]:  # pragma: no cover - trivial
        return {"status": "ok" if session.is_ready else "starting"}

    @app.get("/api/session", response_model=SessionResponse)
    def get_session(
        sql: str | None = Query(None, description="Shared locator to load into the editor"),
    ) -> SessionResponse:
        with lock:
            if sql:
                applied = session.apply_locator(sql)
                LOGGER.debug("Shared locator applied=%s", applied)
            return _session_response(session)

    @app.put("/api/query", response_model=SessionResponse)
    def update_query(payload: QueryUpdateRequest) -> SessionResponse:
        with lock:
            session.set_query(payload.sql)
            return _session_response(session)

    @app.post("/api/run", response_model=RenderResponse)
    def run_query(payload: RunRequest | None = None) -> RenderResponse:
        sql = payload.sql if payload is not None else None
        with lock:
            LOGGER.info("Run requested: %s", truncate_for_log(sql if sql is not None else session.query_text))
            return _render_response(session.run(sql))

    @app.get("/api/results", response_model=RenderResponse)
    def latest_results() -> RenderResponse:
        with lock:
            return _render_response(session.active_blocks())

    @app.post("/api/reset", response_model=RenderResponse)
    def reset_database() -> RenderResponse:
        with lock:
            return _render_response(session.reset())

    @app.get("/api/schema", response_model=RenderResponse)
    def show_schema() -> RenderResponse:
        with lock:
            return _render_response(session.show_schema())

    @app.get("/api/lessons", response_model=LessonsResponse)
    def list_lessons(q: str = Query("", description="Case-insensitive title filter")) -> LessonsResponse:
        with lock:
            groups = session.filter_lessons(q)
        return LessonsResponse(
            query=q,
            groups=[
                LessonGroupModel(
                    title=group.title,
                    lessons=[LessonModel(**lesson.to_dict()) for lesson in group.lessons],
                )
                for group in groups
            ],
        )

    @app.post("/api/lessons/{lesson_id}/select", response_model=LessonModel)
    def select_lesson(lesson_id: str) -> LessonModel:
        with lock:
            lesson = session.select_lesson(lesson_id)
        if lesson is None:
            LOGGER.warning("Lesson %s not found", lesson_id)
            raise HTTPException(status_code=404, detail="Lesson not found")
        return LessonModel(**lesson.to_dict())

    @app.post("/api/lessons/{lesson_id}/load-example", response_model=SessionResponse)
    def load_example(lesson_id: str) -> SessionResponse:
        with lock:
            if session.select_lesson(lesson_id) is None:
                raise HTTPException(status_code=404, detail="Lesson not found")
            session.load_example()
            return _session_response(session)

    @app.post("/api/share", response_model=ShareResponse)
    def share_query(payload: ShareRequest | None = None) -> ShareResponse:
        base_url = payload.base_url if payload is not None else None
        with lock:
            result = session.share(base_url)
        return ShareResponse(
            locator=result.locator,
            url=result.url,
            annotation=BlockModel(**result.annotation.to_dict()),
        )

    return app


def _configure_logging(debug: bool) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        if debug:
            root_logger.setLevel(logging.DEBUG)
        return
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Launch the SQL playground web frontend")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to configuration file")
    parser.add_argument("--host", default=None, help="Interface to bind the server")
    parser.add_argument("--port", type=int, default=None, help="Port to bind the server")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    _configure_logging(debug=args.debug)
    settings = load_settings(args.config)
    app = create_app(config_path=args.config)

    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise SystemExit("uvicorn must be installed to run the web frontend") from exc

    host = args.host or settings.web.host
    port = args.port or settings.web.port
    LOGGER.info("Starting uvicorn on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
