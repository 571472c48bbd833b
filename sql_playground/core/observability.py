"""JSONL-backed observability helpers for playground sessions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from sql_playground.core.logging_utils import resolve_log_path, utc_now_iso


class SessionObservationSink(Protocol):
    """Records lifecycle events emitted by the session controller."""

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # pragma: no cover - interface
        ...


def _build_event(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    enriched = {key: value for key, value in payload.items() if value is not None}
    enriched.setdefault("event", event)
    enriched.setdefault("timestamp", utc_now_iso())
    return enriched


@dataclass(slots=True)
class JSONLSessionLogger(SessionObservationSink):
    """Persists session events under a dedicated logs directory."""

    base_dir: Path

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        record = _build_event(event, payload)
        target = resolve_log_path(self.base_dir, session_id, record["timestamp"])
        with target.open("a", encoding="utf-8") as handle:
            json.dump(record, handle, ensure_ascii=False)
            handle.write("\n")


@dataclass(slots=True)
class InMemorySessionLogger(SessionObservationSink):
    """Keeps events in a list; used when no log directory is configured."""

    events: list[dict[str, Any]] = field(default_factory=list)

    def log_event(self, session_id: str, event: str, payload: dict[str, Any]) -> None:  # type: ignore[override]
        record = _build_event(event, payload)
        record.setdefault("session_id", session_id)
        self.events.append(record)

    def names(self) -> list[str]:
        return [str(record["event"]) for record in self.events]
