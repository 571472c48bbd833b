"""Helpers shared by session logging: timestamps, file naming, truncation."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import Path

_SESSION_LOG_PATHS: dict[tuple[str, str], Path] = {}
_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_-]+")


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a ``Z`` suffix."""

    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_timestamp_slug(iso_timestamp: str | None = None) -> str:
    """Compact, sortable ``YYYYMMDDTHHMMSSmmm`` form of *iso_timestamp* (now when unparsable)."""

    moment = None
    if iso_timestamp and iso_timestamp.strip():
        try:
            moment = datetime.fromisoformat(iso_timestamp.strip().removesuffix("Z"))
        except ValueError:
            moment = None
    moment = moment or datetime.now(UTC)
    return moment.strftime("%Y%m%dT%H%M%S") + f"{moment.microsecond // 1000:03d}"


def sanitize_session_id(session_id: str) -> str:
    return _UNSAFE_FILENAME_RE.sub("-", session_id.strip()) or "session"


def resolve_log_path(base_dir: Path, session_id: str, timestamp: str | None = None) -> Path:
    """Path of the JSONL file for *session_id*, fixed on first use.

    The first event of a session decides the timestamp prefix so every later
    event of the same session lands in the same file.
    """

    base = base_dir.expanduser().resolve()
    key = (str(base), session_id)
    cached = _SESSION_LOG_PATHS.get(key)
    if cached is not None:
        return cached

    base.mkdir(parents=True, exist_ok=True)
    target = base / f"{make_timestamp_slug(timestamp)}-{sanitize_session_id(session_id)}.jsonl"
    _SESSION_LOG_PATHS[key] = target
    return target


def truncate_for_log(value: str, limit: int = 200) -> str:
    text = value.strip()
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."
