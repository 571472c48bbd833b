"""Utilities for loading playground settings from YAML configuration files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PATH = "configs/dev.yaml"


@dataclass(slots=True)
class ShareSettings:
    param_name: str = "sql"
    confirmation_ttl_s: float = 2.5
    base_url: str | None = None


@dataclass(slots=True)
class PathsSettings:
    session_logs_dir: str | None = None
    lessons_path: str | None = None


@dataclass(slots=True)
class WebSettings:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class Settings:
    share: ShareSettings = field(default_factory=ShareSettings)
    paths: PathsSettings = field(default_factory=PathsSettings)
    web: WebSettings = field(default_factory=WebSettings)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_settings(path: str | Path | None = None) -> Settings:
    """Read configuration from *path* and return structured settings.

    ``None`` yields the built-in defaults.
    """

    if path is None:
        return Settings()

    raw = _load_yaml(Path(path))

    share_raw = raw.get("share") or {}
    base_url = share_raw.get("base_url")
    share = ShareSettings(
        param_name=str(share_raw.get("param_name", "sql")),
        confirmation_ttl_s=float(share_raw.get("confirmation_ttl_s", 2.5)),
        base_url=str(base_url) if base_url else None,
    )

    paths_raw = raw.get("paths") or {}
    session_logs_dir = paths_raw.get("session_logs_dir")
    lessons_path = paths_raw.get("lessons_path")
    paths = PathsSettings(
        session_logs_dir=str(session_logs_dir) if session_logs_dir else None,
        lessons_path=str(lessons_path) if lessons_path else None,
    )

    web_raw = raw.get("web") or {}
    web = WebSettings(
        host=str(web_raw.get("host", "127.0.0.1")),
        port=int(web_raw.get("port", 8000)),
    )

    return Settings(share=share, paths=paths, web=web)
