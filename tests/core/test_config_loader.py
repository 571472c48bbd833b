"""Tests for loading playground settings from YAML."""

# ruff: noqa: PLR2004

from __future__ import annotations

from pathlib import Path

from sql_playground.core.config import load_settings


def test_load_settings_parses_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(
        """
share:
  param_name: q
  confirmation_ttl_s: 4
  base_url: http://localhost:9000/
paths:
  session_logs_dir: logs/sessions
web:
  host: 0.0.0.0
  port: 9000
        """,
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.share.param_name == "q"
    assert settings.share.confirmation_ttl_s == 4.0
    assert settings.share.base_url == "http://localhost:9000/"
    assert settings.paths.session_logs_dir == "logs/sessions"
    assert settings.paths.lessons_path is None
    assert settings.web.port == 9000


def test_missing_sections_fall_back_to_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    settings = load_settings(config_path)

    assert settings.share.param_name == "sql"
    assert settings.share.confirmation_ttl_s == 2.5
    assert settings.share.base_url is None
    assert settings.paths.session_logs_dir is None
    assert settings.web.host == "127.0.0.1"


def test_no_path_means_defaults() -> None:
    settings = load_settings(None)

    assert settings.share.param_name == "sql"
    assert settings.web.port == 8000


def test_sample_config_loads() -> None:
    sample = Path(__file__).resolve().parents[2] / "configs" / "dev.yaml"

    settings = load_settings(sample)

    assert settings.share.param_name == "sql"
