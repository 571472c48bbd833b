"""Tests for building a controller from settings."""

from __future__ import annotations

from pathlib import Path

from sql_playground.core.config import PathsSettings, Settings, ShareSettings, load_settings
from sql_playground.core.dependencies import build_controller
from sql_playground.core.observability import JSONLSessionLogger
from sql_playground.core.seed import expected_row_counts
from sql_playground.integrations.sqlite_engine import SQLiteEngine


def test_build_controller_defaults() -> None:
    controller = build_controller(Settings())

    assert isinstance(controller.database.engine, SQLiteEngine)
    assert controller.logger is None
    assert not controller.is_ready


def test_build_controller_wires_logs_and_share(tmp_path: Path) -> None:
    logs_dir = tmp_path / "logs"
    settings = Settings(
        share=ShareSettings(param_name="q", base_url="http://localhost/"),
        paths=PathsSettings(session_logs_dir=str(logs_dir)),
    )

    controller = build_controller(settings)
    controller.start()
    result = controller.share()
    controller.close()

    assert isinstance(controller.logger, JSONLSessionLogger)
    assert result.url.startswith("http://localhost/?q=")
    assert list(logs_dir.glob("*.jsonl"))


def test_build_controller_uses_custom_lessons(tmp_path: Path) -> None:
    lessons = tmp_path / "lessons.yaml"
    lessons.write_text(
        "- title: Only\n  items:\n    - id: select\n      title: Pick\n      description: d\n      example: SELECT 7\n",
        encoding="utf-8",
    )

    controller = build_controller(Settings(paths=PathsSettings(lessons_path=str(lessons))))
    controller.start()

    assert controller.load_example() == "SELECT 7;"
    controller.close()


def test_database_file_setting_is_ignored_and_reset_restores_seed(tmp_path: Path) -> None:
    db_file = tmp_path / "play.db"
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(f"database:\n  path: {db_file}\n", encoding="utf-8")

    controller = build_controller(load_settings(config_path))
    controller.start()
    controller.run("CREATE TABLE z(a int); DELETE FROM employees;")
    controller.reset()

    tables = controller.inspector.list_user_tables()
    count = controller.database.execute("SELECT COUNT(*) FROM employees;")
    controller.close()

    assert tables == ["customers", "departments", "employees", "orders"]
    assert count[0].values() == [[expected_row_counts()["employees"]]]
    assert not db_file.exists()
