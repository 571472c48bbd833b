"""Tests for the lesson catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from sql_playground.core.lessons import Lesson, load_catalog, matches, parse_catalog


def test_bundled_catalog_loads() -> None:
    catalog = load_catalog()

    assert [group.title for group in catalog.groups] == [
        "Basics",
        "Filtering",
        "Aggregation",
        "Joins",
        "Set operations",
        "DDL & Indexes",
        "Transactions & Subqueries",
    ]
    assert len(list(catalog)) == 31


def test_find_lesson_by_id() -> None:
    catalog = load_catalog()

    lesson = catalog.find_lesson("isnull")

    assert lesson is not None
    assert lesson.title == "IS NULL"
    assert catalog.find_lesson("missing") is None
    assert catalog.find_lesson(None) is None


def test_filter_is_case_insensitive_on_titles() -> None:
    catalog = load_catalog()

    groups = catalog.filter("  JoIn ")

    matched = [lesson.id for group in groups for lesson in group.lessons]
    assert matched == ["join", "left", "cross", "self"]
    assert len(groups) == len(catalog.groups)


def test_blank_filter_keeps_everything() -> None:
    catalog = load_catalog()

    assert sum(len(group.lessons) for group in catalog.filter("")) == 31


def test_matches_ignores_description() -> None:
    lesson = Lesson(id="x", title="COUNT", description="Count rows.", example="SELECT 1;")

    assert matches(lesson, "cou")
    assert not matches(lesson, "rows")


def test_example_statement_appends_terminator_only_when_missing() -> None:
    assert Lesson("a", "A", "", "  SELECT 1  ").example_statement() == "SELECT 1;"
    assert Lesson("b", "B", "", "SELECT 1;\n").example_statement() == "SELECT 1;"


def test_duplicate_ids_are_rejected() -> None:
    payload = [
        {"title": "G", "items": [{"id": "a", "title": "A", "description": "d", "example": "SELECT 1;"}]},
        {"title": "H", "items": [{"id": "a", "title": "B", "description": "d", "example": "SELECT 2;"}]},
    ]

    with pytest.raises(ValueError, match="Duplicate"):
        parse_catalog(payload)


def test_missing_fields_are_rejected() -> None:
    with pytest.raises(ValueError, match="example"):
        parse_catalog([{"title": "G", "items": [{"id": "a", "title": "A", "description": "d"}]}])


def test_load_catalog_from_custom_path(tmp_path: Path) -> None:
    target = tmp_path / "lessons.yaml"
    target.write_text(
        """
- title: Custom
  items:
    - id: one
      title: First
      description: Only lesson.
      example: SELECT 1
""",
        encoding="utf-8",
    )

    catalog = load_catalog(target)

    assert catalog.find_lesson("one").example_statement() == "SELECT 1;"
