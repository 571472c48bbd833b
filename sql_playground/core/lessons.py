"""Read-only lesson catalog loaded from YAML."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CATALOG_PATH = Path(__file__).with_name("lessons.yaml")
DEFAULT_LESSON_ID = "select"

_REQUIRED_FIELDS = ("id", "title", "description", "example")


@dataclass(frozen=True, slots=True)
class Lesson:
    id: str
    title: str
    description: str
    example: str

    def example_statement(self) -> str:
        """Return the example ready for the editor, always ending with ``;``."""

        text = self.example.strip()
        return text if text.endswith(";") else text + ";"

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "example": self.example,
        }


@dataclass(frozen=True, slots=True)
class LessonGroup:
    title: str
    lessons: tuple[Lesson, ...]


def matches(lesson: Lesson, query: str) -> bool:
    """Case-insensitive substring match of *query* against the lesson title."""

    needle = query.strip().lower()
    return needle in lesson.title.lower()


@dataclass(frozen=True, slots=True)
class LessonCatalog:
    groups: tuple[LessonGroup, ...]

    def __iter__(self):
        for group in self.groups:
            yield from group.lessons

    def find_lesson(self, lesson_id: Any) -> Lesson | None:
        if lesson_id is None:
            return None
        wanted = str(lesson_id)
        for lesson in self:
            if lesson.id == wanted:
                return lesson
        return None

    def filter(self, query: str) -> list[LessonGroup]:
        """Return every group with only the lessons whose title matches *query*."""

        return [
            LessonGroup(
                title=group.title,
                lessons=tuple(lesson for lesson in group.lessons if matches(lesson, query)),
            )
            for group in self.groups
        ]


def _parse_lesson(raw: Any, group_title: str) -> Lesson:
    if not isinstance(raw, dict):
        raise ValueError(f"Lesson entries in group '{group_title}' must be mappings")
    missing = [name for name in _REQUIRED_FIELDS if raw.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Lesson in group '{group_title}' is missing: {', '.join(missing)}")
    return Lesson(
        id=str(raw["id"]),
        title=str(raw["title"]),
        description=str(raw["description"]),
        example=str(raw["example"]),
    )


def parse_catalog(payload: Any) -> LessonCatalog:
    if not isinstance(payload, list):
        raise ValueError("Lesson catalog must contain a top-level list of groups")

    groups: list[LessonGroup] = []
    seen: set[str] = set()
    for entry in payload:
        if not isinstance(entry, dict):
            raise ValueError("Lesson groups must be mappings")
        title = str(entry.get("title", ""))
        lessons = tuple(_parse_lesson(item, title) for item in entry.get("items") or [])
        for lesson in lessons:
            if lesson.id in seen:
                raise ValueError(f"Duplicate lesson id '{lesson.id}'")
            seen.add(lesson.id)
        groups.append(LessonGroup(title=title, lessons=lessons))
    return LessonCatalog(groups=tuple(groups))


def load_catalog(path: str | Path | None = None) -> LessonCatalog:
    """Load the catalog from *path*, defaulting to the bundled lessons."""

    target = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    with target.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or []
    return parse_catalog(payload)
