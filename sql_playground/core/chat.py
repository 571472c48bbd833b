"""Interactive terminal front end for a playground session."""

from __future__ import annotations

import argparse
import html
import logging
from dataclasses import dataclass, field
from typing import Callable

from sql_playground.core.config import DEFAULT_CONFIG_PATH, load_settings
from sql_playground.core.controller import SessionController
from sql_playground.core.dependencies import build_controller
from sql_playground.core.render import RenderModel, TablePayload

_exit_commands = {"/exit", "exit", "quit", ":q"}

_HELP = (
    "Type SQL and press enter to run it. Commands: /reset, /schema, /lessons [text],"
    " /lesson <id>, /example, /query, /share, /exit."
)


def _plain(text: str | None) -> str:
    # render blocks carry escaped text; a terminal shows it literally
    return html.unescape(text or "")


def _format_table(table: TablePayload) -> list[str]:
    columns = [_plain(column) for column in table.columns]
    rows = [[_plain(cell) for cell in row] for row in table.rows]
    widths = [len(column) for column in columns]
    for row in rows:
        for position, cell in enumerate(row):
            widths[position] = max(widths[position], len(cell))

    def line(cells: list[str]) -> str:
        return " | ".join(cell.ljust(widths[position]) for position, cell in enumerate(cells)).rstrip()

    output: list[str] = []
    if table.title:
        output.append(_plain(table.title))
    output.append(line(columns))
    output.append("-+-".join("-" * width for width in widths))
    output.extend(line(row) for row in rows)
    return output


def format_render_model(model: RenderModel) -> list[str]:
    """Turn a render model into printable lines."""

    lines: list[str] = []
    for block in model:
        if block.kind == "table" and block.table is not None:
            lines.extend(_format_table(block.table))
        elif block.severity == "error":
            lines.append(f"Error: {_plain(block.text)}")
        else:
            lines.append(_plain(block.text))
    return lines


@dataclass
class PlaygroundCLI:
    """Simple terminal REPL built on top of the session controller."""

    controller: SessionController
    input_func: Callable[[str], str] = field(default=input)
    output_func: Callable[[str], None] = field(default=print)

    def start(self, shared_locator: str | None = None) -> None:
        """Launch an interactive session."""

        if not self.controller.is_ready:
            self.controller.start(shared_locator)
        elif shared_locator:
            self.controller.apply_locator(shared_locator)

        self.output_func(_HELP)
        if self.controller.query_text:
            self.output_func(f"Loaded query: {self.controller.query_text}")

        try:
            while True:
                try:
                    raw = self.input_func("sql> ")
                except EOFError:
                    self.output_func("\nSession ended.")
                    break

                entry = raw.strip()
                if not entry:
                    continue
                if entry.lower() in _exit_commands:
                    self.output_func("Session ended.")
                    break
                if entry.startswith("/") and not entry.startswith("/*"):
                    self._handle_command(entry)
                    continue
                self._emit(self.controller.run(raw))
        finally:
            self.controller.close()

    def _handle_command(self, command: str) -> None:
        name, _, argument = command.partition(" ")
        argument = argument.strip()
        if name == "/reset":
            self._emit(self.controller.reset())
        elif name == "/schema":
            self._emit(self.controller.show_schema())
        elif name == "/lessons":
            self._print_lessons(argument)
        elif name == "/lesson":
            self._select_lesson(argument)
        elif name == "/example":
            loaded = self.controller.load_example()
            if loaded is None:
                self.output_func("Select a lesson first with /lesson <id>.")
            else:
                self.output_func(f"Loaded example: {loaded}")
        elif name == "/query":
            self._emit(self.controller.run())
        elif name == "/share":
            result = self.controller.share()
            self.output_func(_plain(result.annotation.text))
            self.output_func(result.url)
        else:
            self.output_func(f"Unknown command {name}. {_HELP}")

    def _print_lessons(self, query: str) -> None:
        for group in self.controller.filter_lessons(query):
            if not group.lessons:
                continue
            self.output_func(f"{group.title}:")
            for lesson in group.lessons:
                self.output_func(f"  - {lesson.id}: {lesson.title}")

    def _select_lesson(self, lesson_id: str) -> None:
        if not lesson_id:
            self.output_func("Usage: /lesson <id>")
            return
        lesson = self.controller.select_lesson(lesson_id)
        if lesson is None:
            self.output_func(f"No lesson with id '{lesson_id}'.")
            return
        self.output_func(f"{lesson.title}: {lesson.description}")
        self.output_func(f"Example: {lesson.example}")

    def _emit(self, model: RenderModel) -> None:
        for line in format_render_model(model):
            self.output_func(line)


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive SQL playground")
    parser.add_argument("--config", default=None, help=f"Path to configuration file (e.g. {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--sql", default=None, help="Shared locator to load into the editor")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )
    settings = load_settings(args.config)
    cli = PlaygroundCLI(controller=build_controller(settings))
    cli.start(shared_locator=args.sql)


if __name__ == "__main__":
    main()
