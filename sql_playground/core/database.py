"""Ownership of the single live database instance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from sql_playground.core.errors import QueryError, SeedError
from sql_playground.core.results import StatementBatch
from sql_playground.core.seed import SEED_SCRIPT, SEED_VERSION

LOGGER = logging.getLogger(__name__)


class Engine(Protocol):
    """Embedded SQL engine able to open, run against and close instances."""

    def open_instance(self) -> Any:  # pragma: no cover - interface
        ...

    def execute_batch(self, instance: Any, text: str) -> StatementBatch:  # pragma: no cover - interface
        ...

    def close_instance(self, instance: Any) -> None:  # pragma: no cover - interface
        ...


@dataclass
class DatabaseHandle:
    """Holds exactly one live engine instance and mediates every statement.

    Creating a database always releases the previous instance before the new
    one is exposed, so at no point can two instances be addressed.
    """

    engine: Engine
    seed_script: str = SEED_SCRIPT
    _instance: Any = field(default=None, init=False, repr=False)

    @property
    def instance(self) -> Any:
        return self._instance

    @property
    def is_open(self) -> bool:
        return self._instance is not None

    def create_database(self) -> Any:
        """Release any current instance, open a fresh one and seed it."""

        self.close()
        instance = self.engine.open_instance()
        try:
            self._seed(instance)
        except SeedError:
            LOGGER.exception("Seeding failed; continuing with a partially seeded database")
        self._instance = instance
        return instance

    def reset(self) -> Any:
        return self.create_database()

    def execute(self, sql: str) -> StatementBatch:
        if self._instance is None:
            raise QueryError("No database is open")
        return self.engine.execute_batch(self._instance, sql)

    def close(self) -> None:
        instance = self._instance
        if instance is None:
            return
        self._instance = None
        self.engine.close_instance(instance)

    def _seed(self, instance: Any) -> None:
        try:
            self.engine.execute_batch(instance, self.seed_script)
        except QueryError as exc:
            raise SeedError(f"Seed {SEED_VERSION} failed at statement {exc.index}: {exc.message}") from exc
        LOGGER.debug("Seeded database with dataset version %s", SEED_VERSION)
