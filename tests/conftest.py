"""Shared test fixtures for anchorcron."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session, sessionmaker

from anchorcron.config.manager import ConfigManager
from anchorcron.db import create_engine, create_session_factory, dispose_engine, init_schema
from anchorcron.options import InMemoryOptionsStore
from anchorcron.registry import EventRegistryAdapter, InMemoryTaskRegistry
from anchorcron.stagger import StaggerScheduler, StaggerStateStore

SITE = "https://example.org"
# 2026-10-19 12:00:00 UTC
NOW = int(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc).timestamp())


class FakeClock:
    """Settable clock for deterministic scheduler runs."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return float(self.now)

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_config_manager() -> Iterator[None]:
    ConfigManager._reset_for_tests()
    yield
    ConfigManager._reset_for_tests()


@pytest.fixture(autouse=True)
def _isolated_database(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("ANCHORCRON_DATABASE_URL", raising=False)
    yield
    dispose_engine()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> InMemoryTaskRegistry:
    return InMemoryTaskRegistry()


@pytest.fixture
def options() -> InMemoryOptionsStore:
    return InMemoryOptionsStore()


@pytest.fixture
def state_store(options: InMemoryOptionsStore) -> StaggerStateStore:
    return StaggerStateStore(options, SITE)


@pytest.fixture
def scheduler(
    registry: InMemoryTaskRegistry,
    state_store: StaggerStateStore,
    clock: FakeClock,
) -> StaggerScheduler:
    return StaggerScheduler(EventRegistryAdapter(registry), state_store, clock=clock)


@pytest.fixture
def sqlite_factory() -> Iterator[sessionmaker[Session]]:
    engine = create_engine("sqlite://")
    init_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()
