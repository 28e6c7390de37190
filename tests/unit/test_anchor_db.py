from __future__ import annotations

import pytest
from sqlalchemy import select

from anchorcron.db import (
    ConfigurationError,
    DatabaseError,
    create_session_factory,
    dispose_engine,
    get_engine,
    init_schema,
    resolve_database_url,
    session_scope,
)
from anchorcron.options.sql import OptionORM


def test_missing_url_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="ANCHORCRON_DATABASE_URL"):
        get_engine()


def test_unparseable_url_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        get_engine("not a url")
    assert issubclass(ConfigurationError, DatabaseError)


def test_url_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANCHORCRON_DATABASE_URL", "sqlite://")
    assert get_engine().url.get_backend_name() == "sqlite"


def test_get_engine_caches_per_url() -> None:
    first = get_engine("sqlite://")
    assert get_engine("sqlite://") is first

    dispose_engine("sqlite://")
    assert get_engine("sqlite://") is not first


def test_session_scope_rolls_back_on_error() -> None:
    engine = get_engine("sqlite://")
    init_schema(engine)
    factory = create_session_factory(engine)

    with pytest.raises(RuntimeError):
        with session_scope(factory) as session:
            session.add(OptionORM(site_id="s", name="flag", value=True))
            session.flush()
            raise RuntimeError("boom")

    with session_scope(factory) as session:
        assert session.scalars(select(OptionORM)).all() == []


def test_resolve_database_url_order(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_database_url(None) == "sqlite:///anchorcron.db"

    monkeypatch.setenv("ANCHORCRON_DATABASE_URL", "sqlite:///from-env.db")
    assert resolve_database_url(None) == "sqlite:///from-env.db"
    assert resolve_database_url("  ") == "sqlite:///from-env.db"
    assert resolve_database_url("sqlite:///configured.db") == "sqlite:///configured.db"


def test_resolve_database_url_rejects_garbage() -> None:
    with pytest.raises(ConfigurationError):
        resolve_database_url("not a url")
