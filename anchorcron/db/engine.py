"""Engine creation and lifecycle for anchorcron."""

from __future__ import annotations

import os

from sqlalchemy import Engine
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.pool import StaticPool

from anchorcron.db.base import Base
from anchorcron.db.exceptions import ConfigurationError

DATABASE_URL_ENV = "ANCHORCRON_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///anchorcron.db"

_engines: dict[str, Engine] = {}


def _get_url(database_url: str | None) -> str:
    """Resolve database URL from argument or ANCHORCRON_DATABASE_URL."""
    url = database_url if database_url else os.environ.get(DATABASE_URL_ENV, "")
    url = url.strip()
    if not url:
        raise ConfigurationError(
            "Database URL not set. Set ANCHORCRON_DATABASE_URL or pass database_url."
        )
    try:
        make_url(url)
    except ArgumentError as exc:
        raise ConfigurationError("Database URL could not be parsed.") from exc
    return url


def resolve_database_url(configured: str | None = None) -> str:
    """Pick the URL: *configured*, then $ANCHORCRON_DATABASE_URL, then a local SQLite file."""
    for candidate in (configured, os.environ.get(DATABASE_URL_ENV)):
        if candidate and candidate.strip():
            return _get_url(candidate)
    return DEFAULT_DATABASE_URL


def _is_sqlite_memory(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def create_engine(database_url: str | None = None, *, echo: bool = False) -> Engine:
    """Create a synchronous engine.

    Args:
        database_url: SQLAlchemy URL. If None, uses ANCHORCRON_DATABASE_URL.
        echo: Log SQL (for development).

    Returns:
        Configured Engine. In-memory SQLite shares a single connection so
        every session sees the same tables.

    Raises:
        ConfigurationError: URL missing or invalid.
    """
    url = _get_url(database_url)
    if _is_sqlite_memory(url):
        engine = sa_create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = sa_create_engine(url, echo=echo, pool_pre_ping=True)
    return engine


def get_engine(database_url: str | None = None, *, echo: bool = False) -> Engine:
    """Get or create a cached engine; the same URL returns the same instance."""
    url = _get_url(database_url)
    if url not in _engines:
        _engines[url] = create_engine(url, echo=echo)
    return _engines[url]


def init_schema(engine: Engine) -> None:
    """Create every anchorcron table that does not exist yet."""
    # Registers the ORM tables on Base.metadata.
    from anchorcron.options import sql as _options_sql  # noqa: F401
    from anchorcron.registry import sql as _registry_sql  # noqa: F401

    Base.metadata.create_all(engine)


def dispose_engine(database_url: str | None = None) -> None:
    """Dispose engine(s) and close their connections; None disposes all."""
    if database_url is None:
        for key in list(_engines.keys()):
            _engines.pop(key).dispose()
        return
    url = _get_url(database_url)
    engine = _engines.pop(url, None)
    if engine is not None:
        engine.dispose()
