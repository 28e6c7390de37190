"""anchorcron database layer: Base, engine, session, exceptions."""

from anchorcron.db.base import Base
from anchorcron.db.engine import create_engine, dispose_engine, get_engine, init_schema, resolve_database_url
from anchorcron.db.exceptions import ConfigurationError, DatabaseError
from anchorcron.db.session import create_session_factory, session_scope

__all__ = [
    "Base",
    "create_engine",
    "get_engine",
    "init_schema",
    "dispose_engine",
    "resolve_database_url",
    "create_session_factory",
    "session_scope",
    "DatabaseError",
    "ConfigurationError",
]
