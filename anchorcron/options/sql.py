"""SQL-backed options store."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String, UniqueConstraint, delete, select
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from anchorcron.db import Base, session_scope


class OptionORM(Base):
    """One persisted option, unique per (site_id, name)."""

    __tablename__ = "options"
    __table_args__ = (UniqueConstraint("site_id", "name", name="uq_options_site_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)


class SQLOptionsStore:
    """Options table stored through SQLAlchemy, scoped to one site."""

    def __init__(self, session_factory: sessionmaker[Session], site_id: str = "default") -> None:
        self._session_factory = session_factory
        self._site_id = site_id

    def _select(self, key: str):  # type: ignore[no-untyped-def]
        return select(OptionORM).where(OptionORM.site_id == self._site_id, OptionORM.name == key)

    def get(self, key: str, default: Any = None) -> Any:
        with session_scope(self._session_factory) as session:
            row = session.scalar(self._select(key))
            if row is None:
                return default
            return row.value

    def set(self, key: str, value: Any) -> None:
        with session_scope(self._session_factory) as session:
            row = session.scalar(self._select(key))
            if row is None:
                session.add(OptionORM(site_id=self._site_id, name=key, value=value))
            else:
                row.value = value

    def delete(self, key: str) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                delete(OptionORM).where(OptionORM.site_id == self._site_id, OptionORM.name == key)
            )
            return bool(result.rowcount)
