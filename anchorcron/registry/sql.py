"""SQL-backed task registry."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import JSON, Index, Integer, String, UniqueConstraint, delete, select
from sqlalchemy.orm import Mapped, Session, mapped_column, sessionmaker

from anchorcron.db import Base, session_scope
from anchorcron.registry.models import ScheduledTask, args_signature, validate_kind, recurrence_interval


class ScheduledTaskORM(Base):
    """One row of the task table, unique per (site_id, due_at, kind, args_sig)."""

    __tablename__ = "scheduled_tasks"
    __table_args__ = (
        UniqueConstraint("site_id", "due_at", "kind", "args_sig", name="uq_scheduled_tasks_natural_key"),
        Index("idx_scheduled_tasks_site_kind", "site_id", "kind"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(191), nullable=False)
    due_at: Mapped[int] = mapped_column(Integer, nullable=False)
    recurrence: Mapped[str | None] = mapped_column(String(32), nullable=True)
    args: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    args_sig: Mapped[str] = mapped_column(String(32), nullable=False)


class SQLTaskRegistry:
    """Task table stored through SQLAlchemy, scoped to one site."""

    def __init__(self, session_factory: sessionmaker[Session], site_id: str = "default") -> None:
        self._session_factory = session_factory
        self._site_id = site_id

    def list_all(self) -> list[ScheduledTask]:
        with session_scope(self._session_factory) as session:
            rows = session.scalars(
                select(ScheduledTaskORM)
                .where(ScheduledTaskORM.site_id == self._site_id)
                .order_by(ScheduledTaskORM.due_at.asc(), ScheduledTaskORM.id.asc())
            ).all()
            return [self._to_task(row) for row in rows]

    def remove_instance(self, kind: str, due_at: int, args: Sequence[Any]) -> bool:
        with session_scope(self._session_factory) as session:
            result = session.execute(
                delete(ScheduledTaskORM).where(
                    ScheduledTaskORM.site_id == self._site_id,
                    ScheduledTaskORM.kind == kind,
                    ScheduledTaskORM.due_at == int(due_at),
                    ScheduledTaskORM.args_sig == args_signature(args),
                )
            )
            return bool(result.rowcount)

    def insert_once(self, kind: str, due_at: int, args: Sequence[Any]) -> None:
        self._upsert(validate_kind(kind), int(due_at), None, list(args))

    def insert_recurring(self, kind: str, due_at: int, recurrence: str, args: Sequence[Any]) -> None:
        recurrence_interval(recurrence)
        self._upsert(validate_kind(kind), int(due_at), recurrence, list(args))

    def _upsert(self, kind: str, due_at: int, recurrence: str | None, args: list[Any]) -> None:
        signature = args_signature(args)
        with session_scope(self._session_factory) as session:
            row = session.scalar(
                select(ScheduledTaskORM).where(
                    ScheduledTaskORM.site_id == self._site_id,
                    ScheduledTaskORM.kind == kind,
                    ScheduledTaskORM.due_at == due_at,
                    ScheduledTaskORM.args_sig == signature,
                )
            )
            if row is None:
                session.add(
                    ScheduledTaskORM(
                        site_id=self._site_id,
                        kind=kind,
                        due_at=due_at,
                        recurrence=recurrence,
                        args=args,
                        args_sig=signature,
                    )
                )
            else:
                row.recurrence = recurrence
                row.args = args

    @staticmethod
    def _to_task(row: ScheduledTaskORM) -> ScheduledTask:
        return ScheduledTask(
            kind=row.kind,
            due_at=row.due_at,
            recurrence=row.recurrence,
            args=tuple(row.args or ()),
        )
