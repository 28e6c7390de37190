"""Declarative base and site_id column for anchorcron ORM models."""

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all anchorcron ORM models.

    Every table carries site_id so several sites on one shared host can keep
    their task tables and options in a single database.
    """

    site_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="default",
        index=True,
        doc="Site identity the row belongs to.",
    )
