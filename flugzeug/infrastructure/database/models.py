"""SQLAlchemy ORM models.

The production database is PostgreSQL, the test-suite uses SQLite; all
column types below are portable between the two.

``FlugzeugModel.version`` is the mapper's ``version_id_col``: every UPDATE
is issued as ``... WHERE id = :id AND version = :loaded_version`` and bumps
the column, so a concurrent commit between read and write surfaces as
``StaleDataError`` instead of a silently lost update.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .connection import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_version(current: Optional[int]) -> int:
    # Versions start at 0 on insert.
    return 0 if current is None else current + 1


class FlugzeugModel(Base):
    """Aircraft."""

    __tablename__ = "flugzeug"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    preis: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    einsatzbereit: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    baujahr: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    # Relationships
    modell: Mapped["ModellModel"] = relationship(
        back_populates="flugzeug",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )
    sitzplaetze: Mapped[list["SitzplatzModel"]] = relationship(
        back_populates="flugzeug",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SitzplatzModel.id",
        lazy="raise",
    )

    __mapper_args__ = {
        "version_id_col": version,
        "version_id_generator": _next_version,
    }


class ModellModel(Base):
    """Model designation, one per aircraft."""

    __tablename__ = "modell"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    modell: Mapped[str] = mapped_column(String(40), nullable=False)
    flugzeug_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("flugzeug.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    flugzeug: Mapped[FlugzeugModel] = relationship(back_populates="modell", lazy="raise")


class SitzplatzModel(Base):
    """Seat class of an aircraft."""

    __tablename__ = "sitzplatz"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sitzplatzklasse: Mapped[str] = mapped_column(String(32), nullable=False)
    flugzeug_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("flugzeug.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    flugzeug: Mapped[FlugzeugModel] = relationship(back_populates="sitzplaetze", lazy="raise")
