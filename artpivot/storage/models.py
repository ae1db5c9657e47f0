"""SQLAlchemy 2.0 ORM models for the ArtPivot catalogue.

Years are signed integers: negative values are B.C., positive are A.D.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _uuid_default() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


DEFAULT_PERIOD_COLOR = "#1e6bd6"


# ---------------------------------------------------------------------------
# Catalogue tables
# ---------------------------------------------------------------------------

class ArtPeriod(Base):
    __tablename__ = "art_periods"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_default)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    start_year: Mapped[int] = mapped_column(Integer, nullable=False)
    end_year: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str] = mapped_column(String(32), default=DEFAULT_PERIOD_COLOR)
    description: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[str] = mapped_column(String(2048), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


class Artwork(Base):
    __tablename__ = "artworks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_default)
    title: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    artist: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[str] = mapped_column(String(2048), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    # Weak reference: no foreign key, dangling ids are allowed
    period_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


class ExtractionHistory(Base):
    __tablename__ = "extraction_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)
