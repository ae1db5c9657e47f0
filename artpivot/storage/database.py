"""Database interface for ArtPivot.

Provides a simple interface for creating the database, getting sessions,
and performing the catalogue operations used by the API and the CLI. Uses
SQLAlchemy 2.0 with SQLite by default.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import create_engine, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from artpivot.storage.models import (
    ArtPeriod,
    Artwork,
    Base,
    ExtractionHistory,
)

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/artpivot.db")
UNTITLED_FILENAME = "untitled"

# Columns that may be explicitly cleared through a partial update
_NULLABLE_UPDATES = {"period_id"}

SEED_PERIODS = [
    {"name": "Renaissance", "start_year": 1400, "end_year": 1600, "color": "#ff6b6b",
     "description": "Revival of classical learning and the rise of humanism in Europe"},
    {"name": "Baroque", "start_year": 1605, "end_year": 1750, "color": "#4ecdc4",
     "description": "Grand, dramatic and richly ornamented style"},
    {"name": "Impressionism", "start_year": 1870, "end_year": 1900, "color": "#45b7d1",
     "description": "Painting focused on the changing effects of light"},
]

SEED_ARTWORKS = [
    {"title": "Mona Lisa", "artist": "Leonardo da Vinci", "year": 1503,
     "description": "Masterpiece of Renaissance portraiture", "period": "Renaissance"},
    {"title": "The Night Watch", "artist": "Rembrandt", "year": 1642,
     "description": "Baroque group portrait", "period": "Baroque"},
    {"title": "Impression, Sunrise", "artist": "Claude Monet", "year": 1872,
     "description": "The painting that gave Impressionism its name", "period": "Impressionism"},
]


class Database:
    """Manages the SQLite database connection and provides catalogue helpers."""

    def __init__(self, db_path: Path | str | None = None, echo: bool = False):
        if db_path is None:
            db_path = DEFAULT_DB_PATH
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self.engine = create_engine(f"sqlite:///{db_path}", echo=echo)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)
        logger.info("Database tables created at %s", self.db_path)

    def get_session(self) -> Session:
        """Return a new SQLAlchemy session."""
        return self.SessionLocal()

    # ------------------------------------------------------------------
    # Periods
    # ------------------------------------------------------------------

    def list_periods(self) -> list[ArtPeriod]:
        with self.get_session() as session:
            stmt = select(ArtPeriod).order_by(ArtPeriod.start_year, ArtPeriod.name)
            return list(session.execute(stmt).scalars().all())

    def get_period(self, period_id: str) -> ArtPeriod | None:
        with self.get_session() as session:
            return session.get(ArtPeriod, period_id)

    def create_period(self, **fields: Any) -> ArtPeriod:
        with self.get_session() as session:
            period = ArtPeriod(**fields)
            session.add(period)
            session.commit()
            return period

    def update_period(self, period_id: str, changes: dict[str, Any]) -> ArtPeriod | None:
        """Apply a partial update. Returns None if the period doesn't exist."""
        with self.get_session() as session:
            period = session.get(ArtPeriod, period_id)
            if period is None:
                return None
            _apply_changes(period, changes)
            session.commit()
            return period

    def delete_period(self, period_id: str) -> int | None:
        """Delete a period and detach its artworks.

        Artworks that referenced the period are kept with ``period_id``
        cleared. Returns the number of detached artworks, or None if the
        period doesn't exist.
        """
        with self.get_session() as session:
            period = session.get(ArtPeriod, period_id)
            if period is None:
                return None
            result = session.execute(
                update(Artwork)
                .where(Artwork.period_id == period_id)
                .values(period_id=None)
            )
            session.delete(period)
            session.commit()
            detached = result.rowcount or 0
        logger.info("Deleted period %s (%d artworks detached)", period_id, detached)
        return detached

    # ------------------------------------------------------------------
    # Artworks
    # ------------------------------------------------------------------

    def list_artworks(self, period_id: Optional[str] = None) -> list[Artwork]:
        with self.get_session() as session:
            stmt = select(Artwork).order_by(Artwork.year, Artwork.title)
            if period_id:
                stmt = stmt.where(Artwork.period_id == period_id)
            return list(session.execute(stmt).scalars().all())

    def get_artwork(self, artwork_id: str) -> Artwork | None:
        with self.get_session() as session:
            return session.get(Artwork, artwork_id)

    def create_artwork(self, **fields: Any) -> Artwork:
        with self.get_session() as session:
            artwork = Artwork(**fields)
            session.add(artwork)
            session.commit()
            return artwork

    def update_artwork(self, artwork_id: str, changes: dict[str, Any]) -> Artwork | None:
        """Apply a partial update. Returns None if the artwork doesn't exist."""
        with self.get_session() as session:
            artwork = session.get(Artwork, artwork_id)
            if artwork is None:
                return None
            _apply_changes(artwork, changes)
            session.commit()
            return artwork

    def delete_artwork(self, artwork_id: str) -> bool:
        with self.get_session() as session:
            artwork = session.get(Artwork, artwork_id)
            if artwork is None:
                return False
            session.delete(artwork)
            session.commit()
            return True

    # ------------------------------------------------------------------
    # Extraction history
    # ------------------------------------------------------------------

    def record_extraction(self, filename: Optional[str] = None) -> bool:
        """Append an extraction history record.

        Best-effort: a write failure is logged and reported as False, never
        raised, so it cannot turn a successful extraction into a failed one.
        """
        try:
            with self.get_session() as session:
                session.add(ExtractionHistory(filename=filename or UNTITLED_FILENAME))
                session.commit()
            return True
        except SQLAlchemyError as e:
            logger.warning("Could not record extraction history for %r: %s", filename, e)
            return False

    def list_history(self, limit: Optional[int] = None) -> list[ExtractionHistory]:
        """Return extraction history records, newest first."""
        with self.get_session() as session:
            stmt = select(ExtractionHistory).order_by(
                desc(ExtractionHistory.created_at), desc(ExtractionHistory.id),
            )
            if limit:
                stmt = stmt.limit(limit)
            return list(session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # Seed data and stats
    # ------------------------------------------------------------------

    def seed(self) -> dict:
        """Insert the demo periods and artworks if they are not present yet.

        Periods are matched by name, artworks by (title, artist, year), so
        running this twice inserts nothing the second time.
        """
        with self.get_session() as session:
            period_ids: dict[str, str] = {}
            for data in SEED_PERIODS:
                period = session.execute(
                    select(ArtPeriod).where(ArtPeriod.name == data["name"])
                ).scalars().first()
                if period is None:
                    period = ArtPeriod(**data)
                    session.add(period)
                    session.flush()
                period_ids[period.name] = period.id

            inserted = 0
            for data in SEED_ARTWORKS:
                fields = {k: v for k, v in data.items() if k != "period"}
                exists = session.execute(
                    select(Artwork.id).where(
                        Artwork.title == fields["title"],
                        Artwork.artist == fields["artist"],
                        Artwork.year == fields["year"],
                    )
                ).first()
                if exists:
                    continue
                session.add(Artwork(**fields, period_id=period_ids.get(data["period"])))
                inserted += 1

            session.commit()

        logger.info("Seeded %d periods, %d new artworks", len(period_ids), inserted)
        return {"periods": len(period_ids), "artworks_inserted": inserted}

    def stats(self) -> dict:
        """Return summary statistics about the catalogue."""
        with self.get_session() as session:
            total_periods = session.execute(select(func.count(ArtPeriod.id))).scalar_one()
            total_artworks = session.execute(select(func.count(Artwork.id))).scalar_one()
            unassigned = session.execute(
                select(func.count(Artwork.id)).where(Artwork.period_id.is_(None))
            ).scalar_one()
            total_extractions = session.execute(
                select(func.count(ExtractionHistory.id))
            ).scalar_one()
            return {
                "total_periods": total_periods,
                "total_artworks": total_artworks,
                "unassigned_artworks": unassigned,
                "total_extractions": total_extractions,
            }


def _apply_changes(row: Any, changes: dict[str, Any]) -> None:
    for key, value in changes.items():
        if value is None and key not in _NULLABLE_UPDATES:
            continue
        setattr(row, key, value)
