"""SQLAlchemy ORM models for LoiterWatch snapshots."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from loiterwatch.db import Base


class AircraftSnapshotRecord(Base):
    """Last persisted state of one tracked aircraft."""

    __tablename__ = "aircraft_snapshots"

    icao: Mapped[str] = mapped_column(String(16), primary_key=True)
    callsign: Mapped[str | None] = mapped_column(String(32), nullable=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    saved_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )


class LoiteringEventRecord(Base):
    """Persisted loitering event; the full event lives in ``payload``."""

    __tablename__ = "loitering_events"
    __table_args__ = (Index("ix_loitering_events_last_updated", "last_updated"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    icao: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    first_detected: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_updated: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
