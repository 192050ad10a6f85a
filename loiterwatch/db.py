"""Database configuration and helpers for LoiterWatch snapshots."""

from __future__ import annotations

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

DATABASE_URL = os.getenv("LOITERWATCH_DB_URL", "sqlite:///./loiterwatch.db")


def make_engine(url: str) -> Engine:
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

logger = logging.getLogger("loiterwatch.db")


def init_db(bind: Engine | None = None) -> None:
    """Create snapshot tables if they do not exist."""

    import loiterwatch.db_models  # noqa: F401 - models are imported for side effects

    Base.metadata.create_all(bind=bind or engine)
    logger.debug("Snapshot tables ensured")
