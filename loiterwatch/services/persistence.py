"""Best-effort snapshot persistence for aircraft and loitering events.

Both stores overwrite the whole collection on every save and are read once at
startup. Failures are logged and reported through the return value; the live
in-memory state stays authoritative.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loiterwatch import db_models
from loiterwatch.domain.tracking import Aircraft, LoiteringEvent
from loiterwatch.models.tracking import AircraftModel, LoiteringEventModel

logger = logging.getLogger("loiterwatch.persistence")

_aircraft_adapter = TypeAdapter(list[AircraftModel])
_events_adapter = TypeAdapter(list[LoiteringEventModel])


class SnapshotStore(Protocol):
    def save_aircraft_snapshot(self, aircraft: Sequence[Aircraft]) -> bool: ...

    def save_event_snapshot(self, events: Sequence[LoiteringEvent]) -> bool: ...

    def load_aircraft(self) -> list[Aircraft]: ...

    def load_events(self) -> list[LoiteringEvent]: ...


class NullSnapshotStore:
    """Used when persistence is switched off."""

    def save_aircraft_snapshot(self, aircraft: Sequence[Aircraft]) -> bool:
        return True

    def save_event_snapshot(self, events: Sequence[LoiteringEvent]) -> bool:
        return True

    def load_aircraft(self) -> list[Aircraft]:
        return []

    def load_events(self) -> list[LoiteringEvent]:
        return []


def _dump_aircraft(aircraft: Sequence[Aircraft]) -> list[dict[str, Any]]:
    return [
        AircraftModel.from_domain(a).model_dump(mode="json", by_alias=True)
        for a in aircraft
    ]


def _dump_events(events: Sequence[LoiteringEvent]) -> list[dict[str, Any]]:
    return [
        LoiteringEventModel.from_domain(e).model_dump(mode="json", by_alias=True)
        for e in events
    ]


class JsonSnapshotStore:
    """Two JSON files in one directory, each replaced atomically."""

    AIRCRAFT_FILE = "aircraft.json"
    EVENTS_FILE = "events.json"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _write_atomic(self, name: str, payload: list[dict[str, Any]]) -> bool:
        target = self.directory / name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{name}.", suffix=".tmp", dir=self.directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle)
                os.replace(tmp_name, target)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.warning("Failed to write snapshot %s: %s", target, exc)
            return False
        logger.debug("Wrote %s records to %s", len(payload), target)
        return True

    def _read(self, name: str) -> Any:
        source = self.directory / name
        try:
            return json.loads(source.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read snapshot %s: %s", source, exc)
            return []

    def save_aircraft_snapshot(self, aircraft: Sequence[Aircraft]) -> bool:
        return self._write_atomic(self.AIRCRAFT_FILE, _dump_aircraft(aircraft))

    def save_event_snapshot(self, events: Sequence[LoiteringEvent]) -> bool:
        return self._write_atomic(self.EVENTS_FILE, _dump_events(events))

    def load_aircraft(self) -> list[Aircraft]:
        try:
            models = _aircraft_adapter.validate_python(self._read(self.AIRCRAFT_FILE))
        except ValidationError as exc:
            logger.warning("Discarding invalid aircraft snapshot: %s", exc)
            return []
        return [m.to_domain() for m in models]

    def load_events(self) -> list[LoiteringEvent]:
        try:
            models = _events_adapter.validate_python(self._read(self.EVENTS_FILE))
        except ValidationError as exc:
            logger.warning("Discarding invalid event snapshot: %s", exc)
            return []
        return [m.to_domain() for m in models]


class SqlSnapshotStore:
    """Snapshots kept in relational tables through SQLAlchemy."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    def save_aircraft_snapshot(self, aircraft: Sequence[Aircraft]) -> bool:
        rows = [
            db_models.AircraftSnapshotRecord(
                icao=a.icao, callsign=a.callsign, payload=payload
            )
            for a, payload in zip(aircraft, _dump_aircraft(aircraft))
        ]
        return self._replace_all(db_models.AircraftSnapshotRecord, rows)

    def save_event_snapshot(self, events: Sequence[LoiteringEvent]) -> bool:
        rows = [
            db_models.LoiteringEventRecord(
                id=e.id,
                icao=e.icao,
                first_detected=e.first_detected,
                last_updated=e.last_updated,
                payload=payload,
            )
            for e, payload in zip(events, _dump_events(events))
        ]
        return self._replace_all(db_models.LoiteringEventRecord, rows)

    def _replace_all(self, model: type, rows: list) -> bool:
        db = self.session_factory()
        try:
            db.query(model).delete(synchronize_session=False)
            db.add_all(rows)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Failed to persist %s snapshot: %s", model.__tablename__, exc)
            return False
        finally:
            db.close()
        return True

    def _payloads(self, model: type) -> list[dict[str, Any]]:
        db = self.session_factory()
        try:
            return [row.payload for row in db.query(model).all()]
        except SQLAlchemyError as exc:
            logger.warning("Failed to load %s snapshot: %s", model.__tablename__, exc)
            return []
        finally:
            db.close()

    def load_aircraft(self) -> list[Aircraft]:
        payloads = self._payloads(db_models.AircraftSnapshotRecord)
        try:
            models = _aircraft_adapter.validate_python(payloads)
        except ValidationError as exc:
            logger.warning("Discarding invalid aircraft snapshot rows: %s", exc)
            return []
        return [m.to_domain() for m in models]

    def load_events(self) -> list[LoiteringEvent]:
        payloads = self._payloads(db_models.LoiteringEventRecord)
        try:
            models = _events_adapter.validate_python(payloads)
        except ValidationError as exc:
            logger.warning("Discarding invalid event snapshot rows: %s", exc)
            return []
        return [m.to_domain() for m in models]


def build_snapshot_store(backend: str, directory: str | Path) -> SnapshotStore:
    name = backend.lower()
    if name == "json":
        return JsonSnapshotStore(directory)
    if name == "sql":
        from loiterwatch.db import SessionLocal, init_db

        init_db()
        return SqlSnapshotStore(SessionLocal)
    if name == "none":
        return NullSnapshotStore()
    raise ValueError(f"Unknown snapshot backend: {backend}")


__all__ = [
    "JsonSnapshotStore",
    "NullSnapshotStore",
    "SnapshotStore",
    "SqlSnapshotStore",
    "build_snapshot_store",
]
