"""Read endpoints for loitering events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from loiterwatch.api.deps import get_event_ledger
from loiterwatch.models import LoiteringEventModel
from loiterwatch.services.event_ledger import EventLedger

router = APIRouter(prefix="/api", tags=["loitering"])

logger = logging.getLogger("loiterwatch.api.loitering")


@router.get(
    "/loitering",
    response_model=list[LoiteringEventModel],
    summary="List loitering events, most recently updated first",
)
def list_events(
    ledger: EventLedger = Depends(get_event_ledger),
) -> list[LoiteringEventModel]:
    return [LoiteringEventModel.from_domain(e) for e in ledger.list_events()]


@router.get(
    "/loitering/{event_id}",
    response_model=LoiteringEventModel,
    summary="Get one loitering event",
)
def get_event(
    event_id: str, ledger: EventLedger = Depends(get_event_ledger)
) -> LoiteringEventModel:
    event = ledger.get_event(event_id)
    if event is None:
        logger.debug("Event %s not found", event_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Event not found"
        )
    return LoiteringEventModel.from_domain(event)
