"""Broadcast API: queue a personalised message to many contacts."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.broadcast import BroadcastCreate, BroadcastRead
from app.services.broadcast_service import BroadcastService
from app.tasks.broadcast_task import send_broadcast_task

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/broadcasts",
    tags=["broadcasts"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=BroadcastRead, status_code=202)
def create_broadcast(
    data: BroadcastCreate,
    db: Session = Depends(get_db),
) -> BroadcastRead:
    """Record the broadcast as Pending and hand it to the worker."""
    history = BroadcastService(db).create_broadcast(data)
    send_broadcast_task.delay(str(history.id))
    logger.info("Broadcast %s queued for channel %s", history.id, history.channel)
    return BroadcastRead.model_validate(history)


@router.get("/{broadcast_id}", response_model=BroadcastRead)
def get_broadcast(broadcast_id: UUID, db: Session = Depends(get_db)) -> BroadcastRead:
    history = BroadcastService(db).get_broadcast(broadcast_id)
    if history is None:
        raise HTTPException(status_code=404, detail="Broadcast not found")
    return BroadcastRead.model_validate(history)
