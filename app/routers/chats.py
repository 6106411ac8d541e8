"""Chat inbox API: list, stats, assignment, takeover and labels."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.constants.chat import Channel, ChatStatus
from app.db import get_db
from app.models.chat_message import ConversationMessage
from app.routers.utils.dependencies import get_chat_message_by_id
from app.schemas.chat import (
    ChatAssign,
    ChatLabelAdd,
    ChatMessageRead,
    ChatStats,
    ChatTakeOver,
)
from app.services.conversation_log import ConversationLog

router = APIRouter(
    prefix="/chats",
    tags=["chats"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[ChatMessageRead])
def list_chats(
    params: Params = Depends(),
    status: Optional[ChatStatus] = Query(None),
    channel: Optional[Channel] = Query(None),
    contact_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
) -> Page[ChatMessageRead]:
    """List conversation rows, newest first."""
    query = ConversationLog(db).list_messages(
        status=status.value if status else None,
        channel=channel.value if channel else None,
        contact_id=contact_id,
    )
    return paginate(query, params=params)


@router.get("/stats", response_model=ChatStats)
def get_chat_stats(db: Session = Depends(get_db)) -> ChatStats:
    """Counts per status and channel, plus total tokens spent."""
    return ConversationLog(db).get_stats()


@router.get("/{message_id}", response_model=ChatMessageRead)
def get_chat(
    message: ConversationMessage = Depends(get_chat_message_by_id),
) -> ChatMessageRead:
    return ChatMessageRead.model_validate(message)


@router.post("/{message_id}/assign", response_model=ChatMessageRead)
def assign_chat(
    message_id: UUID,
    data: ChatAssign,
    db: Session = Depends(get_db),
) -> ChatMessageRead:
    message = ConversationLog(db).assign(
        message_id, data.assigned_to, data.assigned_agent
    )
    return ChatMessageRead.model_validate(message)


@router.post("/{message_id}/resolve", response_model=ChatMessageRead)
def resolve_chat(message_id: UUID, db: Session = Depends(get_db)) -> ChatMessageRead:
    return ChatMessageRead.model_validate(ConversationLog(db).resolve(message_id))


@router.post("/{message_id}/takeover", response_model=ChatMessageRead)
def take_over_chat(
    message_id: UUID,
    data: ChatTakeOver,
    db: Session = Depends(get_db),
) -> ChatMessageRead:
    """A human agent takes over the conversation from the AI."""
    message = ConversationLog(db).take_over(message_id, data.agent_name)
    return ChatMessageRead.model_validate(message)


@router.post("/{message_id}/back-to-ai", response_model=ChatMessageRead)
def back_to_ai(message_id: UUID, db: Session = Depends(get_db)) -> ChatMessageRead:
    return ChatMessageRead.model_validate(ConversationLog(db).back_to_ai(message_id))


@router.post("/{message_id}/labels", response_model=ChatMessageRead)
def add_chat_label(
    message_id: UUID,
    data: ChatLabelAdd,
    db: Session = Depends(get_db),
) -> ChatMessageRead:
    message = ConversationLog(db).add_label(message_id, data.label_id)
    return ChatMessageRead.model_validate(message)
