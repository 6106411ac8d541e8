"""Contacts API: list and get."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.constants.chat import Channel
from app.db import get_db
from app.models.contact import Contact
from app.routers.utils.dependencies import get_contact_by_id
from app.schemas.contact import ContactRead
from app.services.contact_service import ContactResolver

router = APIRouter(
    prefix="/contacts",
    tags=["contacts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[ContactRead])
def list_contacts(
    params: Params = Depends(),
    channel: Optional[Channel] = Query(None),
    db: Session = Depends(get_db),
) -> Page[ContactRead]:
    """List contacts, most recently active first."""
    query = ContactResolver(db).list_contacts(channel.value if channel else None)
    return paginate(query, params=params)


@router.get("/{contact_id}", response_model=ContactRead)
def get_contact(contact: Contact = Depends(get_contact_by_id)) -> ContactRead:
    """Get a contact by ID."""
    return ContactRead.model_validate(contact)
