"""Connected platforms API: per-channel send configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.constants.chat import Channel
from app.db import get_db
from app.models.connected_platform import ConnectedPlatform
from app.schemas.platform import PlatformRead, PlatformUpsert
from app.services.platform_service import PlatformService

router = APIRouter(prefix="/platforms", tags=["platforms"])


def _to_read(platform: ConnectedPlatform) -> PlatformRead:
    read = PlatformRead.model_validate(platform)
    read.has_token = platform.encrypted_token is not None
    return read


@router.get("", response_model=list[PlatformRead])
def list_platforms(db: Session = Depends(get_db)) -> list[PlatformRead]:
    """List configured platforms. Tokens are never returned."""
    return [_to_read(p) for p in PlatformService(db).list_platforms()]


@router.put("/{platform}", response_model=PlatformRead)
def upsert_platform(
    platform: Channel,
    data: PlatformUpsert,
    db: Session = Depends(get_db),
) -> PlatformRead:
    """Create or replace a platform's configuration. The token is stored encrypted."""
    return _to_read(PlatformService(db).upsert_platform(platform, data))
