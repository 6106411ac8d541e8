from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.constants.default_system_prompt import DefaultSystemPrompt
from app.db import get_db
from app.schemas.system_prompt import (
    SystemPromptCurrentRead,
    SystemPromptVersionCreate,
    SystemPromptVersionRead,
)
from app.services.system_prompt_service import DEFAULT_PROMPT_NAME, SystemPromptService

router = APIRouter(
    prefix="/system",
    tags=["system"],
    responses={404: {"description": "Not found"}},
)


# --- Persona prompt (markdown, versioned) ---


@router.get(
    "/prompts/{name}/current",
    response_model=SystemPromptCurrentRead,
)
def get_system_prompt_current(
    name: str,
    db: Session = Depends(get_db),
) -> SystemPromptCurrentRead:
    """Return the persona in effect. 'default' falls back to the built-in persona."""
    version = SystemPromptService(db).get_current_version(name)
    if version is not None:
        return SystemPromptCurrentRead(
            name=name,
            content=str(version.content),
            version_id=version.id,
            version_number=int(version.version_number),
        )
    if name == DEFAULT_PROMPT_NAME:
        return SystemPromptCurrentRead(
            name=name, content=DefaultSystemPrompt.CONTENT, is_builtin=True
        )
    raise HTTPException(status_code=404, detail="System prompt not found")


@router.get(
    "/prompts/{name}/versions",
    response_model=dict,
)
def list_system_prompt_versions(
    name: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    db: Session = Depends(get_db),
) -> dict:
    """List version history for the given persona, newest first."""
    versions = SystemPromptService(db).get_versions(name, skip=skip, limit=limit)
    items = [SystemPromptVersionRead.model_validate(v) for v in versions]
    return {"items": items}


@router.post(
    "/prompts/{name}/versions",
    response_model=SystemPromptVersionRead,
    status_code=201,
)
def create_system_prompt_version(
    name: str,
    data: SystemPromptVersionCreate,
    db: Session = Depends(get_db),
) -> SystemPromptVersionRead:
    """Create a new version and make it the persona in effect."""
    version = SystemPromptService(db).create_version(
        name, content=data.content, note=data.note, created_by=data.created_by
    )
    return SystemPromptVersionRead.model_validate(version)
