"""Tag API controller with FastAPI endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, get_db, validate_token
from app.domains.tag.service import MAX_TAG_LIMIT, TagService
from app.schemas.base import ResponseSchema
from app.schemas.tag import TagCreate, TagListResponse, TagResponse, TagUpdate
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tags",
    tags=["tags"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


def _tag_list(tags: list[dict]) -> TagListResponse:
    return TagListResponse(
        tags=[TagResponse.model_validate(tag) for tag in tags],
        total=len(tags),
    )


@router.get("/", response_model=TagListResponse)
async def get_tags(
    _request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get all tags ordered by name."""
    service = TagService(db)
    return _tag_list(await service.get_tags_list(current_user.id))


@router.get("/popular", response_model=TagListResponse)
async def get_popular_tags(
    _request: Request,
    limit: int | None = Query(None, ge=1, le=MAX_TAG_LIMIT),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the most used tags."""
    service = TagService(db)
    return _tag_list(await service.get_popular_tags(current_user.id, limit=limit))


@router.get("/search", response_model=TagListResponse)
async def search_tags(
    _request: Request,
    query: str = Query(..., min_length=1),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Search tags by name."""
    service = TagService(db)
    return _tag_list(await service.search_tags(query, current_user.id))


@router.post("/", response_model=ResponseSchema, status_code=201)
async def create_tag(
    _request: Request,
    tag_data: TagCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a tag (201), or return the existing tag with the same name (200)."""
    service = TagService(db)
    tag = await service.create_tag(tag_data, current_user.id)
    if not tag["created"]:
        response.status_code = 200

    return ResponseSchema(
        status="success",
        message="Tag created successfully" if tag["created"] else "Tag already exists",
        data=TagResponse.model_validate(tag).model_dump(mode="json"),
    )


@router.put("/{tag_id}", response_model=ResponseSchema)
async def update_tag(
    _request: Request,
    tag_id: UUID = Path(..., description="Tag ID"),
    tag_data: TagUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a tag."""
    service = TagService(db)
    tag = await service.update_tag(tag_id, tag_data, current_user.id)

    return ResponseSchema(
        status="success",
        message="Tag updated successfully",
        data=TagResponse.model_validate(tag).model_dump(mode="json"),
    )


@router.delete("/{tag_id}", response_model=ResponseSchema)
async def delete_tag(
    _request: Request,
    tag_id: UUID = Path(..., description="Tag ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a tag and detach it from every todo."""
    service = TagService(db)
    await service.delete_tag(tag_id, current_user.id)

    return ResponseSchema(status="success", message="Tag deleted successfully", data=None)
