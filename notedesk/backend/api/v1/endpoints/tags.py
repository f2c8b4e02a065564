"""
Tags API Endpoints.
"""

from fastapi import APIRouter

from notedesk.backend.core.dependencies import CurrentOwner, DbSession, RateLimited, RequestId
from notedesk.backend.schemas.base import ApiResponse, ResponseMetadata
from notedesk.backend.schemas.tag import TagCreate, TagResponse
from notedesk.backend.services.tag import TagService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[TagResponse]],
    summary="List tags",
    description="List the caller's tags in alphabetical order.",
)
async def list_tags(
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[TagResponse]]:
    service = TagService(db)
    tags = await service.list_tags(owner_id)
    return ApiResponse(
        data=[TagResponse.model_validate(tag) for tag in tags],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[TagResponse],
    status_code=201,
    dependencies=[RateLimited],
    summary="Create a tag",
    description="Create a tag with a chosen color. Names are unique per owner, ignoring case.",
)
async def create_tag(
    data: TagCreate,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    service = TagService(db)
    tag = await service.create_tag(owner_id, data)
    return ApiResponse(
        data=TagResponse.model_validate(tag),
        metadata=ResponseMetadata(request_id=request_id),
    )
