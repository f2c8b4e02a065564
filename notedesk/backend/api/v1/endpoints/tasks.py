"""
Tasks API Endpoints.

REST API endpoints for task management, scoped to the Bearer token's owner.
"""

from typing import Literal

from fastapi import APIRouter, Query

from notedesk.backend.core.dependencies import CurrentOwner, DbSession, RateLimited, RequestId
from notedesk.backend.schemas.base import ApiResponse, ResponseMetadata
from notedesk.backend.schemas.task import Priority, TaskCreate, TaskResponse, TaskUpdate
from notedesk.backend.services.task import TaskService

router = APIRouter()

STATUS_FILTERS = {"completed": True, "pending": False}


@router.get(
    "",
    response_model=ApiResponse[list[TaskResponse]],
    summary="List tasks",
    description="List the caller's tasks, newest first.",
)
async def list_tasks(
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
    priority: Priority | None = Query(None, description="Filter by priority"),
    status: Literal["completed", "pending"] | None = Query(None, description="Filter by completion"),
    tag: str | None = Query(None, description="Only tasks with this tag (case-insensitive)"),
) -> ApiResponse[list[TaskResponse]]:
    service = TaskService(db)
    tasks = await service.list_tasks(
        owner_id,
        priority=priority,
        is_completed=STATUS_FILTERS.get(status),
        tag=tag,
    )
    return ApiResponse(
        data=[TaskResponse.model_validate(task) for task in tasks],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[TaskResponse],
    status_code=201,
    dependencies=[RateLimited],
    summary="Create a task",
    description="Create a task. Tag names that do not exist yet are created.",
)
async def create_task(
    data: TaskCreate,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaskResponse]:
    service = TaskService(db)
    task = await service.create_task(owner_id, data)
    return ApiResponse(
        data=TaskResponse.model_validate(task),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Get a task",
)
async def get_task(
    task_id: str,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaskResponse]:
    service = TaskService(db)
    task = await service.get_task(owner_id, task_id)
    return ApiResponse(
        data=TaskResponse.model_validate(task),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    dependencies=[RateLimited],
    summary="Update a task",
    description=(
        "Update an existing task. Only provided fields are updated. "
        "`tags: []` removes every tag; omitting `tags` leaves them unchanged."
    ),
)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaskResponse]:
    service = TaskService(db)
    task = await service.update_task(owner_id, task_id, data)
    return ApiResponse(
        data=TaskResponse.model_validate(task),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{task_id}",
    status_code=204,
    dependencies=[RateLimited],
    summary="Delete a task",
    description="Permanently delete a task. Its tags are kept.",
)
async def delete_task(
    task_id: str,
    owner_id: CurrentOwner,
    db: DbSession,
) -> None:
    service = TaskService(db)
    await service.delete_task(owner_id, task_id)
