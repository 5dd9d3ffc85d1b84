"""Task API: thin routes delegating to TaskService.

Every route resolves its principal from the bearer token; without one the
ownership scope raises and the request ends in 401. A task owned by another
principal is reported exactly like a missing one (404).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from app.api.v1.dependencies import get_task_service
from app.application.dtos.pagination import Page, PageRequest
from app.application.dtos.task import TaskCreate, TaskResult
from app.application.use_cases.tasks import TaskService
from app.core.config import get_settings
from app.core.limiter import limit_writes
from app.schemas.task import (
    PageMeta,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)

router = APIRouter()


def _to_list_response(page: Page[TaskResult]) -> TaskListResponse:
    return TaskListResponse(
        data=[TaskResponse.model_validate(t) for t in page.items],
        meta=PageMeta(
            current_page=page.page,
            per_page=page.page_size,
            total=page.total,
            last_page=page.last_page,
        ),
    )


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    service: Annotated[TaskService, Depends(get_task_service)],
    search: str | None = Query(None, max_length=255),
    status: str | None = Query(None),
    page: int = Query(1, ge=1),
    per_page: int | None = Query(None, ge=1),
):
    """List the caller's tasks, newest first. Filters: search (title), status.

    per_page is bounded by MAX_PAGE_SIZE from settings (400 above it).
    """
    settings = get_settings()
    page_request = PageRequest(
        page=page,
        page_size=per_page or settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    result = await service.list({"search": search, "status": status}, page_request)
    return _to_list_response(result)


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Create a task owned by the caller."""
    created = await service.create(
        TaskCreate(title=body.title, description=body.description, status=body.status.value)
    )
    return TaskResponse.model_validate(created)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get one of the caller's tasks by id."""
    return TaskResponse.model_validate(await service.get_by_id(task_id))


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdateRequest,
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Update one of the caller's tasks (partial)."""
    task = await service.get_for_write(task_id)
    changes = body.model_dump(exclude_unset=True)
    if changes.get("status") is not None:
        changes["status"] = changes["status"].value
    updated = await service.update(task, changes)
    return TaskResponse.model_validate(updated)


@router.delete("/{task_id}", status_code=204)
@limit_writes
async def delete_task(
    request: Request,
    task_id: str,
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Delete one of the caller's tasks."""
    task = await service.get_for_write(task_id)
    await service.delete(task)
    return Response(status_code=204)
