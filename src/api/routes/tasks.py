"""Task routes.

Mounted behind the bearer gate; every handler works on the caller's own
tasks only.

Endpoints:
- GET /api/tasks: List the caller's tasks
- POST /api/tasks: Create a task
- GET /api/tasks/{task_id}: Get one task
- PUT /api/tasks/{task_id}: Partially update a task
- DELETE /api/tasks/{task_id}: Delete a task
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_task_repo
from api.models import ErrorResponse, TaskCreateRequest, TaskResponse, TaskUpdateRequest
from api.security import AuthIdentity, get_current_identity
from port.task_repository import TaskRepository
from services import task_service

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    responses={401: {"model": ErrorResponse}},
)

_ID_ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("", response_model=list[TaskResponse])
@router.get("/", response_model=list[TaskResponse], include_in_schema=False)
async def list_tasks(
    identity: AuthIdentity = Depends(get_current_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    tasks = await task_service.list_tasks(repo, identity.user_id)
    return [TaskResponse.from_domain(task) for task in tasks]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_task(
    request: Optional[TaskCreateRequest] = None,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Create a task owned by the caller. Any client-sent owner is ignored."""
    request = request or TaskCreateRequest()
    task = await task_service.create_task(
        repo,
        owner_id=identity.user_id,
        title=request.title,
        description=request.description,
        completed=request.completed,
    )
    return TaskResponse.from_domain(task)


@router.get("/{task_id}", response_model=TaskResponse, responses=_ID_ERRORS)
@router.get("/{task_id}/", response_model=TaskResponse, include_in_schema=False)
async def get_task(
    task_id: str,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    task = await task_service.get_task(repo, identity.user_id, task_id)
    return TaskResponse.from_domain(task)


@router.put("/{task_id}", response_model=TaskResponse, responses=_ID_ERRORS)
@router.put("/{task_id}/", response_model=TaskResponse, include_in_schema=False)
async def update_task(
    task_id: str,
    request: Optional[TaskUpdateRequest] = None,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    """Apply only the fields present in the body."""
    changes = request.model_dump(exclude_unset=True) if request else {}
    task = await task_service.update_task(repo, identity.user_id, task_id, changes)
    return TaskResponse.from_domain(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_ID_ERRORS)
@router.delete("/{task_id}/", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def delete_task(
    task_id: str,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: TaskRepository = Depends(get_task_repo),
):
    await task_service.delete_task(repo, identity.user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
