"""Task service — ownership-scoped task operations.

Every function takes the authenticated owner id. A task owned by someone
else is reported exactly like a missing one.
"""

from domain.model.errors import NotFoundError, ValidationError
from domain.model.task import UPDATABLE_FIELDS, Task, parse_task_id
from port.task_repository import TaskRepository

TASK_NOT_FOUND_MESSAGE = "Task not found"
TITLE_REQUIRED_MESSAGE = "Title is required"


def _require_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(TITLE_REQUIRED_MESSAGE)
    return title


async def list_tasks(repo: TaskRepository, owner_id: str) -> list[Task]:
    return await repo.find_by_owner(owner_id)


async def create_task(
    repo: TaskRepository,
    owner_id: str,
    title: str | None,
    description: str | None = None,
    completed: bool | None = None,
) -> Task:
    """Create a task for ``owner_id``.

    Raises:
        ValidationError: title missing or blank
    """
    return await repo.create(
        owner_id=owner_id,
        title=_require_title(title),
        description=description or "",
        completed=bool(completed),
    )


async def get_task(repo: TaskRepository, owner_id: str, task_id: str) -> Task:
    """Raises InvalidIdError or NotFoundError."""
    parse_task_id(task_id)
    task = await repo.get_for_owner(task_id, owner_id)
    if not task:
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
    return task


async def update_task(repo: TaskRepository, owner_id: str, task_id: str, changes: dict) -> Task:
    """Apply a partial update.

    Only keys present in ``changes`` are written. An explicit null
    description becomes the empty string; an explicit null ``completed``
    is rejected, as is a blank title.

    Raises:
        InvalidIdError: task_id is not a valid id
        ValidationError: a supplied field has an invalid value
        NotFoundError: no task with that id owned by the caller
    """
    parse_task_id(task_id)

    fields = {}
    for key in UPDATABLE_FIELDS:
        if key not in changes:
            continue
        value = changes[key]
        if key == 'title':
            value = _require_title(value)
        elif key == 'description':
            value = value or ""
        elif key == 'completed' and not isinstance(value, bool):
            raise ValidationError("Completed must be a boolean")
        fields[key] = value

    if fields:
        task = await repo.update_for_owner(task_id, owner_id, fields)
    else:
        task = await repo.get_for_owner(task_id, owner_id)
    if not task:
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
    return task


async def delete_task(repo: TaskRepository, owner_id: str, task_id: str) -> None:
    parse_task_id(task_id)
    if not await repo.delete_for_owner(task_id, owner_id):
        raise NotFoundError(TASK_NOT_FOUND_MESSAGE)
