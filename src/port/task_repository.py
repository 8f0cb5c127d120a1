"""Port definition for TaskRepository.

Every method that touches an existing task takes the owner id and matches
on ``(task_id, owner_id)`` in a single store operation.
"""

from typing import Protocol

from domain.model.task import Task


class TaskRepository(Protocol):
    async def create(
        self,
        owner_id: str,
        title: str,
        description: str = "",
        completed: bool = False,
    ) -> Task: ...

    async def find_by_owner(self, owner_id: str) -> list[Task]: ...

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None: ...

    async def update_for_owner(self, task_id: str, owner_id: str, changes: dict) -> Task | None: ...

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool: ...
