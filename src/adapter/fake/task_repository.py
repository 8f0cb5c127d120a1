"""In-memory implementation of TaskRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from bson import ObjectId

from domain.model.task import Task


class FakeTaskRepository:
    def __init__(self):
        self.store: dict[str, Task] = {}

    def _owned(self, task_id: str, owner_id: str) -> Task | None:
        task = self.store.get(task_id)
        if task and task.owner_id == owner_id:
            return task
        return None

    # ── write operations ─────────────────────────────────────

    async def create(
        self,
        owner_id: str,
        title: str,
        description: str = "",
        completed: bool = False,
    ) -> Task:
        now = datetime.now(timezone.utc)
        task = Task(
            id=str(ObjectId()),
            title=title,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            description=description,
            completed=completed,
        )
        self.store[task.id] = task
        return replace(task)

    async def update_for_owner(self, task_id: str, owner_id: str, changes: dict) -> Task | None:
        task = self._owned(task_id, owner_id)
        if not task:
            return None

        for key, value in changes.items():
            setattr(task, key, value)
        task.updated_at = datetime.now(timezone.utc)
        return replace(task)

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool:
        if not self._owned(task_id, owner_id):
            return False
        del self.store[task_id]
        return True

    # ── read operations ──────────────────────────────────────

    async def find_by_owner(self, owner_id: str) -> list[Task]:
        tasks = [replace(t) for t in self.store.values() if t.owner_id == owner_id]
        tasks.sort(key=lambda t: t.created_at)
        return tasks

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None:
        task = self._owned(task_id, owner_id)
        return replace(task) if task else None
