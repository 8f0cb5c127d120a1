"""MongoDB implementation of TaskRepository.

Lookups by id always carry ``owner_id`` in the same filter, so a task that
belongs to someone else simply does not match.
"""

from datetime import datetime, timezone
from logging import getLogger

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from adapter.mongodb import TASKS_COLLECTION_NAME
from domain.model.errors import StoreError
from domain.model.task import Task

logger = getLogger(__name__)


class MongoTaskRepository:
    def __init__(self, db: AsyncDatabase):
        self.collection = db[TASKS_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    async def ensure_indexes(self) -> bool:
        """Create indexes for tasks collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            await create_index_safe(
                self.collection, [('owner_id', 1), ('created_at', 1)], 'idx_tasks_owner_created_at'
            )
            return True
        except Exception as e:
            logger.error("Failed to create tasks indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Task:
        return Task(
            id=str(doc['_id']),
            title=doc['title'],
            owner_id=doc['owner_id'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            description=doc.get('description', ''),
            completed=doc.get('completed', False),
        )

    @staticmethod
    def _owned_filter(task_id: str, owner_id: str) -> dict:
        return {'_id': ObjectId(task_id), 'owner_id': owner_id}

    # ── write operations ─────────────────────────────────────

    async def create(
        self,
        owner_id: str,
        title: str,
        description: str = "",
        completed: bool = False,
    ) -> Task:
        now = datetime.now(timezone.utc)
        doc = {
            '_id': ObjectId(),
            'title': title,
            'description': description,
            'completed': completed,
            'owner_id': owner_id,
            'created_at': now,
            'updated_at': now,
        }
        try:
            await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Failed to create task", extra={"userId": owner_id, "error": str(e)})
            raise StoreError() from e

        logger.info("Task created", extra={"taskId": str(doc['_id']), "userId": owner_id})
        return self._to_domain(doc)

    async def update_for_owner(self, task_id: str, owner_id: str, changes: dict) -> Task | None:
        """Apply changes to an owned task. Return None if no owned task matches."""
        try:
            doc = await self.collection.find_one_and_update(
                self._owned_filter(task_id, owner_id),
                {'$set': {**changes, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update task", extra={"taskId": task_id, "userId": owner_id, "error": str(e)})
            raise StoreError() from e

        if doc is None:
            return None
        logger.debug("Task updated", extra={"taskId": task_id, "fields": sorted(changes)})
        return self._to_domain(doc)

    async def delete_for_owner(self, task_id: str, owner_id: str) -> bool:
        try:
            doc = await self.collection.find_one_and_delete(self._owned_filter(task_id, owner_id))
        except PyMongoError as e:
            logger.error("Failed to delete task", extra={"taskId": task_id, "userId": owner_id, "error": str(e)})
            raise StoreError() from e

        if doc is None:
            return False
        logger.info("Task deleted", extra={"taskId": task_id, "userId": owner_id})
        return True

    # ── read operations ──────────────────────────────────────

    async def find_by_owner(self, owner_id: str) -> list[Task]:
        try:
            cursor = self.collection.find({'owner_id': owner_id}).sort('created_at', 1)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed to list tasks", extra={"userId": owner_id, "error": str(e)})
            raise StoreError() from e
        return [self._to_domain(doc) for doc in docs]

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None:
        try:
            doc = await self.collection.find_one(self._owned_filter(task_id, owner_id))
        except PyMongoError as e:
            logger.error("Failed to get task", extra={"taskId": task_id, "userId": owner_id, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None
