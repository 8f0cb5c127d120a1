"""Unit tests for FakeTaskRepository — verifies Port contract compliance."""

import unittest

from bson import ObjectId

from adapter.fake.task_repository import FakeTaskRepository
from domain.model.task import Task


class TestFakeTaskRepository(unittest.IsolatedAsyncioTestCase):
    """Tests that FakeTaskRepository behaves like the TaskRepository Protocol."""

    async def asyncSetUp(self):
        self.repo = FakeTaskRepository()
        self.task = await self.repo.create(owner_id='user-1', title='Buy milk')

    # ── create + get_for_owner (round-trip) ───────────────────

    async def test_create_and_get_for_owner(self):
        task = await self.repo.get_for_owner(self.task.id, 'user-1')

        self.assertIsInstance(task, Task)
        self.assertTrue(ObjectId.is_valid(task.id))
        self.assertEqual(task.title, 'Buy milk')
        self.assertEqual(task.description, '')
        self.assertFalse(task.completed)

    async def test_get_for_other_owner_returns_none(self):
        self.assertIsNone(await self.repo.get_for_owner(self.task.id, 'user-2'))

    async def test_returned_tasks_are_copies(self):
        task = await self.repo.get_for_owner(self.task.id, 'user-1')
        task.title = 'mutated'

        self.assertEqual(self.repo.store[self.task.id].title, 'Buy milk')

    # ── update_for_owner ──────────────────────────────────────

    async def test_update_for_owner(self):
        task = await self.repo.update_for_owner(self.task.id, 'user-1', {'completed': True})

        self.assertTrue(task.completed)
        self.assertGreaterEqual(task.updated_at, self.task.updated_at)

    async def test_update_for_other_owner_returns_none(self):
        self.assertIsNone(await self.repo.update_for_owner(self.task.id, 'user-2', {'completed': True}))
        self.assertFalse(self.repo.store[self.task.id].completed)

    # ── delete_for_owner ──────────────────────────────────────

    async def test_delete_for_owner(self):
        self.assertTrue(await self.repo.delete_for_owner(self.task.id, 'user-1'))
        self.assertNotIn(self.task.id, self.repo.store)

    async def test_delete_for_other_owner(self):
        self.assertFalse(await self.repo.delete_for_owner(self.task.id, 'user-2'))
        self.assertIn(self.task.id, self.repo.store)

    # ── find_by_owner ─────────────────────────────────────────

    async def test_find_by_owner_in_creation_order(self):
        second = await self.repo.create(owner_id='user-1', title='Second')
        await self.repo.create(owner_id='user-2', title='Not mine')

        tasks = await self.repo.find_by_owner('user-1')

        self.assertEqual([t.id for t in tasks], [self.task.id, second.id])


if __name__ == '__main__':
    unittest.main()
