"""Tests for MongoConnection lifecycle."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from pymongo.errors import ServerSelectionTimeoutError

from adapter.mongodb.connection import MongoConnection


def _mock_client() -> MagicMock:
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={'ok': 1})
    client.close = AsyncMock()
    return client


class TestMongoConnection(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.connection = MongoConnection('mongodb://localhost:27017', 'tasks-test')

    def test_database_before_connect_raises(self):
        self.assertFalse(self.connection.is_connected)
        with self.assertRaises(RuntimeError):
            _ = self.connection.database

    @patch('adapter.mongodb.connection.AsyncMongoClient')
    async def test_connect_and_disconnect(self, mock_client_class):
        client = _mock_client()
        mock_client_class.return_value = client

        self.assertTrue(await self.connection.connect())
        self.assertTrue(self.connection.is_connected)
        client.admin.command.assert_awaited_once_with('ping')
        self.assertIs(self.connection.database, client.__getitem__.return_value)
        client.__getitem__.assert_called_with('tasks-test')

        await self.connection.disconnect()

        client.close.assert_awaited_once()
        self.assertFalse(self.connection.is_connected)

    @patch('adapter.mongodb.connection.AsyncMongoClient')
    async def test_connect_is_idempotent(self, mock_client_class):
        mock_client_class.return_value = _mock_client()

        await self.connection.connect()
        await self.connection.connect()

        mock_client_class.assert_called_once()

    @patch('adapter.mongodb.connection.AsyncMongoClient')
    async def test_failed_ping_leaves_connection_closed(self, mock_client_class):
        client = _mock_client()
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
        mock_client_class.return_value = client

        self.assertFalse(await self.connection.connect())
        self.assertFalse(self.connection.is_connected)
        client.close.assert_awaited_once()

    @patch('adapter.mongodb.connection.AsyncMongoClient')
    async def test_ping(self, mock_client_class):
        client = _mock_client()
        mock_client_class.return_value = client

        self.assertFalse(await self.connection.ping())
        await self.connection.connect()
        self.assertTrue(await self.connection.ping())

        client.admin.command.side_effect = ServerSelectionTimeoutError("gone")
        self.assertFalse(await self.connection.ping())


if __name__ == '__main__':
    unittest.main()
