"""MongoDB connection lifecycle.

The app factory constructs one ``MongoConnection`` and the lifespan calls
``connect()`` at startup and ``disconnect()`` at shutdown. Repositories
receive the database handle through request dependencies.
"""

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Suppress verbose PyMongo logs
logging.getLogger('pymongo').setLevel(logging.WARNING)


class MongoConnection:
    def __init__(self, url: str, database_name: str):
        self.url = url
        self.database_name = database_name
        self._client: AsyncMongoClient | None = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def database(self) -> AsyncDatabase:
        if self._client is None:
            raise RuntimeError("MongoDB connection is not open")
        return self._client[self.database_name]

    async def connect(self) -> bool:
        """Open the client and verify it with a ping.

        Returns:
            True if connected, False if the server could not be reached
        """
        if self._client is not None:
            return True

        client = AsyncMongoClient(
            self.url,
            serverSelectionTimeoutMS=5000,  # 5s timeout for server selection
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,  # 30s timeout for operations
            maxPoolSize=50,
            waitQueueTimeoutMS=10000,
            retryWrites=False,  # failed store operations surface once
            retryReads=False,
        )
        try:
            await client.admin.command('ping')
        except PyMongoError as e:
            logger.error("[MONGODB] Connection failed", extra={"error": str(e)[:200]})
            await client.close()
            return False

        self._client = client
        logger.info(f"[MONGODB] Connected successfully to {self.database_name}")
        return True

    async def disconnect(self) -> None:
        if self._client is None:
            return
        await self._client.close()
        self._client = None
        logger.info("[MONGODB] Connection closed")

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning("[MONGODB] Ping failed", extra={"error": str(e)[:200]})
            return False
