from fastapi import HTTPException, Request
from pymongo.asynchronous.database import AsyncDatabase

from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from api.config import Settings
from port.task_repository import TaskRepository
from port.user_repository import UserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _get_db(request: Request) -> AsyncDatabase:
    """Get MongoDB database, raising 503 if the connection is not open."""
    connection = request.app.state.mongo
    if not connection.is_connected:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return connection.database


def get_user_repo(request: Request) -> UserRepository:
    return MongoUserRepository(_get_db(request))


def get_task_repo(request: Request) -> TaskRepository:
    return MongoTaskRepository(_get_db(request))
