"""Task domain model."""

from dataclasses import dataclass
from datetime import datetime

from bson import ObjectId

from domain.model.errors import InvalidIdError

UPDATABLE_FIELDS = ('title', 'description', 'completed')


@dataclass
class Task:
    """A unit of work owned by exactly one user."""
    id: str
    title: str
    owner_id: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    completed: bool = False


def parse_task_id(task_id: str) -> ObjectId:
    """Parse a path id into an ObjectId.

    Raises:
        InvalidIdError: id is not a 24-char hex ObjectId
    """
    if not ObjectId.is_valid(task_id):
        raise InvalidIdError("Invalid task ID")
    return ObjectId(task_id)
