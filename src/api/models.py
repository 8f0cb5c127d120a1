"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from domain.model.task import Task


class CredentialsRequest(BaseModel):
    """Request body for register and login.

    Both fields are optional here so that a missing value is reported as
    "Email and password are required" by the auth service.
    """
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    token: str


class TaskCreateRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class TaskUpdateRequest(BaseModel):
    """Partial update; only fields present in the JSON body are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    id: str = Field(..., description="Task ID")
    title: str
    description: str = ""
    completed: bool = False
    owner_id: str = Field(..., description="ID of the owning user")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            owner_id=task.owner_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class ErrorResponse(BaseModel):
    message: str
