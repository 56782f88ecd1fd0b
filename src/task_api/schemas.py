from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import TaskEntity

# Field rules (trim, 1..120 title, status tokens) are enforced by TaskService so that
# violations surface as 400 with a specific message rather than a 422 schema error.


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Write release notes",
                "description": "Summarize the changes for the next release",
                "status": "NOT_STARTED",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Task title, required, at most 120 characters")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    status: Optional[str] = Field(
        default=None,
        description="NOT_STARTED, IN_PROGRESS or COMPLETED (case-insensitive). Defaults to NOT_STARTED",
    )


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.
    All fields are optional; only provided fields will be updated.
    A blank title is ignored; a blank description clears the description.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "IN_PROGRESS",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="New title, at most 120 characters")
    description: Optional[str] = Field(default=None, description="New description; empty string clears it")
    status: Optional[str] = Field(default=None, description="New status (case-insensitive)")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 7,
                "title": "Write release notes",
                "description": "Summarize the changes for the next release",
                "status": "IN_PROGRESS",
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "updatedAt": "2025-01-26T09:00:00.000001Z",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    status: str = Field(..., description="NOT_STARTED, IN_PROGRESS or COMPLETED")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC)")

    @classmethod
    def from_entity(cls, entity: TaskEntity) -> "TaskOut":
        return cls(**{**entity, "status": entity["status"].format()})


# PUBLIC_INTERFACE
class ErrorMessage(BaseModel):
    """Error body returned for 400/404/500 responses."""

    message: str = Field(..., description="Human-readable description of the failure")
