from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum

from app.utils.timeutils import as_utc


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return _strip(value)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly sent by the client, keyed by storage name."""
        fields = self.model_dump(exclude_unset=True)
        for key in ("status", "priority"):
            if isinstance(fields.get(key), Enum):
                fields[key] = fields[key].value
        return fields


class TaskResponse(BaseModel):
    """Wire shape of a task, camelCase as the web client expects."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., serialization_alias="_id")
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = Field(None, serialization_alias="dueDate")
    user_id: str = Field(..., serialization_alias="userId")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def utc_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class GroupCount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    count: int


def serialize_task(task: Dict[str, Any]) -> Dict[str, Any]:
    return TaskResponse(
        id=str(task["_id"]),
        title=task["title"],
        description=task.get("description"),
        status=task["status"],
        priority=task["priority"],
        due_date=task.get("due_date"),
        user_id=str(task["user_id"]),
        created_at=task["created_at"],
        updated_at=task["updated_at"],
    ).model_dump(mode="json", by_alias=True)
