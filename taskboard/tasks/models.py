from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.auth.models import UserRef


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=3, max_length=100)
    description: str = Field("", max_length=500)
    assigned_to: str = Field(alias="assignedTo", min_length=1)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.LOW
    team: Optional[str] = Field(None, min_length=1)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class TaskUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    assigned_to: Optional[str] = Field(None, alias="assignedTo", min_length=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    # null снимает привязку к команде
    team: Optional[str] = Field(None, min_length=1)

    @field_validator("title", "description", "assigned_to", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value.strip() if isinstance(value, str) else value


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    assigned_to: UserRef = Field(alias="assignedTo")
    assigned_by: UserRef = Field(alias="assignedBy")
    team: Optional[str] = None
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class TaskListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int
    page: int
    total_pages: int = Field(alias="totalPages")
    total_tasks: int = Field(alias="totalTasks")
    tasks: List[TaskResponse]


class TaskDeleted(BaseModel):
    id: str
    message: str
