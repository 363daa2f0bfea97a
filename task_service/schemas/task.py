"""
Pydantic schemas for Task Service.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import TaskPatch, TaskPriority, TaskStatus


class CreateTaskRequest(BaseModel):
    """Schema for creating a task"""
    title: str = Field(..., min_length=1, description="Task title, may contain !1..!4 and !before DD.MM.YYYY macros")
    description: Optional[str] = Field(None, description="Task description")
    deadline: Optional[datetime] = Field(None, description="Task deadline")
    priority: Optional[str] = Field(None, description="LOW, MEDIUM, HIGH or CRITICAL")


class UpdateTaskRequest(BaseModel):
    """Schema for updating a task"""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    deadline: Optional[datetime] = Field(None, description="Task deadline")
    priority: Optional[str] = Field(None, description="Task priority")

    def to_patch(self) -> TaskPatch:
        return TaskPatch(**self.model_dump(exclude_unset=True))


class UpdateTaskStatusRequest(BaseModel):
    """Schema for toggling task completion"""
    is_completed: bool = Field(..., description="Whether the task is completed")


class TaskResponse(BaseModel):
    """Schema for task response"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Task ID")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    deadline: Optional[datetime] = Field(None, description="Task deadline")
    status: TaskStatus = Field(..., description="Task status")
    priority: TaskPriority = Field(..., description="Task priority")
    is_completed: bool = Field(..., description="Whether the task is completed")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Task update timestamp")


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    total: int = Field(..., description="Number of tasks matching the filter")
    page: int = Field(..., description="Current page")
    page_size: int = Field(..., description="Page size")
    total_pages: int = Field(..., description="Number of pages")


class PaginatedTasksResponse(BaseModel):
    """Schema for paginated task list"""
    items: List[TaskResponse] = Field(..., description="List of tasks")
    meta: PaginationMeta
