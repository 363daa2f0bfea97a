from fastapi import APIRouter, Depends, Query, Request, Response, status

from ..core.config import get_settings
from ..models.domain import Task, TaskFilter
from ..schemas.task import (
    CreateTaskRequest, UpdateTaskRequest, UpdateTaskStatusRequest,
    TaskResponse, PaginatedTasksResponse, PaginationMeta
)
from ..services.lifecycle import TaskService
from ..services.query import total_pages

router = APIRouter()

settings = get_settings()


def get_task_service(request: Request) -> TaskService:
    """Task service shared by the whole application"""
    return request.app.state.task_service


def to_response(task: Task) -> TaskResponse:
    return TaskResponse.model_validate(task)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: CreateTaskRequest,
    service: TaskService = Depends(get_task_service)
):
    """Create a new task"""
    task = service.create_task(
        title=task_data.title,
        description=task_data.description,
        deadline=task_data.deadline,
        priority=task_data.priority,
    )
    return to_response(task)


@router.get("", response_model=PaginatedTasksResponse)
def list_tasks(
    status_filter: str = Query("", alias="status", description="Filter by status"),
    priority_filter: str = Query("", alias="priority", description="Filter by priority"),
    sort_by: str = Query("", description="Sort by field: deadline, created_at, priority"),
    sort_order: str = Query("", description="Sort order: asc or desc"),
    page: int = Query(1, description="Page number"),
    page_size: int = Query(settings.default_page_size, le=settings.max_page_size, description="Page size"),
    service: TaskService = Depends(get_task_service)
):
    """List tasks with filtering, sorting and pagination"""
    task_filter = TaskFilter(
        status=status_filter,
        priority=priority_filter,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    tasks, total = service.list_tasks(task_filter)

    return PaginatedTasksResponse(
        items=[to_response(task) for task in tasks],
        meta=PaginationMeta(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total, page_size),
        ),
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Get a specific task by ID"""
    return to_response(service.get_task(task_id))


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_update: UpdateTaskRequest,
    service: TaskService = Depends(get_task_service)
):
    """Update a task; only supplied fields change"""
    return to_response(service.update_task(task_id, task_update.to_patch()))


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: str,
    status_update: UpdateTaskStatusRequest,
    service: TaskService = Depends(get_task_service)
):
    """Mark a task as completed or not completed and recompute its status"""
    return to_response(service.set_completion(task_id, status_update.is_completed))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Delete a task"""
    service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
