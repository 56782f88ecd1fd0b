from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from ..schemas import ErrorMessage, TaskCreate, TaskOut, TaskUpdate
from ..service import TaskService

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)

_BAD_REQUEST = {"model": ErrorMessage, "description": "Validation error"}
_NOT_FOUND = {"model": ErrorMessage, "description": "Task not found"}


def get_task_service(request: Request) -> TaskService:
    """
    Dependency returning the TaskService attached to the application at startup.
    """
    return request.app.state.task_service


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="Get all tasks",
    description="Get all tasks ordered by id, with an optional status filter.",
    responses={
        200: {"description": "List retrieved successfully"},
        400: _BAD_REQUEST,
    },
)
def list_tasks(
    status_filter: Optional[str] = Query(
        None,
        alias="status",
        description="Filter by status: NOT_STARTED, IN_PROGRESS or COMPLETED (case-insensitive)",
    ),
    service: TaskService = Depends(get_task_service),
) -> List[TaskOut]:
    """
    List tasks, optionally filtered by status.
    """
    return [TaskOut.from_entity(t) for t in service.list(status_filter)]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    description=(
        "Create a new task with title (required), description (optional), "
        "and status (optional, defaults to NOT_STARTED)."
    ),
    responses={
        201: {"description": "Task created successfully"},
        400: _BAD_REQUEST,
    },
)
def create_task(
    payload: TaskCreate,
    response: Response,
    service: TaskService = Depends(get_task_service),
) -> TaskOut:
    """
    Create a new task and point the Location header at it.
    """
    created = service.create(payload.title, payload.description, payload.status)
    response.headers["Location"] = f"{router.prefix}/{created['id']}"
    return TaskOut.from_entity(created)


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get a task",
    description="Get a single task by its ID.",
    responses={
        200: {"description": "Task found"},
        404: _NOT_FOUND,
    },
)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskOut:
    """
    Retrieve a single task by its ID.
    """
    return TaskOut.from_entity(service.get(task_id))


def _update(task_id: int, payload: TaskUpdate, service: TaskService) -> TaskOut:
    updated = service.update(
        task_id,
        title=payload.title,
        description=payload.description,
        status=payload.status,
    )
    return TaskOut.from_entity(updated)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update a task",
    description=(
        "Update a task's title, description, and/or status. Omitted fields are left untouched; "
        "an empty description clears it."
    ),
    responses={
        200: {"description": "Task updated"},
        400: _BAD_REQUEST,
        404: _NOT_FOUND,
    },
)
def put_task(
    task_id: int, payload: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskOut:
    """
    Partial update of a task (PUT keeps partial semantics for existing clients).
    """
    return _update(task_id, payload, service)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Patch a task",
    description="Partially update fields of a task. Same semantics as PUT.",
    responses={
        200: {"description": "Task updated"},
        400: _BAD_REQUEST,
        404: _NOT_FOUND,
    },
)
def patch_task(
    task_id: int, payload: TaskUpdate, service: TaskService = Depends(get_task_service)
) -> TaskOut:
    """
    Partial update of a task.
    """
    return _update(task_id, payload, service)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    description="Delete a task by its ID.",
    responses={
        204: {"description": "Task deleted"},
        404: _NOT_FOUND,
    },
)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
