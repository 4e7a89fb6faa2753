"""Task board CRUD routes."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from ..deps import get_task_service
from ..errors import NotFoundError, ValidationError
from ..schemas import ErrorResponse, TaskCreate, TaskListResponse, TaskResponse, parse_command
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


@router.get("", response_model=TaskListResponse)
def list_tasks(task_service: TaskService = Depends(get_task_service)) -> TaskListResponse:
    """List every task, most recently updated first."""
    try:
        return TaskListResponse(tasks=task_service.list_tasks())

    except Exception as e:
        logger.error(f"Error listing tasks: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to load tasks"
        )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_task(
    payload: Any = Body(default=None),
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Create a new task.

    Args:
        payload: Raw JSON body ``{title, description?}``
        task_service: Task service instance

    Returns:
        Created task wrapped as ``{task}``

    Raises:
        HTTPException: 400 on invalid input, 500 if the board cannot be saved
    """
    try:
        task_data = parse_command(TaskCreate, payload)
        task = task_service.create_task_from_schema(task_data)
        return TaskResponse(task=task)

    except ValidationError as e:
        logger.warning(f"Validation error creating task: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Unexpected error creating task: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to create task"
        )


@router.patch("/{task_id}", response_model=TaskResponse, responses=ERROR_RESPONSES)
def update_task(
    task_id: str,
    payload: Any = Body(default=None),
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Update a task.

    Args:
        task_id: Task ID
        payload: Raw JSON body ``{title?, description?, status?}``
        task_service: Task service instance

    Returns:
        Updated task wrapped as ``{task}``

    Raises:
        HTTPException: 404 if the task is missing, 400 on invalid input
    """
    try:
        task = task_service.update_task(task_id, payload)
        return TaskResponse(task=task)

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValidationError as e:
        logger.warning(f"Validation error updating task {task_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Unexpected error updating task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to update task"
        )


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def delete_task(
    task_id: str,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete a task.

    Args:
        task_id: Task ID
        task_service: Task service instance

    Raises:
        HTTPException: 404 if the task is missing
    """
    try:
        task_service.delete_task(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to delete task"
        )
