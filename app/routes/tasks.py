"""
Task routes. Every operation is scoped to the authenticated owner.
"""

from fastapi import APIRouter, Depends, status
from loguru import logger

from app.middleware.auth_middleware import get_current_user
from app.models.task import (
    GroupCount,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    serialize_task,
)
from app.models.user import TokenData
from app.services.database import TaskDB
from app.utils.errors import NotFound, ValidationError

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

# Another owner's task is reported as missing, never as forbidden
TASK_NOT_FOUND = "Task not found"


@router.get("")
@router.get("/", include_in_schema=False)
async def list_tasks(current_user: TokenData = Depends(get_current_user)):
    logger.info(f"Fetching tasks for user: {current_user.email}")

    tasks = await TaskDB.get_user_tasks(current_user.user_id)

    return {
        "success": True,
        "count": len(tasks),
        "tasks": [serialize_task(task) for task in tasks]
    }


@router.get("/stats")
async def task_stats(current_user: TokenData = Depends(get_current_user)):
    """Task counts per status and per priority, plus the total."""
    user_id = current_user.user_id

    status_stats = await TaskDB.group_counts(user_id, "status")
    priority_stats = await TaskDB.group_counts(user_id, "priority")
    total_tasks = await TaskDB.count_tasks(user_id)

    return {
        "success": True,
        "totalTasks": total_tasks,
        "statusStats": [GroupCount(**row).model_dump(by_alias=True) for row in status_stats],
        "priorityStats": [GroupCount(**row).model_dump(by_alias=True) for row in priority_stats],
    }


@router.get("/status/{task_status}")
async def list_tasks_by_status(
    task_status: str,
    current_user: TokenData = Depends(get_current_user)
):
    tasks = await TaskDB.get_user_tasks(current_user.user_id, status=task_status)

    return {
        "success": True,
        "status": task_status,
        "count": len(tasks),
        "tasks": [serialize_task(task) for task in tasks]
    }


@router.get("/{task_id}")
async def get_task(task_id: str, current_user: TokenData = Depends(get_current_user)):
    task = await TaskDB.get_task(current_user.user_id, task_id)

    if not task:
        raise NotFound(TASK_NOT_FOUND)

    return {"success": True, "task": serialize_task(task)}


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_task(
    task: TaskCreate,
    current_user: TokenData = Depends(get_current_user)
):
    """
    Create a task for the caller.

    Status defaults to "To Do" and priority to "Medium".

    Raises:
        ValidationError: If the title is missing or blank
    """
    if not task.title:
        raise ValidationError("Title is required")

    logger.info(f"Creating new task for user: {current_user.email}")

    task_data = {
        "title": task.title,
        "description": task.description,
        "status": (task.status or TaskStatus.TODO).value,
        "priority": (task.priority or TaskPriority.MEDIUM).value,
        "due_date": task.due_date,
    }

    created = await TaskDB.create_task(current_user.user_id, task_data)

    logger.info(f"Task created successfully: {created['_id']}")

    return {
        "success": True,
        "message": "Task created successfully",
        "task": serialize_task(created)
    }


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    task: TaskUpdate,
    current_user: TokenData = Depends(get_current_user)
):
    """
    Partially update a task. Fields absent from the body are left alone.

    Raises:
        ValidationError: If title, status or priority is sent empty
        NotFound: If the caller owns no task with this id
    """
    changes = task.changes()

    for field in ("title", "status", "priority"):
        if field in changes and not changes[field]:
            raise ValidationError(f"{field.capitalize()} cannot be empty")

    logger.info(f"Updating task: {task_id} for user: {current_user.email}")

    if changes:
        updated = await TaskDB.update_task(current_user.user_id, task_id, changes)
    else:
        updated = await TaskDB.get_task(current_user.user_id, task_id)

    if not updated:
        raise NotFound(TASK_NOT_FOUND)

    logger.info(f"Task updated successfully: {task_id}")

    return {
        "success": True,
        "message": "Task updated successfully",
        "task": serialize_task(updated)
    }


@router.delete("/{task_id}")
async def delete_task(task_id: str, current_user: TokenData = Depends(get_current_user)):
    logger.info(f"Deleting task: {task_id} for user: {current_user.email}")

    deleted = await TaskDB.delete_task(current_user.user_id, task_id)

    if not deleted:
        raise NotFound(TASK_NOT_FOUND)

    logger.info(f"Task deleted successfully: {task_id}")

    return {
        "success": True,
        "message": "Task deleted successfully"
    }
