"""
Development-only inspection routes.

Only mounted outside production with ENABLE_DEBUG_ROUTES set, and every
route also requires the X-Debug-Key header to match DEBUG_API_KEY.
"""

import os
import platform
import secrets
import sys
import time

from fastapi import APIRouter, Depends, Header
from typing import Optional
from loguru import logger

from app.config import settings
from app.models.task import serialize_task
from app.models.user import public_user
from app.services.database import MongoDB
from app.utils.errors import InvalidToken

STARTED_AT = time.time()


async def require_debug_key(x_debug_key: Optional[str] = Header(None)):
    expected = settings.DEBUG_API_KEY
    if not expected or not x_debug_key or not secrets.compare_digest(x_debug_key, expected):
        raise InvalidToken("Debug access denied")


router = APIRouter(
    prefix="/debug",
    tags=["debug"],
    dependencies=[Depends(require_debug_key)]
)


@router.get("/test")
async def test_endpoint():
    return {"success": True, "message": "Debug endpoint is working"}


@router.get("/status")
async def database_status():
    try:
        await MongoDB.client.admin.command('ping')
    except Exception as e:
        logger.warning(f"Debug status ping failed: {e}")
        return {
            "success": False,
            "database": {
                "state": "disconnected",
                "name": settings.MONGODB_DB_NAME,
                "error": str(e),
            }
        }

    users = MongoDB.get_collection("users")
    tasks = MongoDB.get_collection("tasks")

    collections = await MongoDB.db.list_collection_names()

    return {
        "success": True,
        "database": {
            "state": "connected",
            "name": settings.MONGODB_DB_NAME,
            "collections": sorted(collections),
            "users": await users.count_documents({}),
            "tasks": await tasks.count_documents({}),
        }
    }


@router.get("/users")
async def all_users():
    collection = MongoDB.get_collection("users")
    cursor = collection.find({}, {"hashed_password": 0}).sort("created_at", -1)
    users = await cursor.to_list(length=None)

    return {
        "success": True,
        "count": len(users),
        "users": [public_user(user, include_created=True) for user in users]
    }


@router.get("/tasks")
async def all_tasks():
    collection = MongoDB.get_collection("tasks")
    cursor = collection.find({}).sort([("created_at", -1), ("_id", -1)])
    tasks = await cursor.to_list(length=None)

    return {
        "success": True,
        "count": len(tasks),
        "tasks": [serialize_task(task) for task in tasks]
    }


@router.get("/system")
async def system_info():
    return {
        "success": True,
        "system": {
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "pid": os.getpid(),
            "uptime_seconds": round(time.time() - STARTED_AT, 1),
            "environment": settings.ENVIRONMENT,
        }
    }


@router.delete("/clear-all")
async def clear_all_data():
    users = await MongoDB.get_collection("users").delete_many({})
    tasks = await MongoDB.get_collection("tasks").delete_many({})

    logger.warning(
        f"Debug clear-all removed {users.deleted_count} users and {tasks.deleted_count} tasks"
    )

    return {
        "success": True,
        "message": "All data cleared",
        "deletedUsers": users.deleted_count,
        "deletedTasks": tasks.deleted_count,
    }
