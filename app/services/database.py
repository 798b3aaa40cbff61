from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from typing import Optional, Dict, Any, List
from loguru import logger
from bson import ObjectId

from app.config import settings
from app.utils.errors import DuplicateEmail, InternalError, NotFound
from app.utils.timeutils import utcnow


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an id from a URL or token; malformed ids count as missing."""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class MongoDB:

    client: Optional[AsyncIOMotorClient] = None
    db = None

    @classmethod
    async def connect(cls):
        try:
            cls.client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
            cls.db = cls.client[settings.MONGODB_DB_NAME]

            await cls.client.admin.command('ping')
            logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")

            await cls.create_indexes()

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    @classmethod
    async def create_indexes(cls):
        await cls.db.users.create_index("email", unique=True)
        await cls.db.tasks.create_index("user_id")
        await cls.db.tasks.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    @classmethod
    async def disconnect(cls):
        if cls.client:
            cls.client.close()
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_collection(cls, name: str):
        if cls.db is None:
            raise InternalError("Database not connected")
        return cls.db[name]


class UserDB:

    @staticmethod
    async def create_user(name: str, email: str, hashed_password: str) -> Dict[str, Any]:
        collection = MongoDB.get_collection("users")

        user_doc = {
            "name": name,
            "email": email,
            "hashed_password": hashed_password,
            "created_at": utcnow(),
        }

        try:
            result = await collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise DuplicateEmail()

        user_doc["_id"] = str(result.inserted_id)

        return user_doc

    @staticmethod
    async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("users")
        user = await collection.find_one({"email": email})

        if user:
            user["_id"] = str(user["_id"])

        return user

    @staticmethod
    async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
        """Look up a user without the password hash."""
        collection = MongoDB.get_collection("users")

        oid = to_object_id(user_id)
        if oid is None:
            return None

        user = await collection.find_one({"_id": oid}, {"hashed_password": 0})
        if user:
            user["_id"] = str(user["_id"])
        return user

    @staticmethod
    async def get_user_with_password(user_id: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("users")

        oid = to_object_id(user_id)
        if oid is None:
            return None

        user = await collection.find_one({"_id": oid})
        if user:
            user["_id"] = str(user["_id"])
        return user

    @staticmethod
    async def update_name(user_id: str, name: str) -> Dict[str, Any]:
        """Rename a user and return the public record."""
        collection = MongoDB.get_collection("users")

        oid = to_object_id(user_id)
        if oid is None:
            raise NotFound("User not found")

        user = await collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"name": name}},
            projection={"hashed_password": 0},
            return_document=ReturnDocument.AFTER
        )
        if not user:
            raise NotFound("User not found")

        user["_id"] = str(user["_id"])
        return user

    @staticmethod
    async def update_password_hash(user_id: str, hashed_password: str) -> None:
        collection = MongoDB.get_collection("users")

        oid = to_object_id(user_id)
        if oid is None:
            raise NotFound("User not found")

        result = await collection.update_one(
            {"_id": oid},
            {"$set": {"hashed_password": hashed_password}}
        )
        if result.matched_count == 0:
            raise NotFound("User not found")


class TaskDB:
    """Task persistence. Every query is scoped to the owning user."""

    @staticmethod
    async def create_task(user_id: str, task_data: Dict[str, Any]) -> Dict[str, Any]:
        collection = MongoDB.get_collection("tasks")

        now = utcnow()
        task_doc = {
            **task_data,
            "user_id": user_id,
            "created_at": now,
            "updated_at": now
        }

        result = await collection.insert_one(task_doc)
        task_doc["_id"] = str(result.inserted_id)

        return task_doc

    @staticmethod
    async def get_user_tasks(user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")

        query = {"user_id": user_id}
        if status is not None:
            query["status"] = status

        cursor = collection.find(query).sort([("created_at", -1), ("_id", -1)])
        tasks = await cursor.to_list(length=None)

        for task in tasks:
            task["_id"] = str(task["_id"])

        return tasks

    @staticmethod
    async def get_task(user_id: str, task_id: str) -> Optional[Dict[str, Any]]:
        collection = MongoDB.get_collection("tasks")

        oid = to_object_id(task_id)
        if oid is None:
            return None

        task = await collection.find_one({"_id": oid, "user_id": user_id})
        if task:
            task["_id"] = str(task["_id"])
        return task

    @staticmethod
    async def update_task(
        user_id: str,
        task_id: str,
        fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply ``fields`` with $set and return the updated task, or None."""
        collection = MongoDB.get_collection("tasks")

        oid = to_object_id(task_id)
        if oid is None:
            return None

        task = await collection.find_one_and_update(
            {"_id": oid, "user_id": user_id},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        if task:
            task["_id"] = str(task["_id"])
        return task

    @staticmethod
    async def delete_task(user_id: str, task_id: str) -> bool:
        collection = MongoDB.get_collection("tasks")

        oid = to_object_id(task_id)
        if oid is None:
            return False

        result = await collection.delete_one({"_id": oid, "user_id": user_id})
        return result.deleted_count > 0

    @staticmethod
    async def count_tasks(user_id: str) -> int:
        collection = MongoDB.get_collection("tasks")
        return await collection.count_documents({"user_id": user_id})

    @staticmethod
    async def group_counts(user_id: str, field: str) -> List[Dict[str, Any]]:
        """Count a user's tasks per distinct value of ``field``."""
        collection = MongoDB.get_collection("tasks")

        pipeline = [
            {"$match": {"user_id": user_id}},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}}
        ]
        cursor = collection.aggregate(pipeline)
        return await cursor.to_list(length=None)
