"""
app/db/mongo.py

Purpose: MongoDB connection setup and ledger store backend

- Initializes Motor client with connection pooling
- Collections: users, pending_signups, vehicles, incomes, expenses
- Health checks and retry logic
- MongoLedgerStore: LedgerStore implementation over Motor collections
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, ServerSelectionTimeoutError
from typing import Any, Dict, List, Optional
import asyncio
from app.core.config import settings
from app.core.exceptions import DuplicateUserError, ValidationError
from app.core.logging import get_logger
from app.db.store import LedgerStore, LEDGER_COLLECTIONS
from utils.constants import MSG_DUPLICATE_RECORD, MSG_USER_EXISTS

logger = get_logger(__name__)

USERS = "users"
PENDING_SIGNUPS = "pending_signups"

# Never hand Mongo's internal key back to services
_PROJECTION = {"_id": 0}

# Global MongoDB client
_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo():
    """
    Establishes connection to MongoDB with retry logic.
    Called during application startup when STORE_BACKEND=mongo.
    """
    global _client, _database

    if _client is not None:
        logger.warning("MongoDB client already initialized")
        return

    max_retries = 3
    retry_delay = 2

    for attempt in range(1, max_retries + 1):
        try:
            logger.info(
                f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
            )

            client = AsyncIOMotorClient(
                settings.MONGODB_URL,
                maxPoolSize=50,
                minPoolSize=5,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                retryWrites=True,
                retryReads=True,
            )

            await client.admin.command("ping")

            _client = client
            _database = client[settings.MONGODB_DB_NAME]
            logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")
            return

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(
                f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
            )

            if attempt < max_retries:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay *= 2
            else:
                logger.critical("Failed to connect to MongoDB after all retries")
                raise ConnectionError("Could not establish MongoDB connection") from e


async def close_mongo_connection():
    """
    Closes the MongoDB connection.
    Called during application shutdown.
    """
    global _client, _database

    if _client:
        logger.info("Closing MongoDB connection")
        _client.close()
        _client = None
        _database = None


def get_database() -> AsyncIOMotorDatabase:
    """
    Returns the MongoDB database instance.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _database is None:
        raise RuntimeError(
            "Database not initialized. Call connect_to_mongo() during startup."
        )
    return _database


class MongoLedgerStore(LedgerStore):
    """
    LedgerStore over Motor. Single-document operations are atomic in
    MongoDB, which is all the services rely on.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self._db = database

    def _collection(self, name: str):
        if name not in LEDGER_COLLECTIONS:
            raise KeyError(f"Unknown collection: {name}")
        return self._db[name]

    async def insert_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        try:
            await self._db[USERS].insert_one(dict(user))
        except DuplicateKeyError:
            raise DuplicateUserError(MSG_USER_EXISTS)
        return dict(user)

    async def find_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self._db[USERS].find_one({"id": user_id}, _PROJECTION)

    async def find_user_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        return await self._db[USERS].find_one({"phone": phone}, _PROJECTION)

    async def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self._db[USERS].find_one({"email": email}, _PROJECTION)

    async def save_pending_signup(self, pending: Dict[str, Any]) -> None:
        await self._db[PENDING_SIGNUPS].replace_one(
            {"phone": pending["phone"]},
            dict(pending),
            upsert=True
        )

    async def get_pending_signup(self, phone: str) -> Optional[Dict[str, Any]]:
        return await self._db[PENDING_SIGNUPS].find_one({"phone": phone}, _PROJECTION)

    async def delete_pending_signup(self, phone: str) -> bool:
        result = await self._db[PENDING_SIGNUPS].delete_one({"phone": phone})
        return result.deleted_count > 0

    async def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        try:
            await self._collection(collection).insert_one(dict(document))
        except DuplicateKeyError:
            raise ValidationError(MSG_DUPLICATE_RECORD, details={"collection": collection})
        return dict(document)

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        return await self._collection(collection).find_one({"id": record_id}, _PROJECTION)

    async def find_by_owner(
        self,
        collection: str,
        user_id: str,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        query = {**(filters or {}), "user_id": user_id}
        cursor = self._collection(collection).find(query, _PROJECTION)
        return await cursor.to_list(length=None)

    async def update(
        self,
        collection: str,
        record_id: str,
        user_id: str,
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection(collection).find_one_and_update(
                {"id": record_id, "user_id": user_id},
                {"$set": changes},
                projection=_PROJECTION,
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            raise ValidationError(MSG_DUPLICATE_RECORD, details={"collection": collection})

    async def delete(self, collection: str, record_id: str, user_id: str) -> bool:
        result = await self._collection(collection).delete_one(
            {"id": record_id, "user_id": user_id}
        )
        return result.deleted_count > 0

    async def ping(self) -> bool:
        try:
            await self._db.client.admin.command("ping")
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False
