"""
Account Repository
==================

MongoDB persistence for account documents using motor (async driver).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import Settings
from exceptions import AccountExistsError, DatabaseUnavailableError


logger = logging.getLogger(__name__)


class AccountRepository(Protocol):
    """Persistence operations the account service depends on."""

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        ...

    async def find_by_id(self, account_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def create(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        ...


class MongoAccountRepository:
    """
    Store accounts as documents in a MongoDB collection.

    Documents look like:
        {_id: ObjectId, name, email, password, date}

    Email uniqueness is enforced by a unique index (see ensure_indexes),
    so a concurrent duplicate insert surfaces as AccountExistsError.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    @classmethod
    def from_client(
        cls,
        client: AsyncIOMotorClient,
        settings: Settings
    ) -> "MongoAccountRepository":
        database = client[settings.mongodb_database]
        return cls(database[settings.users_collection])

    async def ensure_indexes(self) -> None:
        """Create the unique email index if it doesn't exist yet."""
        await self._collection.create_index(
            [("email", ASCENDING)],
            unique=True,
            name="email_unique"
        )
        logger.info(f"Ensured unique email index on '{self._collection.name}'")

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self._collection.find_one({"email": email})

    async def find_by_id(self, account_id: str) -> Optional[Dict[str, Any]]:
        """Look up an account by id. Malformed ids simply match nothing."""
        try:
            object_id = ObjectId(account_id)
        except (InvalidId, TypeError):
            logger.debug(f"Rejected malformed account id: {account_id!r}")
            return None
        return await self._collection.find_one({"_id": object_id})

    async def create(self, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        """
        Insert a new account document.

        Raises:
            AccountExistsError: If the email is already taken
        """
        document = {
            "name": name,
            "email": email,
            "password": password_hash,
            "date": datetime.now(timezone.utc),
        }
        try:
            result = await self._collection.insert_one(document)
        except DuplicateKeyError as e:
            raise AccountExistsError(email) from e

        document["_id"] = result.inserted_id
        return document


async def ping(client: AsyncIOMotorClient, settings: Settings) -> None:
    """
    Check that MongoDB answers.

    Raises:
        DatabaseUnavailableError: If the server can't be reached
    """
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        raise DatabaseUnavailableError(settings.mongodb_url, str(e)) from e


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """Create a motor client. No connection is made until the first operation."""
    return AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )
