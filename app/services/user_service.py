"""User service - data access for the users collection."""
import logging
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.config import settings
from app.exceptions import InvalidIdentifier, NotFound, StoreError
from app.models.user import InsertionAck, User, UserCreate, UserUpdate
from app.utils.auth import hash_password

logger = logging.getLogger(__name__)

STORE_FAILURES = (PyMongoError, InvalidDocument)


def parse_object_id(user_id: str) -> ObjectId:
    """
    Parse a client-supplied identifier into an ObjectId.

    Raises:
        InvalidIdentifier: If the value is not a 24 character hex string
    """
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        raise InvalidIdentifier(user_id)


class UserService:
    """Service for handling user records."""

    def __init__(self, db, bcrypt_rounds: Optional[int] = None):
        """Initialize service with database connection."""
        self.db = db
        self.users = db[settings.mongo_users_collection]
        if bcrypt_rounds is None:
            bcrypt_rounds = settings.bcrypt_rounds
        self.bcrypt_rounds = bcrypt_rounds

    def _doc_to_user(self, doc: dict) -> User:
        """
        Convert database document to User model.

        Raises:
            StoreError: If the document is missing fields or has bad types
        """
        try:
            return User(
                _id=str(doc["_id"]) if doc.get("_id") is not None else None,
                name=doc["name"],
                email=doc["email"],
                password=doc["password"],
            )
        except (KeyError, ValidationError) as e:
            logger.error("Malformed user document %s: %s", doc.get("_id"), e)
            raise StoreError(f"Malformed user document {doc.get('_id')}") from e

    async def create_user(self, user_create: UserCreate) -> InsertionAck:
        """
        Create a new user.

        The plain text password is replaced by its bcrypt hash before the
        document is inserted; the identifier is assigned by MongoDB.

        Args:
            user_create: User creation data

        Returns:
            Insertion acknowledgment carrying the new user ID

        Raises:
            StoreError: If the insert fails
        """
        user_doc = {
            "name": user_create.name,
            "email": user_create.email,
            "password": hash_password(user_create.password, self.bcrypt_rounds),
        }

        try:
            result = await self.users.insert_one(user_doc)
        except STORE_FAILURES as e:
            logger.error("Failed to insert user: %s", e)
            raise StoreError("Failed to insert user") from e

        logger.info("Created user %s", result.inserted_id)
        return InsertionAck(inserted_id=str(result.inserted_id))

    async def get_user(self, user_id: str) -> User:
        """
        Get user by ID.

        Args:
            user_id: User ID as a hex string

        Returns:
            User object

        Raises:
            InvalidIdentifier: If user_id is not a valid ObjectId
            NotFound: If no user has this ID
            StoreError: If the query fails
        """
        object_id = parse_object_id(user_id)

        try:
            user_doc = await self.users.find_one({"_id": object_id})
        except STORE_FAILURES as e:
            logger.error("Failed to get user %s: %s", user_id, e)
            raise StoreError(f"Failed to get user {user_id}") from e

        if not user_doc:
            logger.info("User %s not found", user_id)
            raise NotFound(user_id)

        return self._doc_to_user(user_doc)

    async def update_user(self, user_id: str, user_update: UserUpdate) -> User:
        """
        Update a user's name, email and password.

        The password is hashed again before it is stored. Missing users are
        not created.

        Args:
            user_id: User ID as a hex string
            user_update: Replacement field values

        Returns:
            Updated user

        Raises:
            InvalidIdentifier: If user_id is not a valid ObjectId
            NotFound: If no user has this ID
            StoreError: If the update fails
        """
        object_id = parse_object_id(user_id)

        update_doc = {
            "name": user_update.name,
            "email": user_update.email,
            "password": hash_password(user_update.password, self.bcrypt_rounds),
        }

        try:
            updated_doc = await self.users.find_one_and_update(
                {"_id": object_id},
                {"$set": update_doc},
                return_document=ReturnDocument.AFTER,
            )
        except STORE_FAILURES as e:
            logger.error("Failed to update user %s: %s", user_id, e)
            raise StoreError(f"Failed to update user {user_id}") from e

        if not updated_doc:
            logger.info("User %s not found for update", user_id)
            raise NotFound(user_id)

        logger.info("Updated user %s", user_id)
        return self._doc_to_user(updated_doc)

    async def delete_user(self, user_id: str) -> User:
        """
        Delete a user.

        Args:
            user_id: User ID as a hex string

        Returns:
            The user as it was stored before deletion

        Raises:
            InvalidIdentifier: If user_id is not a valid ObjectId
            NotFound: If no user has this ID
            StoreError: If the delete fails
        """
        object_id = parse_object_id(user_id)

        try:
            deleted_doc = await self.users.find_one_and_delete({"_id": object_id})
        except STORE_FAILURES as e:
            logger.error("Failed to delete user %s: %s", user_id, e)
            raise StoreError(f"Failed to delete user {user_id}") from e

        if not deleted_doc:
            logger.info("User %s not found for delete", user_id)
            raise NotFound(user_id)

        logger.info("Deleted user %s", user_id)
        return self._doc_to_user(deleted_doc)

    async def list_users(self) -> list[User]:
        """
        List every user in the collection.

        Order is whatever MongoDB returns and may change between calls.

        Returns:
            List of users, empty if the collection is empty

        Raises:
            StoreError: If the query fails
        """
        try:
            cursor = self.users.find({})
            user_docs = await cursor.to_list(length=None)
        except STORE_FAILURES as e:
            logger.error("Failed to list users: %s", e)
            raise StoreError("Failed to list users") from e

        return [self._doc_to_user(doc) for doc in user_docs]
