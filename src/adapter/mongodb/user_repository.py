"""MongoDB implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, StoreError
from domain.model.user import User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: AsyncDatabase):
        self.collection = db[USERS_COLLECTION_NAME]

    async def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique email index is what settles two concurrent registrations
        of the same address.
        """
        from adapter.mongodb.indexes import create_index_safe

        try:
            await create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=str(doc['_id']),
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    async def create(self, email: str, password_hash: str) -> User:
        """Insert a new user document and return the User."""
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': ObjectId(),
            'email': email,
            'password_hash': password_hash,
            'created_at': now,
            'updated_at': now,
        }
        try:
            await self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("User already exists")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreError() from e

        user = self._to_domain(user_doc)
        logger.info("User created", extra={"userId": user.id, "email": email})
        return user

    async def update(self, user_id: str, fields: dict) -> User | None:
        """Set the given fields and bump updated_at."""
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        try:
            doc = await self.collection.find_one_and_update(
                {'_id': oid},
                {'$set': {**fields, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateError("User already exists")
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise StoreError() from e

        return self._to_domain(doc) if doc else None

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = await self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None

    async def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        try:
            doc = await self.collection.find_one({'_id': oid})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreError() from e
        return self._to_domain(doc) if doc else None
