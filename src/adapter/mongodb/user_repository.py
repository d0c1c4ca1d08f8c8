"""MongoDB implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError
from domain.model.user import User

logger = getLogger(__name__)


class MongoUserRepository:
    """Users collection backed repository.

    The unique index on `email` is the authority on uniqueness: a write that
    violates it raises DuplicateError. Any other driver error is logged and
    re-raised unchanged.
    """

    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        """BSON dates are UTC; a client without tz_aware returns them naive."""
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            first_name=doc['first_name'],
            last_name=doc['last_name'],
            email=doc['email'],
            created_at=self._as_utc(doc['created_at']),
            updated_at=self._as_utc(doc['updated_at']),
        )

    def _to_document(self, user: User) -> dict:
        return {
            '_id': user.id,
            'first_name': user.first_name,
            'last_name': user.last_name,
            'email': user.email,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }

    # ── write operations ─────────────────────────────────────

    def add(self, user: User) -> User:
        """Insert a new user document."""
        doc = self._to_document(user)
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            logger.warning("User insert rejected: email already exists", extra={"email": user.email})
            raise DuplicateError(user.email)
        except PyMongoError as e:
            logger.error("Failed to add user", extra={"userId": user.id, "error": str(e)})
            raise

        logger.info("User added", extra={"userId": user.id})
        return self._to_domain(doc)

    def update(self, user: User) -> User:
        """Replace the stored user document."""
        doc = self._to_document(user)
        try:
            self.collection.replace_one({'_id': user.id}, doc)
        except DuplicateKeyError:
            logger.warning("User update rejected: email already exists", extra={"userId": user.id, "email": user.email})
            raise DuplicateError(user.email)
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user.id, "error": str(e)})
            raise

        logger.debug("User updated", extra={"userId": user.id})
        return self._to_domain(doc)

    def delete(self, user_id: str) -> None:
        try:
            result = self.collection.delete_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise

        if result.deleted_count == 0:
            logger.warning("User not found for deletion", extra={"userId": user_id})

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise
        return self._to_domain(doc) if doc else None

    def get_all(self) -> list[User]:
        try:
            docs = list(self.collection.find({}))
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"error": str(e)})
            raise
        return [self._to_domain(doc) for doc in docs]

    def exists(self, user_id: str) -> bool:
        try:
            return self.collection.count_documents({'_id': user_id}, limit=1) > 0
        except PyMongoError as e:
            logger.error("Failed to check user existence", extra={"userId": user_id, "error": str(e)})
            raise
