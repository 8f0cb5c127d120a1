"""In-memory implementation of UserRepository for testing."""

from datetime import datetime, timezone

from bson import ObjectId

from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    async def create(self, email: str, password_hash: str) -> User:
        if any(u.email == email for u in self.store.values()):
            raise DuplicateError("User already exists")

        user_id = str(ObjectId())
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        self.store[user_id] = user
        return user

    async def update(self, user_id: str, fields: dict) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        if 'email' in fields and any(
            u.email == fields['email'] for u in self.store.values() if u.id != user_id
        ):
            raise DuplicateError("User already exists")

        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        return user

    # ── read operations ──────────────────────────────────────

    async def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    async def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)
