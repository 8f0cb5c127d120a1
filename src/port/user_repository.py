from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Emails are passed already normalized. Store failures raise StoreError.
    """
    async def create(self, email: str, password_hash: str) -> User:
        """Create a new user. Raise DuplicateError if the email is taken."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    async def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    async def update(self, user_id: str, fields: dict) -> User | None:
        """Set the given fields. Return the updated User or None if not found."""
        ...
