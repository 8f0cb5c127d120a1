"""Auth service — credential and password-hash business logic.

Pure business logic with no HTTP dependencies. bcrypt runs in a worker
thread so hashing never stalls the event loop.
Raises domain errors that the API boundary maps to HTTP status codes.
"""

import asyncio
import logging
from functools import lru_cache

import bcrypt

from domain.model.errors import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from domain.model.user import User, normalize_email
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

MISSING_FIELDS_MESSAGE = "Email and password are required"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash password using bcrypt with a fresh salt.

    Args:
        password: Plain text password
        rounds: bcrypt work factor

    Returns:
        Bcrypt hash as string, salt embedded
    """
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash (constant-time compare)."""
    encoded = plain.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


@lru_cache(maxsize=None)
def _decoy_hash(rounds: int) -> str:
    """Hash checked when the email is unknown, so both login failures cost one bcrypt run."""
    return hash_password("decoy-password", rounds)


def _require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    if not email or not email.strip() or not password or not password.strip():
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    return normalize_email(email), password


async def register(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: email or password missing
        DuplicateError: email already registered (also raised by the store
            when a concurrent registration wins the race)
    """
    email, password = _require_credentials(email, password)

    if await repo.get_by_email(email):
        raise DuplicateError("User already exists")

    password_hash = await asyncio.to_thread(hash_password, password, rounds)
    user = await repo.create(email=email, password_hash=password_hash)
    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user


async def authenticate(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password fail with the same error and the same
    bcrypt cost.

    Raises:
        ValidationError: email or password missing
        AuthenticationError: invalid credentials
    """
    email, password = _require_credentials(email, password)

    user = await repo.get_by_email(email)
    stored_hash = user.password_hash if user else await asyncio.to_thread(_decoy_hash, rounds)
    matches = await asyncio.to_thread(verify_password, password, stored_hash)
    if not user or not matches:
        logger.info("Login failed", extra={"email": email})
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("User logged in", extra={"userId": user.id})
    return user


async def update_user(
    repo: UserRepository,
    user_id: str,
    email: str | None = None,
    password: str | None = None,
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Apply account changes.

    The password hash is recomputed only when ``password`` is given; any
    other update leaves the stored hash untouched.

    Raises:
        ValidationError: a supplied field is blank
        NotFoundError: user does not exist
        DuplicateError: new email already taken
    """
    fields = {}
    if email is not None:
        if not email.strip():
            raise ValidationError("Email must not be empty")
        fields['email'] = normalize_email(email)
    if password is not None:
        if not password.strip():
            raise ValidationError("Password must not be empty")
        fields['password_hash'] = await asyncio.to_thread(hash_password, password, rounds)

    if not fields:
        user = await repo.get_by_id(user_id)
    else:
        user = await repo.update(user_id, fields)
    if not user:
        raise NotFoundError("User not found")
    return user
