"""JWT issuance, verification and the bearer-token gate.

Gate outcomes per request:
    no header / wrong scheme / empty token  -> 401 "Unauthorized"
    expired                                 -> 401 "Token expired"
    bad signature or malformed              -> 401 "Invalid token"
    no user id claim                        -> 401 "Invalid token: missing user id"
    otherwise the identity is attached to ``request.state.identity``
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt

from api.config import Settings
from api.dependencies import get_settings
from domain.model.errors import AuthenticationError, InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

UNAUTHORIZED_MESSAGE = "Unauthorized"
TOKEN_EXPIRED_MESSAGE = "Token expired"
INVALID_TOKEN_MESSAGE = "Invalid token"
MISSING_USER_ID_MESSAGE = "Invalid token: missing user id"


@dataclass(frozen=True)
class AuthIdentity:
    """Decoded token identity. ``email`` is informational only."""
    user_id: str
    email: Optional[str] = None


def create_access_token(
    user_id: str,
    settings: Settings,
    email: Optional[str] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT for the user.

    Args:
        user_id: Subject of the token
        settings: Supplies secret, algorithm and default lifetime
        email: Optional informational claim
        expires_in: Lifetime override (may be zero or negative)

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    lifetime = settings.jwt_expiration if expires_in is None else expires_in
    payload = {
        "sub": user_id,
        "id": user_id,
        "iat": now,
        "exp": now + lifetime,
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> AuthIdentity:
    """Verify signature, expiry and claim shape.

    Raises:
        TokenExpiredError: token is past ``exp``
        InvalidTokenError: bad signature, malformed, or missing user id
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        logger.debug("JWT rejected: expired")
        raise TokenExpiredError(TOKEN_EXPIRED_MESSAGE)
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        raise InvalidTokenError(INVALID_TOKEN_MESSAGE)

    user_id = payload.get("sub") or payload.get("id")
    if user_id is None or not str(user_id).strip():
        raise InvalidTokenError(MISSING_USER_ID_MESSAGE)

    email = payload.get("email")
    return AuthIdentity(user_id=str(user_id).strip(), email=email if isinstance(email, str) else None)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token part of an Authorization header.

    Raises:
        AuthenticationError: header missing, not "Bearer ", or token blank
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError(UNAUTHORIZED_MESSAGE)
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError(UNAUTHORIZED_MESSAGE)
    return token


async def get_current_identity(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AuthIdentity:
    """Bearer gate dependency (required). Raises 401 through the error translator."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    identity = verify_token(token, settings)
    request.state.identity = identity
    return identity
