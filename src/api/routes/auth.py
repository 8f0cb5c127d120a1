"""Authentication routes (register, login)."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from api.config import Settings
from api.dependencies import get_settings, get_user_repo
from api.models import CredentialsRequest, ErrorResponse, TokenResponse
from api.security import create_access_token
from port.user_repository import UserRepository
from services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
@router.post("/register/", response_model=TokenResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def register(
    request: Optional[CredentialsRequest] = None,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Register a new user and log them in.

    Raises:
        ValidationError: 400 if email or password is missing
        DuplicateError: 400 "User already exists"
    """
    request = request or CredentialsRequest()
    user = await auth_service.register(
        repo, request.email, request.password, rounds=settings.bcrypt_rounds
    )
    token = create_access_token(user.id, settings, email=user.email)
    return TokenResponse(token=token)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
@router.post("/login/", response_model=TokenResponse, include_in_schema=False)
async def login(
    request: Optional[CredentialsRequest] = None,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a JWT.

    Raises:
        ValidationError: 400 if email or password is missing
        AuthenticationError: 401 "Invalid credentials", whether the email
            is unknown or the password is wrong
    """
    request = request or CredentialsRequest()
    user = await auth_service.authenticate(
        repo, request.email, request.password, rounds=settings.bcrypt_rounds
    )
    token = create_access_token(user.id, settings, email=user.email)
    return TokenResponse(token=token)
