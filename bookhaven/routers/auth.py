"""
Authentication Router

Handles user authentication endpoints:
- Registration (creates profile, favorite genres and default lists)
- Login (email/password → JWT access token)
- Get current user (from JWT token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Login answers "Invalid credentials" whatever check failed
- Access tokens live 7 days
"""

import logging

from fastapi import APIRouter, Request, status

from bookhaven.dependencies import CurrentUser, DbSession
from bookhaven.schemas.common import APIResponse, ok
from bookhaven.schemas.user import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserSummary,
)
from bookhaven.services.auth import authenticate, issue_token, register_user
from bookhaven.services.rate_limiter import AUTH_LIMIT, limiter
from bookhaven.services.security import access_token_lifetime

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (email/username already exists)"},
    },
)


@router.post(
    "/register",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account with email and password.

    Also creates the profile, the favorite genres and three lists:
    "want to read", "currently reading" and "read".
    """,
)
@limiter.limit(AUTH_LIMIT)
def register(
    request: Request,
    user_data: RegisterRequest,
    db: DbSession,
) -> dict:
    user = register_user(db, user_data)
    return ok(UserResponse.from_user(user), message="User registered successfully")


@router.post(
    "/login",
    response_model=APIResponse[TokenResponse],
    summary="Log in",
    description="Exchange email and password for a bearer token.",
)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> dict:
    app_settings = request.app.state.settings
    user = authenticate(db, credentials.email, credentials.password)
    token = TokenResponse(
        token=issue_token(user, app_settings),
        expires_in=int(access_token_lifetime(app_settings).total_seconds()),
        user=UserSummary.model_validate(user),
    )
    return ok(token, message="Login successful")


@router.get(
    "/me",
    response_model=APIResponse[UserResponse],
    summary="Get current user",
    description="Identity of the user the bearer token belongs to.",
)
def get_me(
    request: Request,
    current_user: CurrentUser,
) -> dict:
    return ok(UserResponse.from_user(current_user))
