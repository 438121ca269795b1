"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

WHY Dependency Injection?
=========================
1. Reusability: Write once, use in many routes
2. Testing: Easy to override in tests (app.dependency_overrides)
3. Separation of Concerns: Routes focus on business logic
4. Lifecycle Management: Resources built once in create_app()/lifespan
   are handed to each request from app.state

Common Dependency Patterns:
- Database sessions (per-request)
- Authentication (resolve the bearer token to a user)
- The external catalog client
- Pagination parameters
"""

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bookhaven.config import Settings
from bookhaven.database import get_db
from bookhaven.exceptions import UnauthorizedError, UpstreamError
from bookhaven.models import User
from bookhaven.services.auth import resolve_user
from bookhaven.services.google_books import GoogleBooksClient

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def list_booklists(db: Session = Depends(get_db)):
#
# You can write:
#   def list_booklists(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Application Settings
# =============================================================================
def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - limit: How many items per page
    - skip: Calculated offset for database query
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=10,
            ge=1,
            le=50,
            description="Number of items per page (max 50)",
            examples=[10, 20],
        ),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        """Page 1 → skip 0, page 2 → skip limit, and so on."""
        return (self.page - 1) * self.limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# External Catalog
# =============================================================================
def get_catalog(request: Request) -> GoogleBooksClient:
    """
    The catalog client built in the app lifespan.

    Raises:
        UpstreamError: The application started without a catalog client
    """
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise UpstreamError("Book catalog unavailable")
    return catalog


def get_optional_catalog(request: Request) -> GoogleBooksClient | None:
    """The catalog client, or None; for features that work without it."""
    return getattr(request.app.state, "catalog", None)


Catalog = Annotated[GoogleBooksClient, Depends(get_catalog)]
OptionalCatalog = Annotated[GoogleBooksClient | None, Depends(get_optional_catalog)]


# =============================================================================
# JWT Authentication
# =============================================================================
# OAuth2PasswordBearer extracts "Authorization: Bearer <token>" and adds the
# "Authorize" button to Swagger UI. auto_error=False lets a missing header
# reach get_current_user, which answers with the standard envelope.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


def get_current_user(
    db: DbSession,
    app_settings: AppSettings,
    token: str | None = Depends(oauth2_scheme),
) -> User:
    """
    Resolve the caller from the bearer token.

    Raises:
        UnauthorizedError: Missing, malformed, expired or invalid token, or
            the user no longer exists
    """
    user = resolve_user(db, token, app_settings)
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user


def get_optional_current_user(
    db: DbSession,
    app_settings: AppSettings,
    token: str | None = Depends(oauth2_scheme),
) -> User | None:
    """The caller if a valid token was sent, None otherwise."""
    return resolve_user(db, token, app_settings)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_current_user)]
