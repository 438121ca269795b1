"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - The database engine and session factory are built here and kept on
     app.state, so tests can build an app against their own database

2. Lifespan Events
   - startup: connect the Redis cache and build the catalog client
   - shutdown: close both and dispose of the engine

3. Middleware Stack
   - Rate limiting (slowapi)
   - CORS
   - Request logging

4. Exception Handlers
   - Every error leaves the API in the same envelope:
     {"success": false, "data": null, "error": "...", "message": ...}
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookhaven import __version__
from bookhaven.config import Settings, get_settings
from bookhaven.database import create_db_engine, create_session_factory, create_tables
from bookhaven.exceptions import AppError
from bookhaven.routers import (
    auth_router,
    book_lists_router,
    books_router,
    comments_router,
    posts_router,
    ratings_router,
    users_router,
)
from bookhaven.schemas.common import fail, ok
from bookhaven.services.cache import connect_cache
from bookhaven.services.google_books import GoogleBooksClient
from bookhaven.services.rate_limiter import configure_limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    app_settings: Settings = app.state.settings

    # ----- STARTUP -----
    logger.info(f"Starting {app_settings.app_name}...")
    logger.info(f"Environment: {app_settings.environment}, debug: {app_settings.debug}")

    if app_settings.is_sqlite:
        create_tables(app.state.engine)
        logger.info("SQLite database detected - tables created")

    app.state.cache = connect_cache(app_settings)
    if app.state.cache is None:
        logger.warning("Redis unavailable - caching disabled")

    app.state.catalog = GoogleBooksClient.from_settings(app_settings, cache=app.state.cache)
    logger.info(f"Catalog client ready: {app_settings.google_books_api_url}")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {app_settings.app_name}...")

    app.state.catalog.close()
    if app.state.cache is not None:
        app.state.cache.close()
    app.state.engine.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build with (defaults to get_settings())

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description="""
## BookHaven API

Backend for the BookHaven reading community.

### Features
- **Accounts**: Registration, login, profiles and favorite genres
- **Book lists**: Personal shelves of books from the catalog
- **Ratings**: One rating per book per member, with live averages
- **Recommendations**: Unseen books from your favorite genres
- **Community**: Book comments and posts

### Authentication
Send `Authorization: Bearer <token>` with the token from `/auth/login`.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Explicit resources
    # -------------------------------------------------------------------------
    app.state.settings = app_settings
    app.state.engine = create_db_engine(app_settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.cache = None
    app.state.catalog = None

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = configure_limiter(app_settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Request Logging
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Map service errors to their status code."""
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(exc.message),
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Unknown routes, wrong methods and other framework errors."""
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Malformed or missing input is a 400.

        The first problem is reported in `error`; the field path is dropped
        of its "body"/"query"/"path" prefix.
        """
        errors = exc.errors()
        first = errors[0] if errors else {"loc": (), "msg": "Invalid input"}
        field = ".".join(
            str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")
        )
        message = f"{field}: {first['msg']}" if field else first["msg"]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=fail(message),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=fail("A database error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        message = str(exc) if app_settings.debug else None
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=fail("An internal error occurred.", message=message),
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = f"/api/{app_settings.api_version}"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(book_lists_router, prefix=api_prefix)
    app.include_router(ratings_router, prefix=api_prefix)
    app.include_router(comments_router, prefix=api_prefix)
    app.include_router(posts_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Service Endpoints
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check(request: Request) -> dict:
        """
        Health check endpoint for load balancers and monitoring.

        Returns API status including cache connectivity and rate limiting.
        """
        cache = request.app.state.cache
        return ok(
            {
                "status": "healthy",
                "app": app_settings.app_name,
                "version": __version__,
                "cache": cache.stats() if cache is not None else {"status": "disabled"},
                "rate_limiting": {
                    "enabled": app_settings.rate_limit_enabled,
                    "default_limit": app_settings.rate_limit_default,
                },
            }
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Server information and endpoint map.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return ok(
            {
                "name": app_settings.app_name,
                "version": __version__,
                "environment": app_settings.environment,
                "docs": "/docs",
                "health": "/health",
                "endpoints": {
                    "auth": [f"{api_prefix}/auth/register", f"{api_prefix}/auth/login", f"{api_prefix}/auth/me"],
                    "users": [
                        f"{api_prefix}/users/profile",
                        f"{api_prefix}/users/{{user_id}}/profile",
                        f"{api_prefix}/users/recommendations",
                    ],
                    "books": [f"{api_prefix}/books/search", f"{api_prefix}/books/{{book_id}}"],
                    "booklists": [
                        f"{api_prefix}/booklists",
                        f"{api_prefix}/booklists/{{list_id}}",
                        f"{api_prefix}/booklists/{{list_id}}/books",
                    ],
                    "ratings": [f"{api_prefix}/ratings"],
                    "comments": [f"{api_prefix}/comments"],
                    "posts": [
                        f"{api_prefix}/posts",
                        f"{api_prefix}/posts/{{post_id}}",
                        f"{api_prefix}/posts/{{post_id}}/comments",
                    ],
                },
            },
            message=f"Welcome to {app_settings.app_name}",
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookhaven.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m bookhaven.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookhaven.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
