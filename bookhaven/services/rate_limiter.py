"""
Rate Limiting Service

slowapi limiter shared by every router. Clients are told apart by IP.
Proxy headers are honoured only when settings.trust_proxy_headers is set.

Tiers (per client IP):
- Default, every endpoint: settings.rate_limit_default
- Register and login: settings.rate_limit_auth (credential stuffing)
- Writes: settings.rate_limit_write

Counters live in Redis so several API processes share them. With
RATE_LIMIT_ENABLED=false the limiter is inert and Redis is never touched.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from bookhaven.config import Settings, get_settings
from bookhaven.schemas.common import fail

logger = logging.getLogger(__name__)

settings = get_settings()

DEFAULT_RETRY_AFTER = 60


def get_client_ip(request: Request) -> str:
    """
    Client IP used as the rate-limit key.

    Behind a trusted proxy: X-Forwarded-For (first hop), then X-Real-IP,
    then the socket. Otherwise the socket address only.
    """
    app_settings = getattr(request.app.state, "settings", None)
    if app_settings is None or not app_settings.trust_proxy_headers:
        return get_remote_address(request)

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # "client, proxy1, proxy2"
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter(app_settings: Settings) -> Limiter:
    enabled = app_settings.rate_limit_enabled
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[app_settings.rate_limit_default],
        storage_uri=app_settings.redis_url if enabled else "memory://",
        strategy="fixed-window",
        enabled=enabled,
    )
    logger.info(
        f"Rate limiter {'enabled' if enabled else 'disabled'} "
        f"(default {app_settings.rate_limit_default}, auth {app_settings.rate_limit_auth}, "
        f"writes {app_settings.rate_limit_write})"
    )
    return limiter


# Route decorators are applied at import time, so the limiter and its tier
# strings have to exist before any router module loads.
limiter = create_limiter(settings)
AUTH_LIMIT = settings.rate_limit_auth
WRITE_LIMIT = settings.rate_limit_write


def configure_limiter(app_settings: Settings) -> Limiter:
    """
    Switch the shared limiter on or off for the application being built.

    Storage and tier strings stay those of the process settings.
    """
    limiter.enabled = app_settings.rate_limit_enabled
    return limiter


def retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Length of the window that was exhausted, e.g. 60 for "10/minute"."""
    limit = getattr(exc, "limit", None)
    item = getattr(limit, "limit", None)
    if item is None:
        return DEFAULT_RETRY_AFTER
    return int(item.get_expiry())


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the standard envelope, with Retry-After and X-RateLimit-Limit."""
    limit_detail = str(exc.detail)
    logger.warning(f"Rate limit exceeded for {get_client_ip(request)} on {request.url.path}: {limit_detail}")

    return JSONResponse(
        status_code=429,
        content=fail("Too many requests", message=f"Rate limit exceeded: {limit_detail}"),
        headers={
            "Retry-After": str(retry_after_seconds(exc)),
            "X-RateLimit-Limit": limit_detail,
        },
    )
