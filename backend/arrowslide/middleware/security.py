"""
Arrow Slide - Security Middleware

Rate limiting, request size guard, security headers.
"""

from typing import Callable

from fastapi import HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import settings

__all__ = ["limiter", "validate_json_size", "add_security_headers"]

MAX_BODY_BYTES = 1024 * 100


# ============================================
# RATE LIMITER
# ============================================

limiter = Limiter(key_func=get_remote_address)


# ============================================
# REQUEST VALIDATORS
# ============================================

async def validate_json_size(request: Request):
    """Reject bodies over MAX_BODY_BYTES (100KB)."""
    content_length = request.headers.get("content-length")

    if content_length and content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Request too large"
        )


# ============================================
# SECURITY HEADERS MIDDLEWARE
# ============================================

async def add_security_headers(request: Request, call_next: Callable):
    """Adds security headers to every response."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    if settings.is_production:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    if not settings.DEBUG:
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

    return response
