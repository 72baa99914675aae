"""
JWT session authentication for the web API.

The session cookie holds an HS256-signed JWT whose "sub" claim is the
user's id. Tokens are issued by the sign-in service; this API only verifies
them.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Request

SESSION_COOKIE = "session"
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24


def _get_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if not secret:
        raise ValueError("JWT_SECRET environment variable not set")
    return secret


def create_jwt(user_id: str, expires_in: timedelta | None = None) -> str:
    """
    Create a signed session token for a user.

    Args:
        user_id: The user's id
        expires_in: Token lifetime (defaults to JWT_EXPIRATION_HOURS)

    Returns:
        Signed JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=JWT_EXPIRATION_HOURS)),
    }
    return jwt.encode(payload, _get_secret(), algorithm=JWT_ALGORITHM)


def verify_jwt(token: str) -> dict | None:
    """
    Verify and decode a session token.

    Returns:
        Decoded payload dict if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(token, _get_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if not payload.get("sub"):
        return None
    return payload


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        HTTPException: 401 if not authenticated or invalid token
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_jwt(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


async def get_optional_user(request: Request) -> dict | None:
    """
    FastAPI dependency to optionally get the current user.

    Returns None if not authenticated instead of raising an exception.
    Used by endpoints that serve both learners and anonymous visitors.
    """
    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None

    return verify_jwt(token)
