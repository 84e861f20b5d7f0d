"""
Bearer tokens for portfolio users.

Tokens are HS256-signed with ``JWT_SECRET_KEY`` and carry the user id in
``sub`` together with the ``username`` and ``role`` claims that the admin
checks read.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import HTTPException, status
from jwt import PyJWTError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7


def get_secret_key() -> str:
    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        msg = "JWT_SECRET_KEY not set in environment"
        raise RuntimeError(msg)
    return secret


def create_access_token(
    claims: dict[str, Any], lifetime: timedelta | None = None
) -> str:
    """Sign claims with an ``exp`` of now plus lifetime (a week by default)."""
    expires_at = datetime.now(UTC) + (
        lifetime or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode({**claims, "exp": expires_at}, get_secret_key(), algorithm=ALGORITHM)


def create_user_token(user_id: int, username: str, role: str) -> str:
    return create_access_token({"sub": str(user_id), "username": username, "role": role})


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token and return its claims. Expired or tampered tokens are a 401.
    """
    try:
        return jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except PyJWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from exc
