from collections.abc import Generator
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from portfolio.database import SessionLocal
from portfolio.storage import MediaStorage, get_storage_backend
from portfolio.utils.jwt import decode_access_token

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),  # noqa: B008
) -> dict[str, Any]:
    """
    Dependency to get the current user from a JWT bearer token.
    Raises 401 if the token is invalid or missing.
    """
    return decode_access_token(credentials.credentials)


def require_admin(
    user: Annotated[dict[str, Any], Depends(get_current_user)],
) -> dict[str, Any]:
    """
    Dependency that only lets admin users through. Raises 403 otherwise.
    """
    if user.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session and closes it when done.
    Yields:
        Session: SQLAlchemy database session
    """
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> MediaStorage:
    """
    Dependency that provides the storage backend configured for this deployment.
    """
    return get_storage_backend()
