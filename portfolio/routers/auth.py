import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portfolio.dao import UserDAO
from portfolio.deps import get_current_user, get_db
from portfolio.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    VerifyResponse,
)
from portfolio.utils.jwt import create_user_token
from portfolio.utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create a user account. The first account ever registered becomes admin.
    """
    dao = UserDAO(db)
    if dao.exists(email=body.email, username=body.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists"
        )
    role = "admin" if dao.count() == 0 else "user"
    user = dao.create(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=role,
    )
    logger.info("Registered user %s with role %s", user.username, user.role)
    return AuthResponse(
        message="User created successfully",
        token=create_user_token(user.id, user.username, user.role),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate by email and password and return a bearer token.
    """
    user = UserDAO(db).get_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    logger.info("User %s logged in", user.username)
    return AuthResponse(
        message="Login successful",
        token=create_user_token(user.id, user.username, user.role),
        user=UserResponse.model_validate(user),
    )


@router.get("/verify", response_model=VerifyResponse)
def verify(
    user: Annotated[dict[str, Any], Depends(get_current_user)],
) -> VerifyResponse:
    return VerifyResponse(valid=True, user=user)
