"""
Authentication Routes

POST /auth/register - Sign up
POST /auth/login - Sign in and get JWT token
POST /auth/logout - Sign out (revokes the presented token)
GET /auth/me - Get current user info
GET /auth/session - Current session state (never 401)
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from app.db.postgres import get_db_session
from app.core.auth import (
    MIN_PASSWORD_LENGTH, hash_password, verify_password, create_access_token,
    get_current_user, get_optional_user, revoke_token
)
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, SessionResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _user_response(user: dict) -> UserResponse:
    return UserResponse(
        user_id=user["user_id"], email=user["email"],
        full_name=user["full_name"], created_at=user["created_at"]
    )


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Create a new account.

    After registration, login to get an access token.
    """
    if request.password != request.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    with get_db_session() as db:
        result = db.execute(
            text("SELECT user_id FROM users WHERE email = :email"),
            {"email": request.email}
        )
        if result.fetchone():
            raise HTTPException(status_code=400, detail="Email already registered")

        db.execute(
            text("""
                INSERT INTO users (email, password_hash, full_name)
                VALUES (:email, :password_hash, :full_name)
            """),
            {
                "email": request.email,
                "password_hash": hash_password(request.password),
                "full_name": request.full_name
            }
        )

    logger.info("Registered new account %s", request.email)
    return MessageResponse(message="Registration successful! Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        result = db.execute(
            text("SELECT user_id, password_hash, full_name, is_active FROM users WHERE email = :email"),
            {"email": request.email}
        )
        user = result.fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id, password_hash, full_name, is_active = user

    if not verify_password(request.password, password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": str(user_id)})

    return TokenResponse(access_token=token, user_id=user_id, full_name=full_name)


@router.post("/logout", response_model=MessageResponse)
async def logout(user: dict = Depends(get_current_user)):
    """Revoke the token used for this request."""
    revoke_token(user["jti"], user["user_id"], user["token_expires_at"])
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return _user_response(user)


@router.get("/session", response_model=SessionResponse)
async def get_session(user: Optional[dict] = Depends(get_optional_user)):
    """Session state for clients deciding between landing and home."""
    if not user:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, user=_user_response(user))
