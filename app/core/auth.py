"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (every token carries a jti)
- Token revocation for sign-out
- FastAPI dependencies for protected routes
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import text

from app.core.config import get_settings
from app.db.postgres import get_db_session

settings = get_settings()

MIN_PASSWORD_LENGTH = 6

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; auto_error off so /auth/session can answer anonymously
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with a unique jti."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def is_token_revoked(jti: str) -> bool:
    with get_db_session() as db:
        result = db.execute(
            text("SELECT 1 FROM revoked_tokens WHERE jti = :jti"),
            {"jti": jti}
        )
        return result.fetchone() is not None


def revoke_token(jti: str, user_id: int, expires_at: Optional[datetime] = None) -> None:
    """
    Record a token id as signed out. Revoking twice is a no-op.
    Rows for tokens that have expired on their own are pruned here.
    """
    now = datetime.utcnow()
    with get_db_session() as db:
        db.execute(
            text("DELETE FROM revoked_tokens WHERE expires_at < :now"),
            {"now": now}
        )
        db.execute(
            text("""
                INSERT INTO revoked_tokens (jti, user_id, revoked_at, expires_at)
                VALUES (:jti, :user_id, :revoked_at, :expires_at)
                ON CONFLICT (jti) DO NOTHING
            """),
            {"jti": jti, "user_id": user_id, "revoked_at": now, "expires_at": expires_at}
        )


def resolve_user(token: Optional[str]) -> Optional[dict]:
    """
    Resolve a bearer token to the active user it belongs to.
    Returns None for missing, invalid, expired or revoked tokens.
    """
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    jti = payload.get("jti")
    if not user_id or not jti:
        return None

    if is_token_revoked(jti):
        return None

    with get_db_session() as db:
        result = db.execute(
            text("""
                SELECT user_id, email, full_name, is_active, created_at
                FROM users WHERE user_id = :id
            """),
            {"id": int(user_id)}
        )
        user = result.fetchone()

    if not user:
        return None

    return {
        "user_id": user[0],
        "email": user[1],
        "full_name": user[2],
        "is_active": bool(user[3]),
        "created_at": user[4],
        "jti": jti,
        "token_expires_at": datetime.utcfromtimestamp(payload["exp"]) if payload.get("exp") else None,
    }


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[dict]:
    """Dependency - current user or None, never raises for anonymous access."""
    user = resolve_user(credentials.credentials if credentials else None)
    if user and not user["is_active"]:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = resolve_user(credentials.credentials if credentials else None)
    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return user
