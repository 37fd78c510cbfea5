"""Password hashing and JWT access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from starter_backend.errors import InvalidTokenError
from starter_backend.managers.config.config_models import AppSettings

ALGORITHM = "HS256"
TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash; unknown hash formats fail."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    subject: str,
    settings: AppSettings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token for a user id.

    Args:
        subject: User id stored in the "sub" claim
        settings: Provides SECRET_KEY and the default lifetime
        expires_delta: Overrides ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: Dict[str, Any] = {"sub": subject, "iat": now, "exp": expire, "type": TOKEN_TYPE}
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, settings: AppSettings) -> str:
    """Validate a token and return its subject."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Could not validate token") from e

    if payload.get("type") != TOKEN_TYPE or not payload.get("sub"):
        raise InvalidTokenError("Could not validate token")
    return payload["sub"]
