"""
Password hashing and access-token handling.

- Passwords are hashed with Argon2id through passlib
- Access tokens are HS256 JWTs carrying the user id (`sub`) and email
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from jose.exceptions import JOSEError
from passlib.context import CryptContext

from app.config import get_settings
from app.exceptions import InternalError
from app.logging_config import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unrecognised hash format counts as a mismatch
        logger.warning("Stored password hash could not be verified")
        return False


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token for the given user; lifetime defaults to ACCESS_TOKEN_EXPIRE_MINUTES."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": user_id, "email": email, "exp": expire}
    try:
        return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    except JOSEError as e:
        logger.error(f"Token signing failed: {e}")
        raise InternalError("JWT error") from e


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None if the token is malformed, forged or expired."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None

    if not claims.get("sub") or not claims.get("email"):
        logger.debug("Token rejected: missing sub or email claim")
        return None
    return claims
