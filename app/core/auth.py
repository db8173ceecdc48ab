from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.settings import get_settings

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


def create_access_token(
    user_id: str, email: Optional[str] = None, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: Identifier stored in the ``sub`` claim
        email: Optional email claim
        expires_delta: Optional custom expiration time

    Returns:
        str: The encoded JWT token
    """
    secret = get_settings().jwt_secret_key
    if not secret:
        raise ValueError("JWT_SECRET_KEY environment variable is required")

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": user_id, "exp": expire}
    if email:
        to_encode["email"] = email
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token to verify

    Returns:
        Optional[dict]: The claims if the token is valid and carries a subject, None otherwise
    """
    secret = get_settings().jwt_secret_key
    if not secret:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
