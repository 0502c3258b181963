from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.core.exceptions import InvalidToken, TokenExpired
from app.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def _encode(user: User, token_type: str, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "email": user.email,
        "tenant_id": user.tenant_id,
        "role": user.role.value,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: User) -> str:
    return _encode(
        user,
        ACCESS_TOKEN_TYPE,
        settings.SECRET_KEY,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user: User) -> str:
    return _encode(
        user,
        REFRESH_TOKEN_TYPE,
        settings.REFRESH_SECRET_KEY,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_jwt(token: str, secret: str, expected_type: str) -> dict:
    """
    Decode and validate a signed JWT.

    Args:
        token: Encoded JWT
        secret: Key the token must be signed with
        expected_type: Required value of the 'type' claim

    Returns:
        Decoded token payload with 'sub' (user_id), 'tenant_id', 'role', 'exp'

    Raises:
        TokenExpired: If the token is past its expiry
        InvalidToken: If the signature, format or claims are invalid
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError as e:
        raise InvalidToken(f"Invalid token: {str(e)}")

    # jose only checks expiry when the claim is present
    if payload.get("exp") is None:
        raise InvalidToken("Token missing expiration")

    if payload.get("sub") is None:
        raise InvalidToken("Token missing user identifier")

    if payload.get("type") != expected_type:
        raise InvalidToken("Wrong token type")

    return payload


def decode_access_token(token: str) -> dict:
    return decode_jwt(token, settings.SECRET_KEY, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> dict:
    return decode_jwt(token, settings.REFRESH_SECRET_KEY, REFRESH_TOKEN_TYPE)
