"""Password hashing and access token issuance."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from taskboard.config import get_settings
from taskboard.exceptions import AuthenticationError

settings = get_settings()


def hash_password(password: str) -> str:
    """Salted hash in werkzeug's ``method$salt$hash`` format."""
    return generate_password_hash(password, method=settings.password_hash_method)


def verify_password(password: str, encoded: str) -> bool:
    return check_password_hash(encoded, password)


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.jwt_access_token_expire_minutes
        )

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> int:
    """Return the user id carried by a valid access token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        raise AuthenticationError("Invalid token")

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access" or not str(user_id).isdigit():
        raise AuthenticationError("Invalid token")
    return int(user_id)
