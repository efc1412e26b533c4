"""JWT helpers."""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from exchange.core.config import Settings


class TokenError(ValueError):
    """Raised when a bearer token cannot be decoded or has expired."""


def create_access_token(user_id: str, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + expire_delta,
        # Keeps tokens issued within the same second distinct per session row.
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as exc:
        raise TokenError("Token expired") from exc
    except JWTError as exc:
        raise TokenError("Invalid token") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise TokenError("Invalid token")
    return user_id


__all__ = ["TokenError", "create_access_token", "decode_access_token"]
