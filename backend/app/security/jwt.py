# backend/app/security/jwt.py
"""
Access / refresh token helpers (python-jose).

Access tokens are short lived and signed with SECRET_KEY.
Refresh tokens live REFRESH_TOKEN_EXPIRE_DAYS and are signed with
REFRESH_SECRET_KEY, so one can never be used in place of the other.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from backend.app.core.config import Settings, settings as default_settings
from backend.app.core.errors import AuthenticationError

ACCESS = "access"
REFRESH = "refresh"


def _encode(data: Dict[str, Any], secret: str, algorithm: str, expires_delta: timedelta, token_type: str) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode.update({"exp": now + expires_delta, "iat": now, "type": token_type})
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None,
        settings: Settings = default_settings,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, settings.SECRET_KEY, settings.ALGORITHM, expires_delta, ACCESS)


def create_refresh_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None,
        settings: Settings = default_settings,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    # jti keeps two refresh tokens issued in the same second distinct
    data = {**data, "jti": uuid.uuid4().hex}
    return _encode(data, settings.REFRESH_SECRET_KEY, settings.ALGORITHM, expires_delta, REFRESH)


def decode_token(token: str, token_type: str = ACCESS, settings: Settings = default_settings) -> Dict[str, Any]:
    """
    Decode and validate a token of the given type.

    Raises:
        AuthenticationError: bad signature, expired, wrong type or no subject
    """
    secret = settings.SECRET_KEY if token_type == ACCESS else settings.REFRESH_SECRET_KEY
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise AuthenticationError() from exc

    if payload.get("type") != token_type or not payload.get("sub"):
        raise AuthenticationError()
    return payload
