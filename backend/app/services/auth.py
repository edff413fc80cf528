# backend/app/services/auth.py
"""
Login, token refresh and logout.

Only one refresh token per user is valid at a time: it is stored on the
user row and replaced on every login / refresh, cleared on logout.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from backend.app.core.config import Settings, settings as default_settings
from backend.app.core.errors import AuthenticationError, ConflictError
from backend.app.models.user import User
from backend.app.repositories.users import UserRepository
from backend.app.security import hashing, jwt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class LogoutResult:
    """
    Outcome of a best-effort logout.

    Logout never fails for the caller. `revoked` tells whether a stored
    refresh token was actually cleared; `reason` says why not.
    """
    revoked: bool
    reason: Optional[str] = None


class AuthService:
    def __init__(self, users: UserRepository, settings: Settings = default_settings):
        self.users = users
        self.settings = settings

    async def register(self, username: str, password: str) -> User:
        if await self.users.find_by_username(username):
            raise ConflictError("Username already exists")
        user = User(username=username, hashed_password=hashing.get_password_hash(password))
        user = await self.users.save(user)
        logger.info("User %s registered", user.id)
        return user

    async def _issue_tokens(self, user: User) -> TokenPair:
        claims = {"sub": user.id, "username": user.username}
        pair = TokenPair(
            access_token=jwt.create_access_token(claims, settings=self.settings),
            refresh_token=jwt.create_refresh_token(claims, settings=self.settings),
        )
        user.refresh_token = pair.refresh_token
        await self.users.save(user)
        return pair

    async def login(self, username: str, password: str) -> TokenPair:
        user = await self.users.find_by_username(username)
        # Same error for unknown user and wrong password
        if user is None or not user.is_active or not hashing.verify_password(password, user.hashed_password):
            logger.info("Failed login for username %r", username)
            raise AuthenticationError("Incorrect username or password")
        return await self._issue_tokens(user)

    async def refresh(self, refresh_token: str) -> TokenPair:
        payload = jwt.decode_token(refresh_token, jwt.REFRESH, settings=self.settings)
        user = await self.users.find_by_id(payload["sub"])
        if user is None or not user.is_active or user.refresh_token != refresh_token:
            raise AuthenticationError("Invalid refresh token")
        return await self._issue_tokens(user)

    async def logout(self, refresh_token: str) -> LogoutResult:
        try:
            payload = jwt.decode_token(refresh_token, jwt.REFRESH, settings=self.settings)
        except AuthenticationError:
            logger.debug("Logout with invalid refresh token ignored")
            return LogoutResult(revoked=False, reason="invalid_token")

        user = await self.users.find_by_id(payload["sub"])
        if user is None:
            return LogoutResult(revoked=False, reason="unknown_user")
        if user.refresh_token != refresh_token:
            return LogoutResult(revoked=False, reason="not_current")

        user.refresh_token = None
        await self.users.save(user)
        logger.info("User %s logged out", user.id)
        return LogoutResult(revoked=True)
