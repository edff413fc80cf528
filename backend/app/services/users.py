# backend/app/services/users.py
import logging

from backend.app.core.errors import AuthenticationError, ConflictError, ValidationError
from backend.app.models.user import User
from backend.app.repositories.users import UserRepository
from backend.app.security import hashing

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def change_username(self, user: User, username: str) -> User:
        existing = await self.users.find_by_username(username)
        if existing is not None and existing.id != user.id:
            raise ConflictError("Username already exists")
        user.username = username
        return await self.users.save(user)

    async def change_password(self, user: User, current_password: str,
                              new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            raise ValidationError("New password and confirmation do not match")
        if not hashing.verify_password(current_password, user.hashed_password):
            raise AuthenticationError("Current password is incorrect")
        if hashing.verify_password(new_password, user.hashed_password):
            raise ValidationError("New password must differ from the current one")

        user.hashed_password = hashing.get_password_hash(new_password)
        # Existing sessions must log in again
        user.refresh_token = None
        await self.users.save(user)
        logger.info("Password changed for user %s", user.id)
