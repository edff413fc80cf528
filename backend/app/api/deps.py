# backend/app/api/deps.py
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import VaultConfig, settings
from backend.app.core.errors import AuthenticationError, ConfigurationError
from backend.app.db.base import get_db
from backend.app.models.user import User
from backend.app.repositories.bindings import SqlAlchemyBindingStore
from backend.app.repositories.platforms import PlatformRepository
from backend.app.repositories.users import UserRepository
from backend.app.security import jwt
from backend.app.services.auth import AuthService
from backend.app.services.platforms import PlatformService
from backend.app.services.users import UserService
from backend.app.services.vault import BindingVault

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        token: str = Depends(reusable_oauth2)
) -> User:
    payload = jwt.decode_token(token, jwt.ACCESS)

    user = await UserRepository(db).find_by_id(payload["sub"])
    if user is None or not user.is_active:
        raise AuthenticationError()
    return user


def get_vault_config(request: Request) -> VaultConfig:
    # Set once by the application lifespan
    config = getattr(request.app.state, "vault_config", None)
    if config is None:
        raise ConfigurationError("Vault is not configured")
    return config


def get_vault(
        db: AsyncSession = Depends(get_db),
        config: VaultConfig = Depends(get_vault_config),
) -> BindingVault:
    return BindingVault(SqlAlchemyBindingStore(db), config)


def get_platform_service(db: AsyncSession = Depends(get_db)) -> PlatformService:
    return PlatformService(PlatformRepository(db))


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(db))


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))
