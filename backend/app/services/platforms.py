# backend/app/services/platforms.py
import logging
from typing import List, Optional, Tuple

from backend.app.core.errors import ConflictError, NotFoundError, ValidationError
from backend.app.models.platform import Platform
from backend.app.repositories.platforms import PlatformRepository

logger = logging.getLogger(__name__)


class PlatformService:
    def __init__(self, repository: PlatformRepository):
        self.repository = repository

    async def list_platforms(self, page: int = 1, limit: int = 10) -> Tuple[List[Platform], int]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        limit = min(limit, 100)
        return await self.repository.list_page((page - 1) * limit, limit)

    async def get_platform(self, platform_id: str) -> Platform:
        platform = await self.repository.find_by_id(platform_id)
        if platform is None:
            raise NotFoundError("Platform not found")
        return platform

    async def create_platform(self, name: str) -> Platform:
        if await self.repository.find_by_name(name):
            raise ConflictError("Platform already exists")
        platform = await self.repository.save(Platform(name=name))
        logger.info("Platform %s created (%s)", platform.id, name)
        return platform

    async def update_platform(self, platform_id: str, name: Optional[str] = None) -> Platform:
        platform = await self.get_platform(platform_id)
        if name and name != platform.name:
            if await self.repository.find_by_name(name):
                raise ConflictError("Platform already exists")
            platform.name = name
        return await self.repository.save(platform)

    async def delete_platform(self, platform_id: str) -> None:
        platform = await self.get_platform(platform_id)
        await self.repository.delete(platform)
        logger.info("Platform %s deleted", platform_id)
