# backend/app/repositories/platforms.py
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError
from backend.app.models.platform import Platform


class PlatformRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, platform_id: str) -> Optional[Platform]:
        result = await self.db.execute(select(Platform).where(Platform.id == platform_id))
        return result.scalars().first()

    async def find_by_name(self, name: str) -> Optional[Platform]:
        result = await self.db.execute(select(Platform).where(Platform.name == name))
        return result.scalars().first()

    async def list_page(self, offset: int, limit: int) -> Tuple[List[Platform], int]:
        result = await self.db.execute(
            select(Platform).order_by(Platform.name).offset(offset).limit(limit)
        )
        total = await self.db.scalar(select(func.count()).select_from(Platform))
        return list(result.scalars().all()), total or 0

    async def save(self, platform: Platform) -> Platform:
        self.db.add(platform)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("Platform already exists") from exc
        await self.db.refresh(platform)
        return platform

    async def delete(self, platform: Platform) -> None:
        await self.db.delete(platform)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("Platform is still used by registered accounts") from exc
