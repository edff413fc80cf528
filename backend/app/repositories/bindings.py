# backend/app/repositories/bindings.py
"""
Storage contract for bindings and its SQLAlchemy implementation.

The vault only depends on the BindingStore protocol, so any backend that
can load, save and delete a Binding by id can sit behind it.
"""
from typing import List, Optional, Protocol, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError
from backend.app.models.binding import Binding


class BindingStore(Protocol):
    async def load_binding_by_id(self, binding_id: str) -> Optional[Binding]: ...

    async def save_binding(self, binding: Binding) -> Binding: ...

    async def delete_binding(self, binding_id: str) -> None: ...

    async def find_by_owner_platform_account(
            self, user_id: str, platform_id: str, account_name: str
    ) -> Optional[Binding]: ...

    async def list_by_owner(self, user_id: str, offset: int, limit: int) -> Tuple[List[Binding], int]: ...


class SqlAlchemyBindingStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_binding_by_id(self, binding_id: str) -> Optional[Binding]:
        result = await self.db.execute(select(Binding).where(Binding.id == binding_id))
        return result.scalars().first()

    async def save_binding(self, binding: Binding) -> Binding:
        self.db.add(binding)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent create with the same key
            await self.db.rollback()
            raise ConflictError("This account is already registered for the platform") from exc
        await self.db.refresh(binding)
        # Async sessions cannot lazy load, so fetch the platform here
        await self.db.refresh(binding, attribute_names=["platform"])
        return binding

    async def delete_binding(self, binding_id: str) -> None:
        await self.db.execute(delete(Binding).where(Binding.id == binding_id))
        await self.db.commit()

    async def find_by_owner_platform_account(
            self, user_id: str, platform_id: str, account_name: str
    ) -> Optional[Binding]:
        query = select(Binding).where(
            Binding.user_id == user_id,
            Binding.platform_id == platform_id,
            Binding.account_name == account_name,
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def list_by_owner(self, user_id: str, offset: int, limit: int) -> Tuple[List[Binding], int]:
        query = (
            select(Binding)
            .where(Binding.user_id == user_id)
            .order_by(Binding.created_at.desc(), Binding.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        total = await self.db.scalar(
            select(func.count()).select_from(Binding).where(Binding.user_id == user_id)
        )
        return list(result.scalars().all()), total or 0
