"""
Recreate the schema and seed default data. DEV MODE ONLY: drops all tables.

    python init_db.py
"""
import asyncio
import logging
import sys

from backend.app.core.config import settings
from backend.app.core.logging_config import setup_logging
from backend.app.db.base import AsyncSessionLocal, Base, engine
from backend.app.models import Platform, User
from backend.app.security import hashing

logger = logging.getLogger("init_db")

DEFAULT_PLATFORMS = ["GitHub", "Google", "Microsoft", "Facebook"]
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


async def init_models():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")


async def seed():
    async with AsyncSessionLocal() as session:
        session.add(User(username=ADMIN_USERNAME, hashed_password=hashing.get_password_hash(ADMIN_PASSWORD)))
        for name in DEFAULT_PLATFORMS:
            session.add(Platform(name=name))
        await session.commit()
    logger.info("Seeded %d platforms; default account: %s / %s",
                len(DEFAULT_PLATFORMS), ADMIN_USERNAME, ADMIN_PASSWORD)


async def main():
    await init_models()
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    setup_logging(settings)
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main())
