import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from backend.app.api.errors import register_exception_handlers
from backend.app.api.v1.router import api_router
from backend.app.core.config import Settings, VaultConfig, settings as default_settings
from backend.app.core.logging_config import setup_logging
from backend.app.db.base import Base, engine

# --- Import models so SQLAlchemy knows every table ---
from backend.app import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, create_tables: bool = True) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        # Fails before serving anything if ENCRYPTION_KEY is missing or short
        app.state.vault_config = VaultConfig.from_settings(settings)
        if create_tables:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
        yield

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    return app


app = create_app()
