# backend/app/api/errors.py
"""Translate domain errors into the usual {"detail": ...} HTTP responses."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.app.core.errors import AuthenticationError, CryptoError, VaultError

logger = logging.getLogger(__name__)


async def vault_error_handler(request: Request, exc: VaultError) -> JSONResponse:
    if isinstance(exc, CryptoError):
        # Format and integrity failures look the same from outside
        logger.warning("Crypto failure on %s %s", request.method, request.url.path)

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.public_detail},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VaultError, vault_error_handler)
