# backend/app/api/v1/router.py
from fastapi import APIRouter
from backend.app.api.v1.endpoints import auth, bindings, platforms, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(platforms.router, prefix="/platforms", tags=["platforms"])
api_router.include_router(bindings.router, prefix="/user-platforms", tags=["user-platforms"])
