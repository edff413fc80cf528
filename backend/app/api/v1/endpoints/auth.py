# backend/app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from backend.app.api import deps
from backend.app.schemas.user import (
    LogoutResponse,
    RefreshRequest,
    Token,
    UserCreate,
    UserResponse,
)
from backend.app.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, auth: AuthService = Depends(deps.get_auth_service)):
    return await auth.register(user_in.username, user_in.password)


@router.post("/login", response_model=Token)
async def login(
        form_data: OAuth2PasswordRequestForm = Depends(),
        auth: AuthService = Depends(deps.get_auth_service)
):
    pair = await auth.login(form_data.username, form_data.password)
    return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/refresh", response_model=Token)
async def refresh(body: RefreshRequest, auth: AuthService = Depends(deps.get_auth_service)):
    pair = await auth.refresh(body.refresh_token)
    return Token(access_token=pair.access_token, refresh_token=pair.refresh_token)


# Always 200: an invalid token is reported in the body, not as an error
@router.post("/logout", response_model=LogoutResponse)
async def logout(body: RefreshRequest, auth: AuthService = Depends(deps.get_auth_service)):
    result = await auth.logout(body.refresh_token)
    return LogoutResponse(revoked=result.revoked, reason=result.reason)
