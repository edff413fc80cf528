# backend/app/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, status

from backend.app.api import deps
from backend.app.models.user import User
from backend.app.schemas.user import UpdatePassword, UpdateUsername, UserResponse
from backend.app.services.users import UserService

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(deps.get_current_user)):
    return current_user


@router.put("/me/username", response_model=UserResponse)
async def update_username(
        body: UpdateUsername,
        current_user: User = Depends(deps.get_current_user),
        users: UserService = Depends(deps.get_user_service),
):
    return await users.change_username(current_user, body.username)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_password(
        body: UpdatePassword,
        current_user: User = Depends(deps.get_current_user),
        users: UserService = Depends(deps.get_user_service),
):
    await users.change_password(
        current_user, body.current_password, body.new_password, body.confirm_password
    )
