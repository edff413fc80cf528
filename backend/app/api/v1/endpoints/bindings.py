# backend/app/api/v1/endpoints/bindings.py
"""
Account bindings ("user platforms") and their one-time codes.

Every route runs the vault's ownership check before touching the secret.
"""
from fastapi import APIRouter, Depends, status

from backend.app.api import deps
from backend.app.models.user import User
from backend.app.schemas.binding import (
    BindingCreate,
    BindingPage,
    BindingResponse,
    BindingUpdate,
    OTPResponse,
    OTPVerifyRequest,
    OTPVerifyResponse,
)
from backend.app.services.platforms import PlatformService
from backend.app.services.vault import BindingVault

router = APIRouter()


# 1. LIST OWN BINDINGS
@router.get("/", response_model=BindingPage)
async def read_bindings(
        page: int = 1,
        limit: int = 20,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    items, total = await vault.list_bindings(current_user.id, page, limit)
    return BindingPage(data=items, total=total)


# 2. CREATE (the secret is encrypted before it reaches the database)
@router.post("/", response_model=BindingResponse, status_code=status.HTTP_201_CREATED)
async def create_binding(
        body: BindingCreate,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
        platforms: PlatformService = Depends(deps.get_platform_service),
):
    await platforms.get_platform(body.platform_id)
    return await vault.create_binding(current_user.id, body.platform_id, body.account_name, body.secret)


@router.get("/{binding_id}", response_model=BindingResponse)
async def read_binding(
        binding_id: str,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    return await vault.get_binding(binding_id, current_user.id)


# 3. RENAME / ROTATE SECRET
@router.put("/{binding_id}", response_model=BindingResponse)
async def update_binding(
        binding_id: str,
        body: BindingUpdate,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    return await vault.update_binding(
        binding_id, current_user.id, account_name=body.account_name, raw_secret=body.secret
    )


# 4. DELETE
@router.delete("/{binding_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_binding(
        binding_id: str,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    await vault.delete_binding(binding_id, current_user.id)


# 5. CURRENT CODE + SECONDS LEFT
@router.post("/{binding_id}/otp", response_model=OTPResponse)
async def generate_code(
        binding_id: str,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    result = await vault.generate_code(binding_id, current_user.id)
    return OTPResponse(code=result.code, expires_in_seconds=result.expires_in_seconds)


@router.post("/{binding_id}/verify", response_model=OTPVerifyResponse)
async def verify_code(
        binding_id: str,
        body: OTPVerifyRequest,
        current_user: User = Depends(deps.get_current_user),
        vault: BindingVault = Depends(deps.get_vault),
):
    return OTPVerifyResponse(valid=await vault.verify_code(binding_id, current_user.id, body.code))
