# backend/app/api/v1/endpoints/platforms.py
from fastapi import APIRouter, Depends, status

from backend.app.api import deps
from backend.app.schemas.platform import PlatformCreate, PlatformPage, PlatformResponse, PlatformUpdate
from backend.app.services.platforms import PlatformService

router = APIRouter(dependencies=[Depends(deps.get_current_user)])


@router.get("/", response_model=PlatformPage)
async def read_platforms(
        page: int = 1,
        limit: int = 10,
        platforms: PlatformService = Depends(deps.get_platform_service),
):
    items, total = await platforms.list_platforms(page, limit)
    return PlatformPage(platforms=items, total=total)


@router.get("/{platform_id}", response_model=PlatformResponse)
async def read_platform(platform_id: str, platforms: PlatformService = Depends(deps.get_platform_service)):
    return await platforms.get_platform(platform_id)


@router.post("/", response_model=PlatformResponse, status_code=status.HTTP_201_CREATED)
async def create_platform(body: PlatformCreate, platforms: PlatformService = Depends(deps.get_platform_service)):
    return await platforms.create_platform(body.name)


@router.put("/{platform_id}", response_model=PlatformResponse)
async def update_platform(
        platform_id: str,
        body: PlatformUpdate,
        platforms: PlatformService = Depends(deps.get_platform_service),
):
    return await platforms.update_platform(platform_id, body.name)


@router.delete("/{platform_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_platform(platform_id: str, platforms: PlatformService = Depends(deps.get_platform_service)):
    await platforms.delete_platform(platform_id)
