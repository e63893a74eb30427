"""Favorite market routes"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, http_error
from pocket_trader.core.exceptions import ConflictException, NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import FavoriteCreate, FavoriteResponse, MutationResponse
from pocket_trader.services.user_data import FavoriteService

router = APIRouter(prefix="/api/v1/favorites", tags=["favorites"])

FavoriteList = MutationResponse[FavoriteResponse]


async def _mutation(service: FavoriteService, message: str) -> FavoriteList:
    favorites = await service.list()
    return FavoriteList(message=message, items=[FavoriteResponse.model_validate(f) for f in favorites])


@router.get("", response_model=List[FavoriteResponse])
async def list_favorites(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    favorites = await FavoriteService(db, current_user.id).list()
    return [FavoriteResponse.model_validate(f) for f in favorites]


@router.get("/{symbol}")
async def is_favorite(
    symbol: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return {"symbol": symbol, "is_favorite": await FavoriteService(db, current_user.id).is_favorite(symbol)}


@router.post("", response_model=FavoriteList, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    payload: FavoriteCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FavoriteList:
    """Add a market; 409 when it is already a favorite"""
    service = FavoriteService(db, current_user.id)
    try:
        await service.add(payload)
    except ConflictException as e:
        raise http_error(e)
    return await _mutation(service, "تمت إضافته للمفضلة ⭐")


@router.delete("/{symbol}", response_model=FavoriteList)
async def remove_favorite(
    symbol: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FavoriteList:
    service = FavoriteService(db, current_user.id)
    try:
        await service.remove(symbol)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم إزالته من المفضلة")
