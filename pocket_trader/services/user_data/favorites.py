"""Favorite markets"""
from loguru import logger
from sqlalchemy import select

from pocket_trader.core.exceptions import ConflictException, NotFoundException
from pocket_trader.models.database import UserFavorite
from pocket_trader.models.schemas import FavoriteCreate
from .base import UserTableService


class FavoriteService(UserTableService[UserFavorite]):
    model = UserFavorite
    not_found_message = "هذا السوق غير موجود في المفضلة"

    async def is_favorite(self, symbol: str) -> bool:
        result = await self.db.execute(self._scoped().where(UserFavorite.symbol == symbol))
        return result.scalar_one_or_none() is not None

    async def add(self, data: FavoriteCreate) -> UserFavorite:
        """
        Add a market to the user's favorites

        Raises:
            ConflictException: symbol already in favorites
        """
        if await self.is_favorite(data.symbol):
            raise ConflictException(
                "هذا السوق موجود بالفعل في المفضلة", {"symbol": data.symbol}
            )
        return await self.create(**data.model_dump())

    async def remove(self, symbol: str) -> None:
        result = await self.db.execute(
            select(UserFavorite.id)
            .where(UserFavorite.user_id == self.user_id)
            .where(UserFavorite.symbol == symbol)
        )
        favorite_id = result.scalar_one_or_none()
        if favorite_id is None:
            raise NotFoundException(self.not_found_message, {"symbol": symbol})
        await self.delete(favorite_id)
        logger.info(f"Favorite removed: {symbol}")
