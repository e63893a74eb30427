"""Trading goal routes"""
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, http_error
from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import (
    MutationResponse, TradingGoalCreate, TradingGoalResponse, TradingGoalUpdate
)
from pocket_trader.services.user_data import TradingGoalService

router = APIRouter(prefix="/api/v1/goals", tags=["goals"])

GoalList = MutationResponse[TradingGoalResponse]


async def _mutation(service: TradingGoalService, message: str) -> GoalList:
    goals = await service.list()
    return GoalList(message=message, items=[TradingGoalResponse.model_validate(g) for g in goals])


@router.get("", response_model=List[TradingGoalResponse])
async def list_goals(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goals = await TradingGoalService(db, current_user.id).list()
    return [TradingGoalResponse.model_validate(g) for g in goals]


@router.get("/active", response_model=Optional[TradingGoalResponse])
async def get_active_goal(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await TradingGoalService(db, current_user.id).active()
    return TradingGoalResponse.model_validate(goal) if goal else None


@router.post("", response_model=GoalList, status_code=status.HTTP_201_CREATED)
async def create_goal(
    payload: TradingGoalCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> GoalList:
    """Create a goal; every other goal of the user is deactivated"""
    service = TradingGoalService(db, current_user.id)
    await service.add(payload)
    return await _mutation(service, "تم إنشاء خطة التداول بنجاح")


@router.patch("/{goal_id}", response_model=GoalList)
async def update_goal(
    goal_id: UUID,
    payload: TradingGoalUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> GoalList:
    service = TradingGoalService(db, current_user.id)
    values = payload.model_dump(exclude_unset=True)
    try:
        is_active = values.pop("is_active", None)
        if is_active:
            await service.activate(goal_id)
        elif is_active is False:
            values["is_active"] = False
        await service.update(goal_id, **values)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم تحديث الخطة بنجاح")


@router.post("/{goal_id}/activate", response_model=GoalList)
async def activate_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> GoalList:
    service = TradingGoalService(db, current_user.id)
    try:
        await service.activate(goal_id)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم تحديث الخطة بنجاح")


@router.delete("/{goal_id}", response_model=GoalList)
async def delete_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> GoalList:
    service = TradingGoalService(db, current_user.id)
    try:
        await service.delete(goal_id)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم حذف الخطة")
