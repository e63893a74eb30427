"""In-app notification routes"""
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, http_error
from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import MutationResponse, NotificationResponse
from pocket_trader.services.user_data import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])

NotificationList = MutationResponse[NotificationResponse]


async def _mutation(service: NotificationService, message: str) -> NotificationList:
    notifications = await service.list()
    return NotificationList(
        message=message,
        items=[NotificationResponse.model_validate(n) for n in notifications],
    )


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notifications = await NotificationService(db, current_user.id).list(limit=limit, unread_only=unread)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/{notification_id}/read", response_model=NotificationList)
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationList:
    service = NotificationService(db, current_user.id)
    try:
        await service.mark_read(notification_id)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم تعليم الإشعار كمقروء")


@router.post("/read-all", response_model=NotificationList)
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationList:
    service = NotificationService(db, current_user.id)
    await service.mark_all_read()
    return await _mutation(service, "تم تعليم جميع الإشعارات كمقروءة")
