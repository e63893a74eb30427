"""Web Push routes"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, get_push_sender
from pocket_trader.config import settings
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import (
    PushSendResult, PushSubscriptionCreate, PushUnsubscribe, VapidKeyResponse
)
from pocket_trader.services.push import PushSender, PushSubscriptionService

router = APIRouter(prefix="/api/v1/push", tags=["push"])


@router.get("/vapid-key", response_model=VapidKeyResponse)
async def get_vapid_key() -> VapidKeyResponse:
    """VAPID public key the browser subscribes with"""
    if not settings.vapid_public_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="الإشعارات غير مهيأة على الخادم",
        )
    return VapidKeyResponse(public_key=settings.vapid_public_key)


@router.post("/subscribe")
async def subscribe(
    payload: PushSubscriptionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Save (or refresh) the browser's subscription"""
    await PushSubscriptionService(db, current_user.id).subscribe(payload)
    return {"success": True, "message": "تم تفعيل الإشعارات بنجاح"}


@router.post("/unsubscribe")
async def unsubscribe(
    payload: PushUnsubscribe,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    removed = await PushSubscriptionService(db, current_user.id).unsubscribe(payload.endpoint)
    return {"success": removed, "message": "تم إيقاف الإشعارات"}


@router.post("/test", response_model=PushSendResult)
async def send_test_notification(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    sender: PushSender = Depends(get_push_sender),
) -> PushSendResult:
    """Push a test notification to every subscription of the user"""
    sent, failed = await sender.send_to_user(
        db,
        current_user.id,
        {
            "title": "🔔 إشعار تجريبي",
            "body": "الإشعارات تعمل بنجاح",
            "type": "price_alert",
            "tag": "test-notification",
        },
    )
    if sent == 0 and failed == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="لا توجد اشتراكات إشعارات لهذا الحساب",
        )
    return PushSendResult(message="تم إرسال الإشعار التجريبي", sent=sent, failed=failed)
