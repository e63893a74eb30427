"""Price alert routes"""
from typing import List, Literal, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import (
    get_current_user, get_price_client, get_push_sender, http_error, verify_extension_key
)
from pocket_trader.core.exceptions import MarketDataException, NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import (
    AlertCheckResult, MutationResponse, PriceAlertCreate, PriceAlertResponse, PriceAlertToggle
)
from pocket_trader.services.alerts import PriceAlertChecker, PriceAlertService
from pocket_trader.services.market import BinancePriceClient
from pocket_trader.services.push import PushSender

router = APIRouter(prefix="/api/v1/alerts", tags=["alerts"])

AlertList = MutationResponse[PriceAlertResponse]


async def _mutation(service: PriceAlertService, message: str) -> AlertList:
    alerts = await service.list()
    return AlertList(message=message, items=[PriceAlertResponse.model_validate(a) for a in alerts])


@router.get("", response_model=List[PriceAlertResponse])
async def list_alerts(
    view: Optional[Literal["all", "active", "triggered"]] = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Alerts of the current user
    
    Args:
        view: ``active`` (armed, not yet triggered) or ``triggered``;
            omitted or ``all`` lists everything
    """
    alerts = await PriceAlertService(db, current_user.id).list(view)
    return [PriceAlertResponse.model_validate(a) for a in alerts]


@router.post("", response_model=AlertList, status_code=status.HTTP_201_CREATED)
async def add_alert(
    payload: PriceAlertCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AlertList:
    service = PriceAlertService(db, current_user.id)
    await service.add(payload)
    return await _mutation(service, "تم إضافة التنبيه بنجاح")


@router.delete("/{alert_id}", response_model=AlertList)
async def remove_alert(
    alert_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AlertList:
    service = PriceAlertService(db, current_user.id)
    try:
        await service.delete(alert_id)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم حذف التنبيه")


@router.patch("/{alert_id}", response_model=AlertList)
async def toggle_alert(
    alert_id: UUID,
    payload: PriceAlertToggle,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AlertList:
    service = PriceAlertService(db, current_user.id)
    try:
        await service.toggle(alert_id, payload.is_active)
    except NotFoundException as e:
        raise http_error(e)
    message = "تم تفعيل التنبيه" if payload.is_active else "تم إيقاف التنبيه"
    return await _mutation(service, message)


@router.post(
    "/check",
    response_model=AlertCheckResult,
    dependencies=[Depends(verify_extension_key)],
)
async def check_alerts(
    db: AsyncSession = Depends(get_db),
    prices: BinancePriceClient = Depends(get_price_client),
    sender: PushSender = Depends(get_push_sender),
) -> AlertCheckResult:
    """Run one pass of the price alert watcher for all users"""
    try:
        return await PriceAlertChecker(db, prices, sender).run()
    except MarketDataException as e:
        logger.error(f"Price alert check failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
