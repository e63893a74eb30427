"""Virtual wallet and paper trade routes"""
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, http_error
from pocket_trader.core.exceptions import NotFoundException, ValidationException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import (
    PriceCheckRequest, TradeCloseRequest, TradeOpenRequest, TradeResponse,
    WalletBalanceUpdate, WalletResponse, WalletStateResponse,
)
from pocket_trader.services.paper_trading import PaperTradingService

router = APIRouter(prefix="/api/v1/wallet", tags=["paper-trading"])


async def _state(service: PaperTradingService, message: Optional[str] = None) -> WalletStateResponse:
    wallet = await service.get_wallet()
    trades = await service.list_trades()
    return WalletStateResponse(
        message=message,
        wallet=WalletResponse.model_validate(wallet),
        trades=[TradeResponse.model_validate(t) for t in trades],
    )


def _close_message(profit_loss) -> str:
    if profit_loss > 0:
        return f"🎉 ربح: ${profit_loss:.2f}"
    return f"📉 خسارة: ${abs(profit_loss):.2f}"


@router.get("", response_model=WalletStateResponse)
async def get_wallet(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    """Wallet (created on first access) and all trades"""
    return await _state(PaperTradingService(db, current_user.id))


@router.get("/trades", response_model=List[TradeResponse])
async def list_trades(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    trades = await PaperTradingService(db, current_user.id).list_trades(status_filter)
    return [TradeResponse.model_validate(t) for t in trades]


@router.post("/trades", response_model=WalletStateResponse, status_code=status.HTTP_201_CREATED)
async def open_trade(
    payload: TradeOpenRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    """Open a trade; 400 when the balance does not cover the amount"""
    service = PaperTradingService(db, current_user.id)
    try:
        await service.open_trade(payload)
    except ValidationException as e:
        raise http_error(e)
    message = "✅ تم فتح صفقة شراء" if payload.direction == "buy" else "✅ تم فتح صفقة بيع"
    return await _state(service, message)


@router.post("/trades/{trade_id}/close", response_model=WalletStateResponse)
async def close_trade(
    trade_id: UUID,
    payload: TradeCloseRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    service = PaperTradingService(db, current_user.id)
    try:
        trade = await service.close_trade(trade_id, payload.exit_price)
    except (NotFoundException, ValidationException) as e:
        raise http_error(e)
    return await _state(service, _close_message(trade.profit_loss))


@router.post("/trades/{trade_id}/cancel", response_model=WalletStateResponse)
async def cancel_trade(
    trade_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    service = PaperTradingService(db, current_user.id)
    try:
        await service.cancel_trade(trade_id)
    except (NotFoundException, ValidationException) as e:
        raise http_error(e)
    return await _state(service, "تم إلغاء الأمر")


@router.post("/check-exits", response_model=WalletStateResponse)
async def check_exits(
    payload: PriceCheckRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    """Close open trades whose stop loss or take profit the given prices reached"""
    service = PaperTradingService(db, current_user.id)
    closed = await service.check_exit_conditions(payload.prices)
    return await _state(service, f"تم إغلاق {len(closed)} صفقة" if closed else None)


@router.post("/reset", response_model=WalletStateResponse)
async def reset_wallet(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    service = PaperTradingService(db, current_user.id)
    await service.reset_wallet()
    return await _state(service, "تم إعادة تعيين المحفظة بنجاح")


@router.put("/balance", response_model=WalletStateResponse)
async def set_balance(
    payload: WalletBalanceUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> WalletStateResponse:
    service = PaperTradingService(db, current_user.id)
    await service.set_balance(payload.balance)
    return await _state(service, "تم تحديث الرصيد بنجاح")
