"""Signal routes"""
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import verify_extension_key
from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.schemas import SignalResponse, SignalStatusUpdate
from pocket_trader.services.signal_store import SignalStore

router = APIRouter(prefix="/api/v1/signals", tags=["signals"])


@router.get("", response_model=List[SignalResponse])
async def list_signals(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> List[SignalResponse]:
    """Latest signals, newest first"""
    signals = await SignalStore(db).list_recent(limit=limit, status=status_filter)
    return [SignalResponse.model_validate(s) for s in signals]


@router.patch(
    "/{signal_id}/status",
    response_model=SignalResponse,
    dependencies=[Depends(verify_extension_key)],
)
async def update_signal_status(
    signal_id: UUID,
    payload: SignalStatusUpdate,
    db: AsyncSession = Depends(get_db),
) -> SignalResponse:
    """Record the execution outcome reported by the broker tab"""
    try:
        signal = await SignalStore(db).update_status(signal_id, payload.status)
    except NotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return SignalResponse.model_validate(signal)
