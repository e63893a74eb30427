"""Daily journal routes"""
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from pocket_trader.api.dependencies import get_current_user, http_error
from pocket_trader.core.exceptions import NotFoundException
from pocket_trader.db import get_db
from pocket_trader.models.database import User
from pocket_trader.models.schemas import (
    JournalEntryCreate, JournalEntryResponse, JournalEntryUpdate, JournalStats, MutationResponse
)
from pocket_trader.services.user_data import JournalService

router = APIRouter(prefix="/api/v1/journal", tags=["journal"])

JournalList = MutationResponse[JournalEntryResponse]


async def _mutation(service: JournalService, message: str) -> JournalList:
    entries = await service.list()
    return JournalList(message=message, items=[JournalEntryResponse.model_validate(e) for e in entries])


@router.get("", response_model=List[JournalEntryResponse])
async def list_entries(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entries = await JournalService(db, current_user.id).list()
    return [JournalEntryResponse.model_validate(e) for e in entries]


@router.get("/today", response_model=List[JournalEntryResponse])
async def list_today(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entries = await JournalService(db, current_user.id).today()
    return [JournalEntryResponse.model_validate(e) for e in entries]


@router.get("/stats", response_model=JournalStats)
async def get_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JournalStats:
    return await JournalService(db, current_user.id).stats()


@router.post("", response_model=JournalList, status_code=status.HTTP_201_CREATED)
async def add_entry(
    payload: JournalEntryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JournalList:
    service = JournalService(db, current_user.id)
    await service.create(**payload.model_dump())
    return await _mutation(service, "تمت إضافة الصفقة بنجاح")


@router.patch("/{entry_id}", response_model=JournalList)
async def update_entry(
    entry_id: UUID,
    payload: JournalEntryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JournalList:
    service = JournalService(db, current_user.id)
    try:
        await service.update(entry_id, **payload.model_dump(exclude_unset=True))
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم التحديث بنجاح")


@router.delete("/{entry_id}", response_model=JournalList)
async def delete_entry(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> JournalList:
    service = JournalService(db, current_user.id)
    try:
        await service.delete(entry_id)
    except NotFoundException as e:
        raise http_error(e)
    return await _mutation(service, "تم حذف الصفقة")
