"""Realtime change feed route"""
import asyncio
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

from pocket_trader.core.exceptions import AuthenticationException
from pocket_trader.services.auth import AuthService
from pocket_trader.services.realtime import change_feed

router = APIRouter(tags=["realtime"])

PUBLIC_TABLES = frozenset({"signals"})
USER_TABLES = frozenset({
    "price_alerts",
    "user_favorites",
    "user_daily_journal",
    "trading_goals",
    "user_notifications",
    "virtual_wallets",
    "virtual_trades",
})

POLICY_VIOLATION = 1008


@router.websocket("/ws/realtime/{table}")
async def realtime_feed(
    websocket: WebSocket,
    table: str,
    token: Optional[str] = Query(default=None),
):
    """
    Stream ``{table, event, record}`` events for one table
    
    Per-user tables need an access token in ``?token=`` and only carry
    events for that user's rows.
    """
    user_id = None
    if table in USER_TABLES:
        if not token:
            await websocket.close(code=POLICY_VIOLATION)
            return
        try:
            user_id = (await AuthService.verify_token(token)).user_id
        except AuthenticationException:
            await websocket.close(code=POLICY_VIOLATION)
            return
    elif table not in PUBLIC_TABLES:
        await websocket.close(code=POLICY_VIOLATION)
        return
    
    await websocket.accept()
    async with change_feed.subscribe(table) as queue:
        forward = asyncio.create_task(_forward_events(websocket, queue, user_id))
        watch = asyncio.create_task(_wait_for_disconnect(websocket))
        done, pending = await asyncio.wait({forward, watch}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            task.result()


async def _forward_events(websocket: WebSocket, queue: asyncio.Queue, user_id: Optional[UUID]) -> None:
    try:
        while True:
            event = await queue.get()
            record = event.get("record") or {}
            if user_id is not None and record.get("user_id") != user_id:
                continue
            await websocket.send_json(jsonable_encoder(event))
    except WebSocketDisconnect:
        pass


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    """Return once the client goes away; anything it sends is ignored"""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
