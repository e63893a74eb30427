"""Auto-trade relay routes"""
import asyncio
from typing import Any, Dict, Optional, Set
from fastapi import APIRouter, Depends, Header, Query, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from pocket_trader.api.dependencies import extension_key_matches, get_controller, verify_extension_key
from pocket_trader.models.schemas import AutoTradeMessage
from pocket_trader.services.autotrade import AutoTradeController

router = APIRouter(tags=["autotrade"])

POLICY_VIOLATION = 1008


@router.post("/api/v1/autotrade/messages", dependencies=[Depends(verify_extension_key)])
async def post_message(
    message: AutoTradeMessage,
    controller: AutoTradeController = Depends(get_controller),
) -> Dict[str, Any]:
    """
    Popup / content-script message endpoint
    
    Args:
        message: action and its arguments
        
    Returns:
        Action response
    """
    return await controller.handle_message(message)


@router.get("/api/v1/autotrade/status", dependencies=[Depends(verify_extension_key)])
async def relay_status(
    controller: AutoTradeController = Depends(get_controller),
) -> Dict[str, Any]:
    """Switch state, poller counters and connected tabs"""
    return {
        "enabled": controller.enabled,
        "poller": controller.poller.stats,
        "tabs": [{"id": tab.tab_id, "url": tab.url} for tab in controller.hub.query("")],
    }


@router.websocket("/ws/broker")
async def broker_tab_socket(
    websocket: WebSocket,
    url: str = Query(...),
    key: Optional[str] = Query(default=None),
    x_api_key: Optional[str] = Header(default=None),
    controller: AutoTradeController = Depends(get_controller),
):
    """
    Broker tab channel
    
    The tab authenticates with the extension key (``?key=`` or X-API-Key)
    and receives executeSignal / captureVisibleTab messages. It sends back
    either answers carrying the ``requestId`` they reply to, or its own
    actions (signalExecuted, captureVisibleTab, ...). Actions are handled
    in their own tasks so the loop keeps reading answers meanwhile.
    """
    if not extension_key_matches(key or x_api_key):
        logger.warning(f"Broker tab rejected: invalid extension key ({url})")
        await websocket.close(code=POLICY_VIOLATION)
        return
    
    await websocket.accept()
    tab = controller.hub.register(url, websocket)
    handlers: Set[asyncio.Task] = set()
    
    async def answer(message: AutoTradeMessage) -> None:
        try:
            await websocket.send_json(await controller.handle_message(message))
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning(f"Broker tab {tab.tab_id} closed before {message.action} was answered: {e}")
    
    try:
        while True:
            data = await websocket.receive_json()
            if not isinstance(data, dict):
                continue
            if data.get("requestId"):
                tab.resolve(data)
                continue
            try:
                message = AutoTradeMessage.model_validate(data)
            except ValidationError as e:
                logger.warning(f"Invalid message from broker tab {tab.tab_id}: {e}")
                await websocket.send_json({"success": False, "error": "invalid message"})
                continue
            handler = asyncio.create_task(answer(message))
            handlers.add(handler)
            handler.add_done_callback(handlers.discard)
    except WebSocketDisconnect:
        pass
    finally:
        controller.hub.unregister(tab.tab_id)
        for handler in list(handlers):
            handler.cancel()
