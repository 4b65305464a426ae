"""
Session change events over WebSocket.

Routes: WS /ws/sessions/events

Each connected client gets {"event": "connected"} once, then
{"event": "sessions_changed"} whenever the session list changed and
should be refetched. Clients may send {"event": "ping"}.

Dependencies: chatflow.core.events.change_notifier
System role: Realtime fan-out of session-list changes
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from chatflow.api.deps import get_notifier
from chatflow.core.events.change_notifier import ChangeNotifier
from chatflow.models.events import ChangeEvent, ChangeEventType, ClientEventType

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.websocket("/ws/sessions/events")
async def session_events(
    websocket: WebSocket,
    notifier: ChangeNotifier = Depends(get_notifier),
) -> None:
    """Bridge the change notifier to one WebSocket client."""
    await websocket.accept()
    changes: asyncio.Queue[None] = asyncio.Queue()
    unsubscribe = notifier.subscribe(lambda: changes.put_nowait(None))
    logger.info(f"{__name__}:session_events - Client connected")

    receive_task = None
    change_task = None
    try:
        await websocket.send_json(ChangeEvent(event=ChangeEventType.CONNECTED).to_dict())
        receive_task = asyncio.create_task(websocket.receive_text())
        change_task = asyncio.create_task(changes.get())

        while True:
            done, _ = await asyncio.wait(
                {receive_task, change_task},
                return_when=asyncio.FIRST_COMPLETED,
            )

            if change_task in done:
                await websocket.send_json(
                    ChangeEvent(event=ChangeEventType.SESSIONS_CHANGED).to_dict()
                )
                change_task = asyncio.create_task(changes.get())

            if receive_task in done:
                await _handle_client_message(websocket, receive_task.result())
                receive_task = asyncio.create_task(websocket.receive_text())

    except WebSocketDisconnect:
        logger.info(f"{__name__}:session_events - Client disconnected")
    finally:
        unsubscribe()
        for task in (receive_task, change_task):
            if task is not None and not task.done():
                task.cancel()


async def _handle_client_message(websocket: WebSocket, raw: str) -> None:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        payload = None

    if isinstance(payload, dict) and payload.get("event") == ClientEventType.PING.value:
        await websocket.send_json(ChangeEvent(event=ChangeEventType.PONG).to_dict())
        return

    await websocket.send_json(
        ChangeEvent(
            event=ChangeEventType.ERROR,
            data={"message": "Unsupported client event"},
        ).to_dict()
    )
