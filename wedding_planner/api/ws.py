"""
WebSocket endpoints streaming live mirrors to clients
"""

import asyncio
import json
import logging
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState

from wedding_planner.realtime.entities import MIRRORS
from wedding_planner.realtime.events import ChangeEvent
from wedding_planner.realtime.feed import ChangeFeed, get_change_feed
from wedding_planner.realtime.mirror import LiveMirror
from wedding_planner.services.repositories import TableStore, get_store

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Tracks WebSocket connections per live channel"""

    def __init__(self):
        # channel -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        await websocket.accept()
        self.active_connections.setdefault(channel, []).append(websocket)
        logger.info(f"WebSocket connected to {channel}. Total connections: {len(self.active_connections[channel])}")

    def disconnect(self, websocket: WebSocket, channel: str):
        connections = self.active_connections.get(channel)
        if not connections or websocket not in connections:
            return
        connections.remove(websocket)
        logger.info(f"WebSocket disconnected from {channel}. Remaining connections: {len(connections)}")

        # Clean up empty channels
        if not connections:
            del self.active_connections[channel]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        await websocket.send_text(json.dumps(jsonable_encoder(message)))

    def get_connection_count(self, channel: str) -> int:
        return len(self.active_connections.get(channel, []))

    def get_all_connection_counts(self) -> Dict[str, int]:
        return {
            channel: len(connections)
            for channel, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

@router.websocket("/live/{channel}")
async def live_channel(
    websocket: WebSocket,
    channel: str,
    scope: Optional[str] = None,
    store: TableStore = Depends(get_store),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """Snapshot of ``channel`` followed by every change, toast and summary update.

    ``scope`` narrows scoped channels (e.g. the vendor id for vendor_payments).
    """
    spec = MIRRORS.get(channel)
    if spec is None:
        await websocket.close(code=4004, reason="Unknown channel")
        return

    await websocket_manager.connect(websocket, channel)

    # Mirror callbacks may fire on a Firestore listener thread
    loop = asyncio.get_running_loop()
    outbox: asyncio.Queue = asyncio.Queue()

    def push(message: dict):
        loop.call_soon_threadsafe(outbox.put_nowait, message)

    def on_change(mirror: LiveMirror, event: ChangeEvent):
        push({
            "type": "change",
            "event": event.to_message(),
            "items": list(mirror.items),
            "summary": mirror.summary(),
        })

    mirror = LiveMirror(spec, store, feed, scope=scope, notify=lambda toast: push(toast.to_message()))
    mirror.add_listener(on_change)

    async def send():
        while True:
            message = await outbox.get()
            await websocket_manager.send_personal_message(message, websocket)

    async def receive():
        while True:
            data = await websocket.receive_text()
            try:
                client_message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received from WebSocket: {data}")
                continue

            if isinstance(client_message, dict) and client_message.get("type") == "ping":
                push({"type": "pong", "timestamp": client_message.get("timestamp")})

    try:
        with mirror:
            push({"type": "snapshot", **mirror.state()})
            tasks = [asyncio.create_task(receive()), asyncio.create_task(send())]
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            # Either side stopping ends the connection; re-raise what stopped it
            for task in done:
                task.result()

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error on {channel}: {e}")
        if websocket.client_state is WebSocketState.CONNECTED and websocket.application_state is WebSocketState.CONNECTED:
            await websocket.close(code=1011)
    finally:
        websocket_manager.disconnect(websocket, channel)

@router.get("/stats")
async def websocket_stats():
    """Get WebSocket connection statistics (for debugging)"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "channels_with_connections": len(counts),
        "connection_counts": counts,
        "total_connections": sum(counts.values()),
        "channels": sorted(MIRRORS),
    }
