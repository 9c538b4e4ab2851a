"""
Live‑update notifications.

``NotificationChannel`` is a publish‑only interface injected into the
application.  ``WebSocketNotifier`` fans each event out to the
websocket clients registered through ``/messaging/ws``.
"""

import logging
from typing import Any, Dict, Set

from fastapi import WebSocket


MESSAGE_UPDATE = "messageUpdate"


class NotificationChannel:
    """Publish‑only channel for live‑update events."""

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class WebSocketNotifier(NotificationChannel):
    """Broadcast events as ``{"event": ..., "data": ...}`` JSON frames."""

    def __init__(self) -> None:
        self.connections: Set[WebSocket] = set()
        self.logger = logging.getLogger(__name__)

    async def connect(self, websocket: WebSocket) -> None:
        self.connections.add(websocket)
        await websocket.accept()
        self.logger.info("Websocket client connected (%d total)", len(self.connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self.connections.discard(websocket)
        self.logger.info("Websocket client disconnected (%d total)", len(self.connections))

    async def publish(self, event: str, payload: Dict[str, Any]) -> None:
        frame = {"event": event, "data": payload}
        # iterate over a copy; failing clients are removed while sending
        for websocket in list(self.connections):
            try:
                await websocket.send_json(frame)
            except Exception as exc:
                self.logger.warning("Dropping websocket client after failed send: %s", exc)
                self.disconnect(websocket)
