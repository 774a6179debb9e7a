"""Delivers events to websocket connections grouped per user."""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import WebSocket

from diet_tracker.services.notifications import EventSink

_logger = logging.getLogger(__name__)


@dataclass
class WebSocketEventSink(EventSink):
    """Keeps each user's open sockets and fans events out to them."""

    connections: dict[str, set[WebSocket]] = field(
        default_factory=lambda: defaultdict(set)
    )

    def connect(self, user_id: str, websocket: WebSocket) -> None:
        self.connections[user_id].add(websocket)
        _logger.info("Websocket subscribed for user=%s", user_id)

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        sockets = self.connections.get(user_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            self.connections.pop(user_id, None)

    async def publish(
        self, user_id: str, event: str, payload: dict[str, object]
    ) -> None:
        """Send the event to every socket of the user, dropping broken ones."""
        for websocket in list(self.connections.get(user_id, ())):
            try:
                await websocket.send_json({"event": event, "data": payload})
            except Exception as exc:
                _logger.warning(
                    "Dropping websocket for user=%s after send failure: %s",
                    user_id,
                    exc,
                )
                self.disconnect(user_id, websocket)

    async def close(self) -> None:
        """Close all open sockets."""
        for user_id, sockets in list(self.connections.items()):
            for websocket in list(sockets):
                try:
                    await websocket.close()
                except RuntimeError:
                    _logger.debug("Websocket for user=%s already closed", user_id)
        self.connections.clear()
