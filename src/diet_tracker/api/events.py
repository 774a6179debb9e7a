"""Websocket endpoint for live change notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from diet_tracker.domain.errors import NotAuthorized

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.websocket("/ws/events")
async def events(websocket: WebSocket, token: str | None = None) -> None:
    """Subscribe the token's user to its change events."""
    container: AppContainer = websocket.app.state.container
    try:
        user_id = str(container.token_service.verify(token or ""))
    except NotAuthorized as exc:
        _logger.info("Rejected websocket subscription: %s", exc)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    container.event_sink.connect(user_id, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        _logger.info("Websocket disconnected for user=%s", user_id)
    finally:
        container.event_sink.disconnect(user_id, websocket)
