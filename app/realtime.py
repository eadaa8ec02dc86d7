"""WebSocket channel carrying named sensor events."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from app.schemas import ChannelMessage
from services.relay import IngestRelay, build_default_relay
from services.viewers import ViewerSession

logger = logging.getLogger(__name__)

SENSOR_DATA_EVENT = "sensorData"
SNAPSHOT_EVENT = "snapshot"

router = APIRouter()


def get_relay() -> IngestRelay:
    return build_default_relay()


@router.websocket("/ws")
async def sensor_channel(
    websocket: WebSocket,
    relay: IngestRelay = Depends(get_relay),
) -> None:
    await websocket.accept()
    session = ViewerSession(websocket, capacity=relay.live_buffer_capacity)
    relay.hub.register(session)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                logger.warning(
                    "Ignoring non-text frame",
                    extra={"viewer_id": session.viewer_id},
                )
                continue
            await _dispatch(relay, session, text)
    except WebSocketDisconnect:
        pass
    finally:
        relay.hub.unregister(session)


async def _dispatch(relay: IngestRelay, session: ViewerSession, text: str) -> None:
    try:
        message = ChannelMessage.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError):
        logger.warning(
            "Ignoring message without an event envelope",
            extra={"viewer_id": session.viewer_id},
        )
        return

    if message.event == SENSOR_DATA_EVENT:
        await relay.receive(message.data)
    elif message.event == SNAPSHOT_EVENT:
        await session.send(SNAPSHOT_EVENT, session.buffer.contents())
    else:
        logger.warning(
            "Ignoring unknown event",
            extra={"viewer_id": session.viewer_id, "event": message.event},
        )
