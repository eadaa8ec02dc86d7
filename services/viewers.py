"""Connected viewer sessions and the hub that fans readings out to them."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Protocol
from uuid import uuid4

from app.schemas import ChannelMessage
from models.live_buffer import DEFAULT_CAPACITY, LiveBuffer

logger = logging.getLogger(__name__)

NEW_READING_EVENT = "newReading"


class Transport(Protocol):
    async def send_json(self, data: Any) -> None: ...


class ViewerSession:
    """One connected viewer with its own live buffer."""

    def __init__(
        self,
        transport: Transport,
        capacity: int = DEFAULT_CAPACITY,
        viewer_id: str | None = None,
    ) -> None:
        self.viewer_id = viewer_id or uuid4().hex[:12]
        self.transport = transport
        self.buffer: LiveBuffer[Dict[str, Any]] = LiveBuffer(capacity)

    async def deliver(self, payload: Dict[str, Any]) -> None:
        self.buffer.receive(copy.deepcopy(payload))
        message = ChannelMessage(event=NEW_READING_EVENT, data=payload)
        await self.transport.send_json(message.model_dump())

    async def send(self, event: str, data: Any) -> None:
        await self.transport.send_json(ChannelMessage(event=event, data=data).model_dump())


class ViewerHub:
    """Registry of currently connected viewers."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ViewerSession] = {}

    def register(self, session: ViewerSession) -> None:
        self._sessions[session.viewer_id] = session
        logger.info(
            "Viewer connected",
            extra={"viewer_id": session.viewer_id, "viewer_count": len(self._sessions)},
        )

    def unregister(self, session: ViewerSession) -> None:
        if self._sessions.pop(session.viewer_id, None) is None:
            return
        logger.info(
            "Viewer disconnected",
            extra={"viewer_id": session.viewer_id, "viewer_count": len(self._sessions)},
        )

    def sessions(self) -> List[ViewerSession]:
        return list(self._sessions.values())

    async def broadcast(self, payload: Dict[str, Any]) -> int:
        """Deliver ``payload`` to every viewer connected when the call starts.

        Viewers whose transport fails are dropped from the hub.
        """
        delivered = 0
        dead: list[ViewerSession] = []
        for session in self.sessions():
            try:
                await session.deliver(payload)
            except Exception as exc:  # noqa: BLE001 - any transport failure drops the viewer
                logger.warning(
                    "Dropping viewer after failed send",
                    extra={"viewer_id": session.viewer_id, "reason": str(exc) or type(exc).__name__},
                )
                dead.append(session)
                continue
            delivered += 1

        for session in dead:
            self.unregister(session)
        return delivered

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
