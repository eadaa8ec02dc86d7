"""Persist-then-broadcast relay between device ingestion and live viewers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.schemas import ReadingDocument
from datastore.document_store import (
    DocumentCollection,
    PersistenceError,
    build_default_collection,
)
from services.viewers import ViewerHub
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayResult:
    document: ReadingDocument
    delivered: int


class IngestRelay:
    """Stores each inbound reading, then rebroadcasts it to connected viewers.

    Calls to :meth:`receive` are serialized, so viewers see readings in the
    order the relay received them. A reading that fails to persist is never
    broadcast.
    """

    def __init__(
        self,
        collection: DocumentCollection,
        hub: ViewerHub,
        live_buffer_capacity: int = 50,
    ) -> None:
        self.collection = collection
        self.hub = hub
        self.live_buffer_capacity = live_buffer_capacity
        self._lock = asyncio.Lock()

    async def receive(self, payload: Dict[str, Any]) -> Optional[RelayResult]:
        async with self._lock:
            try:
                document = self._to_document(payload)
                stored = await run_in_threadpool(self.collection.insert_one, document)
            except (ValidationError, PersistenceError) as exc:
                logger.error(
                    "Error saving reading; broadcast suppressed",
                    extra={"event": "sensorData", "reason": _describe(exc)},
                )
                return None

            delivered = await self.hub.broadcast(payload)
            logger.debug(
                "Reading stored and broadcast",
                extra={"reading_id": stored.id, "delivered": delivered},
            )
            return RelayResult(document=stored, delivered=delivered)

    def shutdown(self) -> None:
        """Forget connected viewers during application shutdown."""
        self.hub.clear()

    @staticmethod
    def _to_document(payload: Dict[str, Any]) -> ReadingDocument:
        if not isinstance(payload, dict):
            return ReadingDocument.model_validate(payload)
        # ids are assigned by the collection; a null timestamp means "now"
        fields = {key: value for key, value in payload.items() if key != "id"}
        if fields.get("timestamp") is None:
            fields.pop("timestamp", None)
        return ReadingDocument.model_validate(fields)


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return f"invalid reading ({exc.error_count()} error(s))"
    return str(exc)


@lru_cache
def build_default_relay() -> IngestRelay:
    """Create the process-wide relay on first use; later calls reuse it."""
    settings = get_settings()
    return IngestRelay(
        collection=build_default_collection(),
        hub=ViewerHub(),
        live_buffer_capacity=settings.live_buffer_capacity,
    )
