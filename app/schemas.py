"""Pydantic schemas for the HTTP API and realtime channel."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SensorDataEvent(BaseModel):
    """Inbound reading pushed by a device."""

    temperature: float = Field(..., description="Temperature in degrees Celsius.")
    humidity: float = Field(..., description="Relative humidity in percent.")
    timestamp: Optional[datetime] = Field(
        default=None, description="Sample time; arrival time is used when omitted."
    )


class ReadingDocument(BaseModel):
    """A reading as stored in the document collection."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class ReadingAccepted(BaseModel):
    """Response payload after a reading has been stored and broadcast."""

    id: str
    timestamp: datetime
    delivered_to: int = Field(..., ge=0, description="Number of viewers that received it.")


class ChannelMessage(BaseModel):
    """Envelope for named events on the realtime channel."""

    event: str
    data: Any = None
