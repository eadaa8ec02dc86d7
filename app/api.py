"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.schemas import ReadingAccepted, ReadingDocument, SensorDataEvent
from services.relay import IngestRelay, build_default_relay

router = APIRouter()

MAX_HISTORY_LIMIT = 1000


def get_relay() -> IngestRelay:
    return build_default_relay()


@router.post(
    "/readings",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ReadingAccepted,
    summary="Store a reading and broadcast it to live viewers.",
)
async def post_reading(
    reading: SensorDataEvent,
    request: Request,
    relay: IngestRelay = Depends(get_relay),
) -> ReadingAccepted:
    # broadcast the body as sent; the model only gates what gets accepted
    payload = await request.json()
    result = await relay.receive(payload)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reading could not be persisted.",
        )
    return ReadingAccepted(
        id=result.document.id,
        timestamp=result.document.timestamp,
        delivered_to=result.delivered,
    )


@router.get(
    "/readings",
    response_model=List[ReadingDocument],
    summary="List stored readings, most recent last.",
)
async def list_readings(
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        le=MAX_HISTORY_LIMIT,
        description="Number of readings to return; defaults to the live window size.",
    ),
    relay: IngestRelay = Depends(get_relay),
) -> List[ReadingDocument]:
    count = limit if limit is not None else relay.live_buffer_capacity
    return relay.collection.find_recent(count)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the live dashboard."}
