from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from services.relay import IngestRelay, build_default_relay


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_relay() -> IngestRelay:
    return build_default_relay()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    relay: IngestRelay = Depends(get_relay),
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "capacity": relay.live_buffer_capacity,
        },
    )
