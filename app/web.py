from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api import get_relay
from services.deriver import AUTHORIZED_MESSAGE, INTRUSION_MESSAGE
from services.relay import RelayService


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

REFRESH_SECONDS = 2


def _alert_level(message: str) -> str:
    if message == INTRUSION_MESSAGE:
        return "danger"
    if message == AUTHORIZED_MESSAGE:
        return "ok"
    return "idle"


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    relay: RelayService = Depends(get_relay),
) -> HTMLResponse:
    reading = relay.current_reading()
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "reading": reading,
            "level": _alert_level(reading.message),
            "refresh_seconds": REFRESH_SECONDS,
        },
    )
