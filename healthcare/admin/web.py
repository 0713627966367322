"""Admin web dashboard — FastAPI router with a Jinja2 page.

Shows appointment counts by status and the full list, newest first. The
data comes from the Redis page cache; on a miss it is fetched from Appwrite
and cached until the next appointment write revalidates it.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from healthcare.admin.auth import verify_admin
from healthcare.admin.cache import PageCache
from healthcare.admin.events import EventEmitter
from healthcare.admin.formatters import format_datetime
from healthcare.api.deps import get_appointment_service, get_events, get_page_cache
from healthcare.appointments.service import ADMIN_PATH, AppointmentService
from healthcare.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix=ADMIN_PATH, tags=["admin"])

_template_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(_template_dir))
templates.env.filters["datetime"] = format_datetime


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    service: AppointmentService = Depends(get_appointment_service),
    page_cache: PageCache = Depends(get_page_cache),
    events: EventEmitter = Depends(get_events),
    admin: str = Depends(verify_admin),
) -> HTMLResponse:
    """Dashboard — status counters and the recent appointment table."""
    await events.emit(SystemEvent(
        event_type=EventType.ADMIN_ACCESS,
        actor_id=admin,
        actor_role="admin",
        data={"page": "dashboard"},
        source_module="admin.web",
    ))

    recent = await page_cache.get(ADMIN_PATH)
    if recent is None:
        recent = await service.get_recent_appointment_list()
        if recent is not None:
            await page_cache.set(ADMIN_PATH, recent)
        else:
            logger.warning("Admin dashboard rendered without appointment data")

    return templates.TemplateResponse(request, "dashboard.html", {"recent": recent})
