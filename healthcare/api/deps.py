"""FastAPI dependencies resolving the process-wide backend from app state."""

from __future__ import annotations

from fastapi import Request

from healthcare.admin.cache import PageCache
from healthcare.admin.events import EventEmitter
from healthcare.appointments.service import AppointmentService
from healthcare.db.backend import Backend


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_appointment_service(request: Request) -> AppointmentService:
    return get_backend(request).appointment_service


def get_page_cache(request: Request) -> PageCache:
    return get_backend(request).page_cache


def get_events(request: Request) -> EventEmitter:
    return get_backend(request).events
