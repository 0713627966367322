"""Backend client handles, service construction, and lifespan management.

Appwrite (httpx) and Redis clients and the event emitter are created once
per process, injected into the appointment service, and closed on shutdown.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import redis.asyncio as aioredis

from healthcare.admin.cache import PageCache
from healthcare.admin.events import EventEmitter
from healthcare.appointments.notifications import NotificationDispatcher
from healthcare.appointments.repository import AppointmentRepository
from healthcare.appointments.service import AppointmentService
from healthcare.appwrite import AppwriteClient, Databases, Messaging
from healthcare.config import Settings


@dataclass
class Backend:
    """Everything a request handler needs, built from one Settings object."""

    appwrite: AppwriteClient
    redis: aioredis.Redis
    events: EventEmitter
    page_cache: PageCache
    appointment_service: AppointmentService
    admin_password: str = ""


def create_backend(settings: Settings) -> Backend:
    aw = settings.appwrite
    appwrite = AppwriteClient(
        aw.appwrite_endpoint,
        aw.appwrite_project_id,
        aw.appwrite_api_key,
        timeout=aw.appwrite_timeout,
    )
    redis_client: aioredis.Redis = aioredis.from_url(
        settings.cache.redis_url,
        decode_responses=True,
    )
    events = EventEmitter()
    page_cache = PageCache(redis_client, ttl=settings.cache.admin_cache_ttl, events=events)

    repository = AppointmentRepository(
        Databases(appwrite),
        aw.appwrite_database_id,
        aw.appwrite_appointment_collection_id,
        page_size=aw.appwrite_page_size,
    )
    service = AppointmentService(
        repository,
        NotificationDispatcher(Messaging(appwrite), events),
        page_cache,
        settings.notifications,
        events,
    )
    return Backend(
        appwrite=appwrite,
        redis=redis_client,
        events=events,
        page_cache=page_cache,
        appointment_service=service,
        admin_password=settings.security.admin_web_password,
    )


async def close_backend(backend: Backend) -> None:
    """Close the httpx connection pool and Redis connections."""
    await backend.appwrite.close()
    await backend.redis.aclose()


@contextlib.asynccontextmanager
async def backend_lifespan(settings: Settings) -> AsyncGenerator[Backend, None]:
    """Context manager for backend client lifecycle.

    Usage in FastAPI lifespan:
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            async with backend_lifespan(settings) as backend:
                app.state.backend = backend
                yield
    """
    backend = create_backend(settings)
    try:
        yield backend
    finally:
        await close_backend(backend)
