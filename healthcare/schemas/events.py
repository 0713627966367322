"""SystemEvent schema — the event type emitted by every appointment lifecycle step.

Subscribers (the audit logger) receive them inline from the EventEmitter.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Appointments
    APPOINTMENT_CREATED = "appointment.created"
    APPOINTMENT_BOOKED = "appointment.booked"
    APPOINTMENT_CANCELLED = "appointment.cancelled"
    APPOINTMENT_UPDATE_FAILED = "appointment.update_failed"

    # Notifications
    NOTIFICATION_SENT = "notification.sent"
    NOTIFICATION_FAILED = "notification.failed"

    # Cache
    PAGE_REVALIDATED = "cache.page_revalidated"

    # Admin
    ADMIN_ACCESS = "admin.access"


class SystemEvent(BaseModel):
    """Core event that flows through the system.

    Immutable once created. Consumed by:
    - audit_on_event → structured audit log line
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Context (optional, admin events have no appointment)
    appointment_id: str | None = None
    user_id: str | None = None
    actor_id: str | None = None
    actor_role: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
