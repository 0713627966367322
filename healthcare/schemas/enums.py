"""Domain enums used across Pydantic schemas and the appointment service.

All enums use str mixin so they serialize as their plain values in Appwrite documents.
"""

from __future__ import annotations

from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle status stored on every appointment document."""

    SCHEDULED = "scheduled"
    PENDING = "pending"
    CANCELLED = "cancelled"


class UpdateType(str, Enum):
    """Admin action driving an appointment update — selects the notification template."""

    SCHEDULE = "schedule"
    CANCEL = "cancel"
