"""Pydantic schemas for appointment documents stored in Appwrite.

Python attributes are snake_case; the store (and the web client) use camelCase.
Appwrite metadata keys ($id, $createdAt, $updatedAt) map to id/created_at/updated_at.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from healthcare.schemas.enums import AppointmentStatus, UpdateType


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AppointmentCreate(_CamelModel):
    """Payload for a new appointment — everything except store-assigned fields."""

    user_id: str
    patient: str | dict[str, Any] | None = None  # patient document ID, expanded by Appwrite on read
    schedule: datetime
    primary_physician: str
    reason: str | None = None
    note: str | None = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    cancellation_reason: str | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Appointment(AppointmentCreate):
    """A persisted appointment as returned by the document store."""

    id: str = Field(alias="$id")
    created_at: datetime = Field(alias="$createdAt")
    updated_at: datetime | None = Field(default=None, alias="$updatedAt")

    def __repr__(self) -> str:
        return f"<Appointment id={self.id} status={self.status.value} at={self.schedule}>"


class AppointmentUpdate(_CamelModel):
    """Partial update — only fields explicitly set are sent to the store."""

    schedule: datetime | None = None
    primary_physician: str | None = None
    reason: str | None = None
    note: str | None = None
    status: AppointmentStatus | None = None
    cancellation_reason: str | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class UpdateAppointmentParams(_CamelModel):
    """Input of the lifecycle update flow (schedule or cancel)."""

    appointment_id: str
    user_id: str
    time_zone: str = "UTC"
    appointment: AppointmentUpdate
    type: UpdateType


class AppointmentCounts(_CamelModel):
    """Per-status tally over a listed set of appointments. Never persisted."""

    total_count: int = 0
    scheduled_count: int = 0
    pending_count: int = 0
    cancelled_count: int = 0


class RecentAppointments(AppointmentCounts):
    """Admin view data: counts plus every appointment, newest first."""

    documents: list[Appointment] = Field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
