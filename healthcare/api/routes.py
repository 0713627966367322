"""Appointment actions called by the web client.

A failed action answers 200 with a JSON `null` body; the client treats a
missing result as a failure and degrades on its side.
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from healthcare.api.deps import get_appointment_service
from healthcare.appointments.service import AppointmentService
from healthcare.schemas.appointments import (
    AppointmentCreate,
    AppointmentUpdate,
    UpdateAppointmentParams,
)
from healthcare.schemas.enums import UpdateType

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("")
async def create_appointment(
    appointment: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
) -> dict[str, Any] | None:
    created = await service.create_appointment(appointment)
    return created.model_dump(mode="json", by_alias=True) if created else None


@router.get("/recent")
async def recent_appointments(
    service: AppointmentService = Depends(get_appointment_service),
) -> dict[str, Any] | None:
    """All appointments, newest first, with per-status counts."""
    recent = await service.get_recent_appointment_list()
    return recent.to_response() if recent else None


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
) -> dict[str, Any] | None:
    appointment = await service.get_appointment(appointment_id)
    return appointment.model_dump(mode="json", by_alias=True) if appointment else None


@router.patch("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    user_id: str = Body(alias="userId"),
    appointment: AppointmentUpdate = Body(),
    type: UpdateType = Body(),
    time_zone: str = Body("UTC", alias="timeZone"),
    service: AppointmentService = Depends(get_appointment_service),
) -> dict[str, Any] | None:
    """Schedule or cancel an appointment and notify the patient."""
    updated = await service.update_appointment(UpdateAppointmentParams(
        appointment_id=appointment_id,
        user_id=user_id,
        time_zone=time_zone,
        appointment=appointment,
        type=type,
    ))
    return updated.model_dump(mode="json", by_alias=True) if updated else None
