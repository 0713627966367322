"""Appointment service — create, read, list and drive the schedule/cancel lifecycle.

The lifecycle update persists the change, notifies the patient by email and
then SMS, and revalidates the cached admin view. There is no transition
guard: any appointment can be scheduled or cancelled again.

Every public method returns None on failure; the cause is in the logs.
"""

from __future__ import annotations

import logging
from typing import Any

from healthcare.admin.cache import PageCache
from healthcare.admin.events import EventEmitter
from healthcare.appointments.notifications import NotificationDispatcher, build_notification_message
from healthcare.appointments.repository import AppointmentRepository
from healthcare.config import NotificationSettings
from healthcare.schemas.appointments import (
    Appointment,
    AppointmentCreate,
    RecentAppointments,
    UpdateAppointmentParams,
)
from healthcare.schemas.enums import UpdateType
from healthcare.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

ADMIN_PATH = "/admin"


class AppointmentUpdateError(Exception):
    """The store returned no record for an appointment update."""

    def __init__(self, appointment_id: str) -> None:
        super().__init__(f"Update of appointment {appointment_id} produced no result")
        self.appointment_id = appointment_id


class AppointmentService:
    """Appointment operations exposed to the web layer."""

    def __init__(
        self,
        repository: AppointmentRepository,
        dispatcher: NotificationDispatcher,
        page_cache: PageCache,
        notification_settings: NotificationSettings,
        events: EventEmitter,
    ) -> None:
        self._repository = repository
        self._dispatcher = dispatcher
        self._page_cache = page_cache
        self._notifications = notification_settings
        self._events = events

    async def create_appointment(self, appointment: AppointmentCreate) -> Appointment | None:
        created = await self._repository.create(appointment)
        if created is None:
            return None

        await self._page_cache.revalidate(ADMIN_PATH)
        await self._events.emit(SystemEvent(
            event_type=EventType.APPOINTMENT_CREATED,
            appointment_id=created.id,
            user_id=created.user_id,
            data={"status": created.status.value, "physician": created.primary_physician},
            source_module="appointments.service",
        ))
        return created

    async def get_appointment(self, appointment_id: str) -> Appointment | None:
        return await self._repository.get(appointment_id)

    async def get_recent_appointment_list(self) -> RecentAppointments | None:
        return await self._repository.list_recent()

    async def update_appointment(self, params: UpdateAppointmentParams) -> Appointment | None:
        """Persist a schedule/cancel change and notify the patient.

        Steps:
        1. Partial update through the repository
        2. No result → AppointmentUpdateError (logged, returns None, nothing sent)
        3. Compose the message for params.type
        4. Email, then SMS; each failure is isolated inside the dispatcher
        5. Revalidate the admin view
        """
        try:
            updated = await self._repository.update(params.appointment_id, params.appointment)
            if updated is None:
                raise AppointmentUpdateError(params.appointment_id)

            message = self._compose_message(params, updated)

            await self._dispatcher.send_email(
                params.user_id,
                self._notifications.notification_subject,
                message,
            )
            await self._dispatcher.send_sms(params.user_id, message)

            await self._page_cache.revalidate(ADMIN_PATH)
        except Exception:
            logger.exception("An error occurred while updating appointment %s", params.appointment_id)
            await self._events.emit(SystemEvent(
                event_type=EventType.APPOINTMENT_UPDATE_FAILED,
                appointment_id=params.appointment_id,
                user_id=params.user_id,
                data={"type": params.type.value},
                source_module="appointments.service",
            ))
            return None

        await self._events.emit(SystemEvent(
            event_type=(
                EventType.APPOINTMENT_BOOKED
                if params.type == UpdateType.SCHEDULE
                else EventType.APPOINTMENT_CANCELLED
            ),
            appointment_id=updated.id,
            user_id=params.user_id,
            data={"status": updated.status.value},
            source_module="appointments.service",
        ))
        logger.info(
            "Appointment %s: id=%s status=%s",
            params.type.value,
            updated.id,
            updated.status.value,
        )
        return updated

    def _compose_message(self, params: UpdateAppointmentParams, updated: Appointment) -> str:
        """Build the notification text; fields left out of the partial update come from the stored record."""
        change = params.appointment
        sent = change.model_fields_set

        def pick(field: str) -> Any:
            return getattr(change if field in sent else updated, field)

        return build_notification_message(
            params.type,
            pick("schedule"),
            params.time_zone,
            clinic_name=self._notifications.clinic_name,
            primary_physician=pick("primary_physician"),
            cancellation_reason=pick("cancellation_reason"),
            directions_url=self._notifications.directions_url,
        )
