"""Notification dispatcher — patient email and SMS through Appwrite Messaging.

The two channels are independent: each send catches and logs its own
failure, and neither is retried. A caller sending both may end up with a
partial delivery (email sent, SMS failed); that outcome is only logged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from healthcare.admin.events import EventEmitter
from healthcare.admin.formatters import format_date_time
from healthcare.appwrite import Messaging, unique_id
from healthcare.schemas.enums import UpdateType
from healthcare.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)


def build_notification_message(
    update_type: UpdateType,
    schedule: datetime | str,
    time_zone: str,
    *,
    clinic_name: str,
    primary_physician: str | None = None,
    cancellation_reason: str | None = None,
    directions_url: str = "",
) -> str:
    """Compose the patient-facing text for a schedule or cancel action."""
    when = format_date_time(schedule, time_zone)["date_time"]
    if update_type == UpdateType.SCHEDULE:
        body = (
            f"Your appointment is confirmed for {when} with Dr. {primary_physician}.  "
            f"Get Directions:  {directions_url}"
        )
    else:
        body = (
            f"We regret to inform you that your appointment for {when} is cancelled.  "
            f"Reason:  {cancellation_reason}."
        )
    return f"Greetings from {clinic_name}. {body}"


class NotificationDispatcher:
    """Sends single-recipient email/SMS messages. Never raises."""

    def __init__(self, messaging: Messaging, events: EventEmitter) -> None:
        self._messaging = messaging
        self._events = events

    async def send_email(
        self,
        recipient_id: str,
        subject: str,
        content: str,
        attachments: list[str] | None = None,
    ) -> dict[str, Any] | None:
        """Send one email to an Appwrite user. Returns the message record, or None on failure."""
        try:
            message = await self._messaging.create_email(
                unique_id(),
                subject,
                content,
                users=[recipient_id],
                attachments=attachments or [],
            )
        except Exception as exc:
            logger.exception("An error occurred while sending the email to %s", recipient_id)
            await self._emit_outcome(recipient_id, "email", error=str(exc))
            return None

        await self._emit_outcome(recipient_id, "email", message_id=message.get("$id"))
        return message

    async def send_sms(self, recipient_id: str, content: str) -> dict[str, Any] | None:
        """Send one SMS to an Appwrite user. Returns the message record, or None on failure."""
        try:
            message = await self._messaging.create_sms(
                unique_id(),
                content,
                users=[recipient_id],
            )
        except Exception as exc:
            logger.exception("An error occurred while sending SMS to %s", recipient_id)
            await self._emit_outcome(recipient_id, "sms", error=str(exc))
            return None

        await self._emit_outcome(recipient_id, "sms", message_id=message.get("$id"))
        return message

    async def _emit_outcome(
        self,
        recipient_id: str,
        channel: str,
        message_id: str | None = None,
        error: str | None = None,
    ) -> None:
        data: dict[str, Any] = {"channel": channel}
        if error is None:
            data["message_id"] = message_id
        else:
            data["error"] = error
        await self._events.emit(SystemEvent(
            event_type=EventType.NOTIFICATION_SENT if error is None else EventType.NOTIFICATION_FAILED,
            user_id=recipient_id,
            data=data,
            source_module="appointments.notifications",
        ))
