"""Audit log subscriber — writes every SystemEvent as a structured log line.

Subscribed to the backend's EventEmitter at startup. Patient message
content is never part of event data; only IDs, statuses and channels.

Never raises: failures are logged and never reach the emitting request.
"""

from __future__ import annotations

import logging

import structlog

from healthcare.schemas.events import SystemEvent

logger = logging.getLogger(__name__)
audit_logger = structlog.get_logger("healthcare.audit")


async def audit_on_event(event: SystemEvent) -> None:
    """Emit one structured audit record for a SystemEvent."""
    try:
        audit_logger.info(
            event.event_type.value,
            event_id=str(event.id),
            appointment_id=event.appointment_id,
            user_id=event.user_id,
            actor_id=event.actor_id,
            actor_role=event.actor_role,
            source=event.source_module,
            **event.data,
        )
    except Exception:
        logger.exception(
            "Failed to write audit event: %s (appointment=%s)",
            event.event_type.value,
            event.appointment_id,
        )
