"""Appointment repository, notification dispatcher and lifecycle service."""

from healthcare.appointments.notifications import NotificationDispatcher, build_notification_message
from healthcare.appointments.repository import AppointmentRepository, count_by_status
from healthcare.appointments.service import AppointmentService, AppointmentUpdateError

__all__ = [
    "AppointmentRepository",
    "AppointmentService",
    "AppointmentUpdateError",
    "NotificationDispatcher",
    "build_notification_message",
    "count_by_status",
]
