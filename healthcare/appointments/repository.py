"""Appointment repository — Appwrite document operations for the appointment collection.

Every method catches its own failures, logs them, and returns None. Callers
treat None as "the store call failed" (unreachable, rejected, not found).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from healthcare.appwrite import Databases, Query, unique_id
from healthcare.schemas.appointments import (
    Appointment,
    AppointmentCounts,
    AppointmentCreate,
    AppointmentUpdate,
    RecentAppointments,
)
from healthcare.schemas.enums import AppointmentStatus

logger = logging.getLogger(__name__)

_CREATED_AT = "$createdAt"


def count_by_status(appointments: Iterable[Appointment]) -> AppointmentCounts:
    """Tally appointments per status in a single pass."""
    counts = AppointmentCounts()
    for appointment in appointments:
        counts.total_count += 1
        if appointment.status == AppointmentStatus.SCHEDULED:
            counts.scheduled_count += 1
        elif appointment.status == AppointmentStatus.PENDING:
            counts.pending_count += 1
        elif appointment.status == AppointmentStatus.CANCELLED:
            counts.cancelled_count += 1
    return counts


class AppointmentRepository:
    """CRUD + recency listing over one Appwrite collection."""

    def __init__(
        self,
        databases: Databases,
        database_id: str,
        collection_id: str,
        page_size: int = 100,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._databases = databases
        self._database_id = database_id
        self._collection_id = collection_id
        self._page_size = page_size

    async def create(self, appointment: AppointmentCreate) -> Appointment | None:
        """Persist a new appointment under a freshly generated ID."""
        try:
            document = await self._databases.create_document(
                self._database_id,
                self._collection_id,
                unique_id(),
                appointment.to_document(),
            )
            created = Appointment.model_validate(document)
        except Exception:
            logger.exception("An error occurred while creating a new appointment")
            return None

        logger.info("Appointment created: id=%s status=%s", created.id, created.status.value)
        return created

    async def get(self, appointment_id: str) -> Appointment | None:
        try:
            document = await self._databases.get_document(
                self._database_id,
                self._collection_id,
                appointment_id,
            )
            return Appointment.model_validate(document)
        except Exception:
            logger.exception("An error occurred while retrieving appointment %s", appointment_id)
            return None

    async def list_recent(self) -> RecentAppointments | None:
        """Every appointment, newest first, plus per-status counts.

        Appwrite pages list results. Pages are chained with a cursor on the
        last document seen, so a record created mid-listing cannot shift the
        window and be read twice. Documents are still keyed by ID before
        counting.
        """
        try:
            documents = await self._fetch_all_newest_first()
            appointments = [Appointment.model_validate(doc) for doc in documents]
        except Exception:
            logger.exception("An error occurred while retrieving the recent appointments")
            return None

        counts = count_by_status(appointments)
        return RecentAppointments(**counts.model_dump(), documents=appointments)

    async def _fetch_all_newest_first(self) -> list[dict]:
        documents: dict[str, dict] = {}
        cursor: str | None = None
        while True:
            queries = [Query.order_desc(_CREATED_AT), Query.limit(self._page_size)]
            if cursor is not None:
                queries.append(Query.cursor_after(cursor))

            page = await self._databases.list_documents(self._database_id, self._collection_id, queries)
            batch = page.get("documents", [])
            if not batch:
                return list(documents.values())

            seen = len(documents)
            for document in batch:
                documents.setdefault(document["$id"], document)
            cursor = batch[-1]["$id"]
            if len(batch) < self._page_size or len(documents) == seen:
                return list(documents.values())

    async def update(self, appointment_id: str, appointment: AppointmentUpdate) -> Appointment | None:
        """Apply a partial update and return the full updated record."""
        try:
            document = await self._databases.update_document(
                self._database_id,
                self._collection_id,
                appointment_id,
                appointment.to_document(),
            )
            return Appointment.model_validate(document)
        except Exception:
            logger.exception("An error occurred while updating appointment %s", appointment_id)
            return None
