"""Tests for the appointment repository.

Covers:
- Create / get / update against a mocked Databases service
- Failures logged and returned as None
- Recent listing: newest-first query, cursor pagination, per-status counts
- Create → get round-trip through an in-memory store
"""

from __future__ import annotations

import json
import random
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from healthcare.appointments.repository import AppointmentRepository, count_by_status
from healthcare.appwrite import AppwriteError
from healthcare.schemas.appointments import Appointment, AppointmentCreate, AppointmentUpdate
from healthcare.schemas.enums import AppointmentStatus

# ── Helpers ──────────────────────────────────────────────────────────

_BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def _make_document(doc_id: str = "a1", status: str = "scheduled", minutes: int = 0, **overrides) -> dict:
    doc = {
        "$id": doc_id,
        "$createdAt": (_BASE_TIME + timedelta(minutes=minutes)).isoformat(),
        "$updatedAt": (_BASE_TIME + timedelta(minutes=minutes)).isoformat(),
        "$collectionId": "appointments",
        "$databaseId": "db",
        "$permissions": [],
        "userId": "u1",
        "patient": "p1",
        "schedule": "2024-01-01T10:00:00.000+00:00",
        "primaryPhysician": "Smith",
        "reason": "Checkup",
        "note": None,
        "status": status,
        "cancellationReason": None,
    }
    doc.update(overrides)
    return doc


def _make_create(**overrides) -> AppointmentCreate:
    fields = {
        "user_id": "u1",
        "patient": "p1",
        "schedule": datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        "primary_physician": "Smith",
        "reason": "Checkup",
        "note": "First visit",
        "status": AppointmentStatus.PENDING,
    }
    fields.update(overrides)
    return AppointmentCreate(**fields)


def _make_repository(databases: AsyncMock | object, page_size: int = 100) -> AppointmentRepository:
    return AppointmentRepository(databases, "db", "appointments", page_size=page_size)


class _InMemoryDatabases:
    """Stand-in for the Appwrite Databases service keeping documents in a dict."""

    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}
        self._clock = _BASE_TIME

    async def create_document(self, database_id, collection_id, document_id, data):
        self._clock += timedelta(seconds=1)
        doc = {"$id": document_id, "$createdAt": self._clock.isoformat(), **data}
        self.documents[document_id] = doc
        return dict(doc)

    async def get_document(self, database_id, collection_id, document_id):
        if document_id not in self.documents:
            raise AppwriteError("Document not found", code=404, error_type="document_not_found")
        return dict(self.documents[document_id])

    async def update_document(self, database_id, collection_id, document_id, data):
        if document_id not in self.documents:
            raise AppwriteError("Document not found", code=404, error_type="document_not_found")
        self.documents[document_id].update(data)
        return dict(self.documents[document_id])

    async def list_documents(self, database_id, collection_id, queries=None):
        parsed = [json.loads(q) for q in queries or []]
        limit = next((q["values"][0] for q in parsed if q["method"] == "limit"), 25)
        cursor = next((q["values"][0] for q in parsed if q["method"] == "cursorAfter"), None)
        ordered = sorted(self.documents.values(), key=lambda d: d["$createdAt"], reverse=True)
        start = 0
        if cursor is not None:
            start = next(i for i, d in enumerate(ordered) if d["$id"] == cursor) + 1
        return {"total": len(ordered), "documents": ordered[start:start + limit]}


class _GrowingDatabases(_InMemoryDatabases):
    """In-memory store that gains a new document right after the first list call."""

    def __init__(self) -> None:
        super().__init__()
        self.list_calls = 0

    async def list_documents(self, database_id, collection_id, queries=None):
        page = await super().list_documents(database_id, collection_id, queries)
        self.list_calls += 1
        if self.list_calls == 1:
            await self.create_document(database_id, collection_id, "late", {"status": "pending"})
        return page


# ── Create / get / update ────────────────────────────────────────────


class TestCreate:
    @pytest.mark.asyncio()
    async def test_create_returns_persisted_record(self):
        databases = AsyncMock()
        databases.create_document.return_value = _make_document("new-id", status="pending")
        repo = _make_repository(databases)

        created = await repo.create(_make_create())

        assert created is not None
        assert created.id == "new-id"
        assert created.created_at == _BASE_TIME
        args = databases.create_document.call_args.args
        assert args[0] == "db"
        assert args[1] == "appointments"
        assert args[2]  # generated ID
        assert args[3]["primaryPhysician"] == "Smith"
        assert args[3]["userId"] == "u1"
        assert args[3]["status"] == "pending"

    @pytest.mark.asyncio()
    async def test_create_generates_fresh_ids(self):
        databases = AsyncMock()
        databases.create_document.return_value = _make_document()
        repo = _make_repository(databases)

        await repo.create(_make_create())
        await repo.create(_make_create())

        first, second = (call.args[2] for call in databases.create_document.call_args_list)
        assert first != second

    @pytest.mark.asyncio()
    async def test_create_failure_returns_none(self):
        databases = AsyncMock()
        databases.create_document.side_effect = AppwriteError("Invalid document structure", code=400)
        repo = _make_repository(databases)

        assert await repo.create(_make_create()) is None


class TestGet:
    @pytest.mark.asyncio()
    async def test_get_existing(self):
        databases = AsyncMock()
        databases.get_document.return_value = _make_document("a1")
        repo = _make_repository(databases)

        appointment = await repo.get("a1")

        assert appointment is not None
        assert appointment.id == "a1"
        assert appointment.primary_physician == "Smith"
        databases.get_document.assert_awaited_once_with("db", "appointments", "a1")

    @pytest.mark.asyncio()
    async def test_get_not_found_returns_none(self):
        databases = AsyncMock()
        databases.get_document.side_effect = AppwriteError("Document not found", code=404)
        repo = _make_repository(databases)

        assert await repo.get("missing") is None

    @pytest.mark.asyncio()
    async def test_get_invalid_status_returns_none(self):
        databases = AsyncMock()
        databases.get_document.return_value = _make_document(status="archived")
        repo = _make_repository(databases)

        assert await repo.get("a1") is None


class TestUpdate:
    @pytest.mark.asyncio()
    async def test_update_sends_only_set_fields(self):
        databases = AsyncMock()
        databases.update_document.return_value = _make_document(
            status="cancelled", cancellationReason="Doctor unavailable"
        )
        repo = _make_repository(databases)

        updated = await repo.update(
            "a1",
            AppointmentUpdate(status=AppointmentStatus.CANCELLED, cancellation_reason="Doctor unavailable"),
        )

        assert updated is not None
        assert updated.status == AppointmentStatus.CANCELLED
        sent = databases.update_document.call_args.args[3]
        assert sent == {"status": "cancelled", "cancellationReason": "Doctor unavailable"}

    @pytest.mark.asyncio()
    async def test_update_failure_returns_none(self):
        databases = AsyncMock()
        databases.update_document.side_effect = AppwriteError("Server error", code=500)
        repo = _make_repository(databases)

        assert await repo.update("a1", AppointmentUpdate(status=AppointmentStatus.SCHEDULED)) is None


# ── Recent listing ───────────────────────────────────────────────────


class TestListRecent:
    @pytest.mark.asyncio()
    async def test_counts_and_order(self):
        databases = AsyncMock()
        databases.list_documents.return_value = {
            "total": 4,
            "documents": [
                _make_document("d4", "pending", minutes=4),
                _make_document("d3", "cancelled", minutes=3),
                _make_document("d2", "scheduled", minutes=2),
                _make_document("d1", "scheduled", minutes=1),
            ],
        }
        repo = _make_repository(databases)

        recent = await repo.list_recent()

        assert recent is not None
        assert recent.total_count == 4
        assert recent.scheduled_count == 2
        assert recent.pending_count == 1
        assert recent.cancelled_count == 1
        assert [a.id for a in recent.documents] == ["d4", "d3", "d2", "d1"]

        queries = [json.loads(q) for q in databases.list_documents.call_args.args[2]]
        assert {"method": "orderDesc", "attribute": "$createdAt"} in queries

    @pytest.mark.asyncio()
    async def test_empty_collection(self):
        databases = AsyncMock()
        databases.list_documents.return_value = {"total": 0, "documents": []}
        repo = _make_repository(databases)

        recent = await repo.list_recent()

        assert recent is not None
        assert recent.total_count == 0
        assert recent.documents == []

    @pytest.mark.asyncio()
    async def test_walks_every_page(self):
        databases = _InMemoryDatabases()
        repo = _make_repository(databases, page_size=3)
        for i in range(8):
            await repo.create(_make_create(reason=f"visit {i}"))

        recent = await repo.list_recent()

        assert recent is not None
        assert recent.total_count == 8
        assert len(recent.documents) == 8
        created = [a.created_at for a in recent.documents]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio()
    async def test_store_failure_returns_none(self):
        databases = AsyncMock()
        databases.list_documents.side_effect = AppwriteError("Service unavailable", code=503)
        repo = _make_repository(databases)

        assert await repo.list_recent() is None

    @pytest.mark.asyncio()
    async def test_record_created_between_pages_counted_once(self):
        databases = _GrowingDatabases()
        repo = _make_repository(databases, page_size=2)
        for i in range(3):
            await repo.create(_make_create(reason=f"visit {i}"))
        existing = set(databases.documents)

        recent = await repo.list_recent()

        assert recent is not None
        ids = [a.id for a in recent.documents]
        assert len(ids) == len(set(ids))
        assert set(ids) == existing
        assert recent.total_count == 3
        assert recent.pending_count == 3

    @pytest.mark.asyncio()
    async def test_pages_chained_by_cursor(self):
        databases = AsyncMock()
        databases.list_documents.side_effect = [
            {"total": 3, "documents": [_make_document("a3", minutes=3), _make_document("a2", minutes=2)]},
            {"total": 3, "documents": [_make_document("a1", minutes=1)]},
        ]
        repo = _make_repository(databases, page_size=2)

        recent = await repo.list_recent()

        assert recent is not None
        assert [a.id for a in recent.documents] == ["a3", "a2", "a1"]
        first, second = (
            [json.loads(q) for q in call.args[2]] for call in databases.list_documents.call_args_list
        )
        assert not any(q["method"] == "cursorAfter" for q in first)
        assert {"method": "cursorAfter", "values": ["a2"]} in second

    @pytest.mark.asyncio()
    async def test_overlapping_pages_deduplicated(self):
        databases = AsyncMock()
        databases.list_documents.side_effect = [
            {"total": 3, "documents": [_make_document("a3", "pending"), _make_document("a2", "pending")]},
            {"total": 3, "documents": [_make_document("a2", "pending"), _make_document("a1", "cancelled")]},
            {"total": 3, "documents": []},
        ]
        repo = _make_repository(databases, page_size=2)

        recent = await repo.list_recent()

        assert recent is not None
        assert [a.id for a in recent.documents] == ["a3", "a2", "a1"]
        assert (recent.total_count, recent.pending_count, recent.cancelled_count) == (3, 2, 1)

    @pytest.mark.asyncio()
    async def test_empty_page_ends_listing(self):
        databases = AsyncMock()
        databases.list_documents.return_value = {"total": 2, "documents": []}
        repo = _make_repository(databases, page_size=2)

        recent = await repo.list_recent()

        assert recent is not None
        assert recent.total_count == 0
        databases.list_documents.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_repeated_page_ends_listing(self):
        databases = AsyncMock()
        databases.list_documents.return_value = {
            "total": 5,
            "documents": [_make_document("a2", minutes=2), _make_document("a1", minutes=1)],
        }
        repo = _make_repository(databases, page_size=2)

        recent = await repo.list_recent()

        assert recent is not None
        assert [a.id for a in recent.documents] == ["a2", "a1"]
        assert databases.list_documents.await_count == 2

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError, match="page_size"):
            _make_repository(AsyncMock(), page_size=0)


class TestCountByStatus:
    def test_counters_sum_to_total(self):
        rng = random.Random(7)
        statuses = list(AppointmentStatus)
        for size in (0, 1, 5, 40):
            appointments = [
                Appointment.model_validate(_make_document(f"d{i}", rng.choice(statuses).value))
                for i in range(size)
            ]
            counts = count_by_status(appointments)
            assert counts.total_count == size
            assert counts.scheduled_count + counts.pending_count + counts.cancelled_count == size

    def test_each_status_counted_once(self):
        appointments = [
            Appointment.model_validate(_make_document("d1", "scheduled")),
            Appointment.model_validate(_make_document("d2", "pending")),
            Appointment.model_validate(_make_document("d3", "cancelled")),
        ]
        counts = count_by_status(appointments)
        assert (counts.scheduled_count, counts.pending_count, counts.cancelled_count) == (1, 1, 1)


# ── Round-trip ───────────────────────────────────────────────────────


class TestRoundTrip:
    @pytest.mark.asyncio()
    async def test_create_then_get(self):
        repo = _make_repository(_InMemoryDatabases())
        payload = _make_create()

        created = await repo.create(payload)
        assert created is not None
        fetched = await repo.get(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.created_at == created.created_at
        stored = fetched.model_dump(exclude={"id", "created_at", "updated_at"})
        assert stored == payload.model_dump()
