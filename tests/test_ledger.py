"""Tests for the append-only processing record ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from governance.engine import GovernanceEngine
from governance.errors import InvalidArgumentError, UnknownActivityError

if TYPE_CHECKING:
    from tests.conftest import FakeClock


async def _record(engine: GovernanceEngine, subject_id: str = "u1", **options: object):
    return await engine.record_processing(
        subject_id,
        "health-data-processing",
        "symptom_log",
        "Gut health monitoring",
        "Explicit consent",
        ["health_data"],
        **options,
    )


class TestRecordProcessing:
    async def test_record_with_consent(self, seeded_engine: GovernanceEngine, clock: FakeClock) -> None:
        consent = await seeded_engine.register_consent("u1", {"data_processing": True})
        record = await _record(seeded_engine)

        assert record.record_id == "record-2"
        assert record.subject_id == "u1"
        assert record.activity_id == "health-data-processing"
        assert record.consent_id == consent.consent_id
        assert record.processed_at == clock.now
        assert record.data_categories == ["health_data"]

    async def test_record_without_consent_is_logged_not_blocked(self, seeded_engine: GovernanceEngine) -> None:
        record = await _record(seeded_engine, "anonymous")
        assert record.consent_id == "", "processing on another legal basis carries no consent id"
        assert await seeded_engine.ledger.record_count() == 1

    async def test_retention_defaults_to_activity(self, seeded_engine: GovernanceEngine) -> None:
        record = await _record(seeded_engine)
        assert record.retention_days == 90

    async def test_retention_override(self, seeded_engine: GovernanceEngine) -> None:
        record = await _record(seeded_engine, retention_days=14)
        assert record.retention_days == 14

    async def test_non_positive_retention_rejected(self, seeded_engine: GovernanceEngine) -> None:
        with pytest.raises(InvalidArgumentError):
            await _record(seeded_engine, retention_days=0)
        assert await seeded_engine.ledger.record_count() == 0

    async def test_flags(self, seeded_engine: GovernanceEngine) -> None:
        record = await _record(seeded_engine, automated_decision=True, profiling=True)
        assert record.automated_decision is True
        assert record.profiling is True

    async def test_unknown_activity_appends_nothing(self, seeded_engine: GovernanceEngine) -> None:
        with pytest.raises(UnknownActivityError):
            await seeded_engine.record_processing(
                "u1", "crypto-mining", "cpu", "profit", "none", ["compute"]
            )
        assert await seeded_engine.list_records() == []

    async def test_unseeded_catalog_rejects_everything(self, engine: GovernanceEngine) -> None:
        with pytest.raises(UnknownActivityError):
            await _record(engine)


class TestListRecords:
    async def test_append_order_preserved(self, seeded_engine: GovernanceEngine, clock: FakeClock) -> None:
        first = await _record(seeded_engine, "u1")
        clock.advance(seconds=1)
        second = await _record(seeded_engine, "u2")
        clock.advance(seconds=1)
        third = await _record(seeded_engine, "u1")

        assert await seeded_engine.list_records() == [first, second, third]
        assert await seeded_engine.list_records("u1") == [first, third]
        assert await seeded_engine.ledger.record_count() == 3

    async def test_erasure_does_not_remove_records(self, seeded_engine: GovernanceEngine) -> None:
        await seeded_engine.register_consent("u1", {"right_to_erasure": True})
        record = await _record(seeded_engine)
        await seeded_engine.process_erasure_request("u1")

        assert await seeded_engine.list_records("u1") == [record], "audit records outlive erasure"


class TestAuditIntegrity:
    async def test_listed_records_cannot_edit_ledger(self, seeded_engine: GovernanceEngine) -> None:
        await _record(seeded_engine)
        (await seeded_engine.list_records())[0].data_categories.clear()
        (await seeded_engine.list_records("u1"))[0].data_categories.append("biometrics")

        stored = (await seeded_engine.list_records())[0]
        assert stored.data_categories == ["health_data"], (
            f"ledger records must not change through a returned copy: got {stored.data_categories}"
        )

    async def test_returned_record_is_detached(self, seeded_engine: GovernanceEngine) -> None:
        record = await _record(seeded_engine)
        record.data_categories.append("biometrics")
        assert (await seeded_engine.list_records("u1"))[0].data_categories == ["health_data"]
