"""Tests for the processing activity catalog and its built-in seed."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from governance.data.seed import default_activities
from governance.engine import GovernanceEngine
from governance.errors import InvalidActivityError, UnknownActivityError
from governance.models import DataProcessingActivity
from governance.services.activity_catalog import validate_activity


def _activity(**overrides: object) -> DataProcessingActivity:
    fields: dict[str, object] = {
        "activity_id": "newsletter",
        "name": "Newsletter",
        "purpose": "Monthly product news",
        "legal_basis": "Consent",
        "data_categories": ["contact_information"],
        "retention_days": 180,
    }
    fields.update(overrides)
    return DataProcessingActivity(**fields)


class TestSeedDefaults:
    async def test_seed_inserts_three_activities(self, engine: GovernanceEngine) -> None:
        added = await engine.seed_defaults()
        ids = sorted(a.activity_id for a in await engine.list_activities())

        assert len(added) == 3
        assert ids == ["analytics-processing", "health-data-processing", "user-registration"]

    async def test_seed_is_idempotent(self, engine: GovernanceEngine) -> None:
        await engine.seed_defaults()
        added = await engine.seed_defaults()
        assert added == [], "second seed must not add anything"
        assert len(await engine.list_activities()) == 3

    async def test_seed_values(self, seeded_engine: GovernanceEngine) -> None:
        registration = await seeded_engine.get_activity("user-registration")
        health = await seeded_engine.get_activity("health-data-processing")

        assert registration.retention_days == 365
        assert health.retention_days == 90
        assert health.legal_basis == "Explicit consent"
        assert "health_data" in health.data_categories

    async def test_seed_keeps_custom_entry_with_same_id(self, engine: GovernanceEngine) -> None:
        custom = _activity(activity_id="user-registration", retention_days=30)
        await engine.register_activity(custom)
        added = await engine.seed_defaults()

        assert len(added) == 2
        assert (await engine.get_activity("user-registration")).retention_days == 30

    def test_default_activities_are_valid(self) -> None:
        stamp = datetime(2026, 3, 1, tzinfo=UTC)
        for activity in default_activities(stamp):
            validate_activity(activity)
            assert activity.created_at == stamp


class TestRegisterActivity:
    async def test_register_and_get(self, engine: GovernanceEngine) -> None:
        activity = _activity()
        assert await engine.register_activity(activity) == activity
        assert await engine.get_activity("newsletter") == activity

    async def test_duplicate_rejected(self, engine: GovernanceEngine) -> None:
        await engine.register_activity(_activity())
        with pytest.raises(InvalidActivityError):
            await engine.register_activity(_activity(name="Other"))
        assert (await engine.get_activity("newsletter")).name == "Newsletter"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"retention_days": 0},
            {"retention_days": -1},
            {"data_categories": []},
            {"data_categories": ["  "]},
            {"legal_basis": ""},
        ],
    )
    async def test_invalid_activity_rejected(self, engine: GovernanceEngine, overrides: dict[str, object]) -> None:
        with pytest.raises(InvalidActivityError) as exc_info:
            await engine.register_activity(_activity(**overrides))
        assert exc_info.value.context["problems"], "the failing rule should be reported"
        assert await engine.list_activities() == []

    async def test_unknown_activity(self, engine: GovernanceEngine) -> None:
        with pytest.raises(UnknownActivityError):
            await engine.get_activity("does-not-exist")

    async def test_exists(self, seeded_engine: GovernanceEngine) -> None:
        assert await seeded_engine.catalog.exists("analytics-processing") is True
        assert await seeded_engine.catalog.exists("nope") is False
