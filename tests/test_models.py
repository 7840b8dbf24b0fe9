"""Tests for data models: enums, consent, activities and export envelopes."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import orjson
import pytest
from pydantic import ValidationError

from governance.models import (
    AccessScope,
    BreachSeverity,
    BreachStatus,
    Consent,
    ConsentGrants,
    ContactInfo,
    DataSubjectRights,
    DeletionOutcome,
    GrantName,
    PortabilityExport,
    SubsystemDeletion,
)

_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _consent(**overrides: object) -> Consent:
    fields: dict[str, object] = {
        "consent_id": "consent-1",
        "subject_id": "u1",
        "version": "1.0",
        "consent_date": _NOW,
        "last_updated": _NOW,
        "legal_basis": "Consent",
        "purposes": ["service_provision"],
        "retention_days": 365,
        "withdrawal_method": "email",
        "contact_info": ContactInfo(email="privacy@example.com"),
    }
    fields.update(overrides)
    return Consent(**fields)


# -----------------------------------------------------------------------
# Enum tests
# -----------------------------------------------------------------------


class TestGrantName:
    def test_values(self) -> None:
        expected = {
            "data_processing",
            "analytics",
            "marketing",
            "data_sharing",
            "data_retention",
            "profiling",
            "automated_decision_making",
            "third_party_sharing",
            "data_portability",
            "right_to_erasure",
        }
        assert {g.value for g in GrantName} == expected, "GrantName should have exactly 10 values"

    def test_matches_grant_fields(self) -> None:
        assert set(ConsentGrants.model_fields) == {g.value for g in GrantName}, (
            "every grant name needs a field on ConsentGrants"
        )

    def test_str_enum_behavior(self) -> None:
        assert str(GrantName.MARKETING) == "marketing"
        assert AccessScope.FULL == "full"


class TestLifecycleEnums:
    def test_breach_status_values(self) -> None:
        assert [s.value for s in BreachStatus] == ["investigating", "contained", "resolved", "reported"]

    def test_breach_severity_values(self) -> None:
        assert [s.value for s in BreachSeverity] == ["low", "medium", "high", "critical"]


# -----------------------------------------------------------------------
# Consent
# -----------------------------------------------------------------------


class TestConsentGrants:
    def test_default_deny(self) -> None:
        grants = ConsentGrants()
        assert grants.active() == []
        assert all(grants.is_granted(g) is False for g in GrantName)

    def test_unknown_name_not_granted(self) -> None:
        assert ConsentGrants(data_processing=True).is_granted("mind_reading") is False

    def test_unknown_field_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            ConsentGrants(mind_reading=True)

    def test_merged_returns_copy(self) -> None:
        original = ConsentGrants(analytics=True)
        merged = original.merged({"marketing": True, "analytics": False})
        assert original.analytics is True, "merge must not mutate the original"
        assert merged.active() == [GrantName.MARKETING]

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            ConsentGrants().marketing = True


class TestConsent:
    def test_valid(self) -> None:
        consent = _consent(grants=ConsentGrants(data_processing=True))
        assert consent.grants.is_granted(GrantName.DATA_PROCESSING)

    def test_last_updated_before_consent_date_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _consent(last_updated=_NOW - timedelta(seconds=1))

    def test_retention_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            _consent(retention_days=0)

    def test_subject_id_required(self) -> None:
        with pytest.raises(ValidationError):
            _consent(subject_id="")

    def test_rights_default_all_true(self) -> None:
        rights = DataSubjectRights(subject_id="u1")
        values = rights.model_dump(exclude={"subject_id"})
        assert len(values) == 8
        assert all(values.values())


# -----------------------------------------------------------------------
# Rights envelopes
# -----------------------------------------------------------------------


class TestDeletionOutcome:
    def test_all_succeeded(self) -> None:
        outcome = DeletionOutcome(results=[SubsystemDeletion(subsystem="profiles", success=True)])
        assert outcome.succeeded is True
        assert outcome.failed_subsystems == []

    def test_partial_failure(self) -> None:
        outcome = DeletionOutcome(
            results=[
                SubsystemDeletion(subsystem="profiles", success=True),
                SubsystemDeletion(subsystem="scans", success=False),
            ]
        )
        assert outcome.succeeded is False
        assert outcome.failed_subsystems == ["scans"]

    def test_empty_outcome_succeeds(self) -> None:
        assert DeletionOutcome().succeeded is True


class TestPortabilityExport:
    def test_to_json(self) -> None:
        export = PortabilityExport(
            version="1.0",
            export_date=_NOW,
            request_id="req-1",
            subject_id="u1",
            data={"profile": {"name": "A"}},
            data_schema={"type": "object", "version": "1.0"},
        )
        payload = orjson.loads(export.to_json())
        assert payload["schema"] == {"type": "object", "version": "1.0"}
        assert payload["export_date"].startswith("2026-01-15T12:00:00")
        assert payload["format"] == "JSON"
