"""Consent and data-subject-rights models.

A data subject holds at most one :class:`Consent` at a time.  The record
is immutable: every change produces a new copy that replaces the stored
one, so readers never observe a half-applied update.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Final

from pydantic import BaseModel, Field, model_validator

from governance.models.enums import GrantName

GRANT_NAMES: Final[frozenset[str]] = frozenset(g.value for g in GrantName)


class ContactInfo(BaseModel):
    """Where the data subject can be reached about their data."""

    model_config = {"frozen": True}

    email: str = Field(..., min_length=3, max_length=254)
    phone: str | None = None


class ConsentGrants(BaseModel):
    """The named boolean grants of a consent record.

    Every grant defaults to ``False``: absence of a grant is a denial.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    data_processing: bool = False
    analytics: bool = False
    marketing: bool = False
    data_sharing: bool = False
    data_retention: bool = False
    profiling: bool = False
    automated_decision_making: bool = False
    third_party_sharing: bool = False
    data_portability: bool = False
    right_to_erasure: bool = False

    def is_granted(self, name: str) -> bool:
        if name not in GRANT_NAMES:
            return False
        return bool(getattr(self, name))

    def merged(self, updates: Mapping[str, bool]) -> ConsentGrants:
        """Return a copy with *updates* applied; keys must be known grant names."""
        return self.model_copy(update={name: bool(value) for name, value in updates.items()})

    def active(self) -> list[GrantName]:
        return [g for g in GrantName if getattr(self, g.value)]


class Consent(BaseModel):
    """Current consent state of one data subject."""

    model_config = {"frozen": True}

    consent_id: str
    subject_id: str = Field(..., min_length=1)
    version: str
    consent_date: datetime
    last_updated: datetime
    grants: ConsentGrants = Field(default_factory=ConsentGrants)
    legal_basis: str
    purposes: list[str]
    retention_days: int = Field(..., gt=0)
    withdrawal_method: str
    contact_info: ContactInfo

    @model_validator(mode="after")
    def _check_timeline(self) -> Consent:
        if self.last_updated < self.consent_date:
            raise ValueError("last_updated must not precede consent_date")
        return self


class DataSubjectRights(BaseModel):
    """Legal entitlements of a registered data subject.

    Always all-true today; kept separate from :class:`Consent` so that
    jurisdiction-specific rights can vary without touching consent.
    """

    model_config = {"frozen": True}

    subject_id: str
    right_to_access: bool = True
    right_to_rectification: bool = True
    right_to_erasure: bool = True
    right_to_restrict_processing: bool = True
    right_to_data_portability: bool = True
    right_to_object: bool = True
    right_to_withdraw_consent: bool = True
    right_to_lodge_complaint: bool = True
