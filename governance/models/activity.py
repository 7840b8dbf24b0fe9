"""Processing activity catalog entries and the audit records that cite them."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class DataProcessingActivity(BaseModel):
    """A declared purpose and mechanism for handling a category of data.

    Reference data: carries no subject-specific state.  Validation of
    the catalog rules (positive retention, non-empty categories and
    legal basis) happens in the catalog so that the failure surfaces as
    an ``InvalidActivityError`` rather than a pydantic error.
    """

    model_config = {"frozen": True}

    activity_id: str = Field(..., min_length=1)
    name: str
    purpose: str
    legal_basis: str
    data_categories: list[str] = Field(default_factory=list)
    data_subjects: list[str] = Field(default_factory=list)
    recipients: list[str] = Field(default_factory=list)
    transfers: list[str] = Field(default_factory=list)
    retention_days: int
    security_measures: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class DataProcessingRecord(BaseModel):
    """Append-only audit entry for one processing event."""

    model_config = {"frozen": True}

    record_id: str
    subject_id: str
    activity_id: str
    data_type: str
    purpose: str
    legal_basis: str
    data_categories: list[str]
    retention_days: int
    processed_at: datetime
    # Empty when no consent was in force: processing may rest on another legal basis.
    consent_id: str = ""
    automated_decision: bool = False
    profiling: bool = False
