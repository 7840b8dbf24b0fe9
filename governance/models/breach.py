from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from governance.models.enums import BreachSeverity, BreachStatus, BreachType


class BreachReport(BaseModel):
    """Incident details supplied when a breach is recorded.

    ``discovery_date`` defaults to the time of recording when omitted;
    ``breach_date`` defaults to the discovery date.
    """

    breach_date: datetime | None = None
    discovery_date: datetime | None = None
    affected_subjects: int = Field(default=0, ge=0)
    data_categories: list[str] = Field(default_factory=list)
    breach_type: BreachType
    severity: BreachSeverity
    description: str = ""
    cause: str = ""
    measures: list[str] = Field(default_factory=list)
    subject_notification: bool = False

    @field_validator("breach_date", "discovery_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class DataBreachRecord(BaseModel):
    """A recorded personal-data breach and its handling state."""

    model_config = {"frozen": True}

    breach_id: str
    breach_date: datetime
    discovery_date: datetime
    notification_date: datetime | None = None
    affected_subjects: int = 0
    data_categories: list[str] = Field(default_factory=list)
    breach_type: BreachType
    severity: BreachSeverity
    description: str = ""
    cause: str = ""
    measures: list[str] = Field(default_factory=list)
    status: BreachStatus = BreachStatus.INVESTIGATING
    regulatory_notification: bool = False
    subject_notification: bool = False
    reported_to: str | None = None
    reported_at: datetime | None = None
