from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from governance.models.enums import AssessmentStatus, RiskLevel


class AssessmentInput(BaseModel):
    """Risk review details supplied when creating an assessment."""

    risk_level: RiskLevel
    data_subjects: int = Field(default=0, ge=0)
    data_categories: list[str] = Field(default_factory=list)
    processing_purposes: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    mitigation_measures: list[str] = Field(default_factory=list)
    residual_risks: list[str] = Field(default_factory=list)


class PrivacyImpactAssessment(BaseModel):
    """A privacy impact assessment (PIA) of one processing activity."""

    model_config = {"frozen": True}

    assessment_id: str
    activity_id: str
    assessment_date: datetime
    risk_level: RiskLevel
    data_subjects: int = 0
    data_categories: list[str] = Field(default_factory=list)
    processing_purposes: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    mitigation_measures: list[str] = Field(default_factory=list)
    residual_risks: list[str] = Field(default_factory=list)
    approval_status: AssessmentStatus = AssessmentStatus.PENDING
    approved_by: str | None = None
    approved_at: datetime | None = None
