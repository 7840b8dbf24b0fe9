from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ReportSummary(BaseModel):
    total_consents: int
    active_consents: int
    processing_activities: int
    privacy_assessments: int
    data_breaches: int
    compliance_score: int = Field(..., ge=0, le=100)


class RiskSummary(BaseModel):
    high_risk_activities: int
    recent_breaches: int
    pending_assessments: int
    unassessed_activities: list[str] = Field(default_factory=list)


class Deduction(BaseModel):
    """One triggered scoring rule and the points it removed."""

    rule: str
    points: int
    recommendation: str


class ComplianceReport(BaseModel):
    """Point-in-time governance posture across all stores."""

    report_date: datetime
    summary: ReportSummary
    consent_breakdown: dict[str, int]
    risk_assessment: RiskSummary
    deductions: list[Deduction] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
