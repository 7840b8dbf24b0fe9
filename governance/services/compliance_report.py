"""Compliance reporter: read-only aggregate over all engine stores.

The score and the recommendations come from one rule table.  Each rule
computes the points it deducts from a snapshot of the stores; a rule
that deducts anything also contributes its recommendation, so the prose
of a report can never disagree with its score.

The snapshot is a best-effort sequential read of each store.  Reports
are advisory, so cross-store atomicity is not required.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Final

import structlog

from governance.models.enums import AssessmentStatus, GrantName, RiskLevel
from governance.models.report import ComplianceReport, Deduction, ReportSummary, RiskSummary
from governance.services.clock import Clock, utcnow

if TYPE_CHECKING:
    from governance.models.activity import DataProcessingActivity
    from governance.models.assessment import PrivacyImpactAssessment
    from governance.models.breach import DataBreachRecord
    from governance.models.consent import Consent
    from governance.services.stores import ActivityStore, AssessmentStore, BreachStore, ConsentStore

logger = structlog.get_logger(__name__)

_MAX_SCORE: Final[int] = 100
_MIN_ACTIVITIES: Final[int] = 3


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class GovernanceSnapshot:
    """Store contents as read at report time."""

    taken_at: datetime
    lookback: timedelta
    consents: list[Consent]
    activities: list[DataProcessingActivity]
    assessments: list[PrivacyImpactAssessment]
    breaches: list[DataBreachRecord]

    @property
    def unassessed_activities(self) -> list[str]:
        assessed = {a.activity_id for a in self.assessments}
        return [a.activity_id for a in self.activities if a.activity_id not in assessed]

    @property
    def recent_breaches(self) -> list[DataBreachRecord]:
        return [b for b in self.breaches if self.taken_at - b.discovery_date < self.lookback]


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ScoringRule:
    key: str
    deduct: Callable[[GovernanceSnapshot], int]
    recommend: Callable[[GovernanceSnapshot], str]


RULES: Final[tuple[ScoringRule, ...]] = (
    ScoringRule(
        key="no_consent_records",
        deduct=lambda s: 30 if not s.consents else 0,
        recommend=lambda s: "Implement user consent management system",
    ),
    ScoringRule(
        key="few_processing_activities",
        deduct=lambda s: 20 if len(s.activities) < _MIN_ACTIVITIES else 0,
        recommend=lambda s: "Document all data processing activities",
    ),
    ScoringRule(
        key="no_privacy_assessments",
        deduct=lambda s: 25 if not s.assessments else 0,
        recommend=lambda s: "Conduct privacy impact assessments for high-risk activities",
    ),
    ScoringRule(
        key="unassessed_activities",
        deduct=lambda s: 10 * len(s.unassessed_activities),
        recommend=lambda s: (
            "Complete privacy impact assessments for activities without one: "
            + ", ".join(s.unassessed_activities)
        ),
    ),
    ScoringRule(
        key="recent_breaches",
        deduct=lambda s: 15 * len(s.recent_breaches),
        recommend=lambda s: "Review and strengthen data security measures",
    ),
)


def evaluate(snapshot: GovernanceSnapshot) -> tuple[int, list[Deduction]]:
    """Apply :data:`RULES` to *snapshot*; return the clamped score and deductions."""
    deductions: list[Deduction] = []
    for rule in RULES:
        points = rule.deduct(snapshot)
        if points > 0:
            deductions.append(
                Deduction(rule=rule.key, points=points, recommendation=rule.recommend(snapshot))
            )
    score = _MAX_SCORE - sum(d.points for d in deductions)
    return max(0, min(_MAX_SCORE, score)), deductions


# ---------------------------------------------------------------------------
# Reporter
# ---------------------------------------------------------------------------


class ComplianceReporter:
    __slots__ = ("_activities", "_assessments", "_breaches", "_clock", "_consents", "_lookback")

    def __init__(
        self,
        consents: ConsentStore,
        activities: ActivityStore,
        assessments: AssessmentStore,
        breaches: BreachStore,
        *,
        lookback_days: int = 30,
        clock: Clock = utcnow,
    ) -> None:
        self._consents = consents
        self._activities = activities
        self._assessments = assessments
        self._breaches = breaches
        self._lookback = timedelta(days=lookback_days)
        self._clock = clock

    async def snapshot(self) -> GovernanceSnapshot:
        return GovernanceSnapshot(
            taken_at=self._clock(),
            lookback=self._lookback,
            consents=await self._consents.list_all(),
            activities=await self._activities.list_all(),
            assessments=await self._assessments.list_all(),
            breaches=await self._breaches.list_all(),
        )

    async def generate_report(self) -> ComplianceReport:
        snap = await self.snapshot()
        score, deductions = evaluate(snap)

        high_risk = {a.activity_id for a in snap.assessments if a.risk_level == RiskLevel.HIGH}
        breakdown = {
            grant.value: sum(1 for c in snap.consents if c.grants.is_granted(grant))
            for grant in GrantName
        }

        report = ComplianceReport(
            report_date=snap.taken_at,
            summary=ReportSummary(
                total_consents=len(snap.consents),
                active_consents=breakdown[GrantName.DATA_PROCESSING.value],
                processing_activities=len(snap.activities),
                privacy_assessments=len(snap.assessments),
                data_breaches=len(snap.breaches),
                compliance_score=score,
            ),
            consent_breakdown=breakdown,
            risk_assessment=RiskSummary(
                high_risk_activities=sum(1 for a in snap.activities if a.activity_id in high_risk),
                recent_breaches=len(snap.recent_breaches),
                pending_assessments=sum(
                    1 for a in snap.assessments if a.approval_status == AssessmentStatus.PENDING
                ),
                unassessed_activities=snap.unassessed_activities,
            ),
            deductions=deductions,
            recommendations=[d.recommendation for d in deductions],
        )

        logger.info(
            "compliance.report_generated",
            score=score,
            triggered=[d.rule for d in deductions],
        )
        return report
