"""Privacy impact assessment (PIA) store.

Assessments start ``pending`` and move exactly once, to ``approved`` or
``rejected``.  Both outcomes are terminal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from governance.errors import AssessmentNotFoundError, InvalidArgumentError, InvalidTransitionError
from governance.models.assessment import AssessmentInput, PrivacyImpactAssessment
from governance.models.enums import AssessmentStatus
from governance.services.clock import Clock, utcnow
from governance.services.locks import KeyedLock

if TYPE_CHECKING:
    from governance.services.activity_catalog import ActivityCatalog
    from governance.services.identifiers import IdentifierGenerator
    from governance.services.stores import AssessmentStore

logger = structlog.get_logger(__name__)


class AssessmentService:
    __slots__ = ("_catalog", "_clock", "_ids", "_locks", "_store")

    def __init__(
        self,
        store: AssessmentStore,
        catalog: ActivityCatalog,
        ids: IdentifierGenerator,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._ids = ids
        self._clock = clock
        self._locks = KeyedLock()

    async def create_assessment(self, activity_id: str, risk: AssessmentInput) -> PrivacyImpactAssessment:
        """Record a new ``pending`` assessment of a catalogued activity."""
        await self._catalog.get_activity(activity_id)

        assessment = PrivacyImpactAssessment(
            assessment_id=self._ids.new_id("pia"),
            activity_id=activity_id,
            assessment_date=self._clock(),
            **risk.model_dump(),
        )
        await self._store.save(assessment)

        logger.info(
            "assessment.created",
            assessment_id=assessment.assessment_id,
            activity_id=activity_id,
            risk_level=assessment.risk_level,
        )
        return assessment

    async def approve(self, assessment_id: str, approver: str) -> PrivacyImpactAssessment:
        return await self._decide(assessment_id, approver, AssessmentStatus.APPROVED)

    async def reject(self, assessment_id: str, approver: str) -> PrivacyImpactAssessment:
        return await self._decide(assessment_id, approver, AssessmentStatus.REJECTED)

    async def get_assessment(self, assessment_id: str) -> PrivacyImpactAssessment:
        assessment = await self._store.get(assessment_id)
        if assessment is None:
            raise AssessmentNotFoundError("assessment not found", assessment_id=assessment_id)
        return assessment

    async def list_assessments(self, activity_id: str | None = None) -> list[PrivacyImpactAssessment]:
        assessments = await self._store.list_all()
        if activity_id is None:
            return assessments
        return [a for a in assessments if a.activity_id == activity_id]

    async def _decide(
        self,
        assessment_id: str,
        approver: str,
        outcome: AssessmentStatus,
    ) -> PrivacyImpactAssessment:
        if not approver or not approver.strip():
            raise InvalidArgumentError("approver must be a non-empty string", assessment_id=assessment_id)

        async with self._locks.hold(assessment_id):
            current = await self.get_assessment(assessment_id)
            if current.approval_status != AssessmentStatus.PENDING:
                raise InvalidTransitionError(
                    "assessment already decided",
                    assessment_id=assessment_id,
                    current=current.approval_status,
                    requested=outcome,
                )

            decided = current.model_copy(
                update={
                    "approval_status": outcome,
                    "approved_by": approver,
                    "approved_at": self._clock(),
                }
            )
            await self._store.save(decided)

        logger.info(
            "assessment.decided",
            assessment_id=assessment_id,
            activity_id=decided.activity_id,
            status=outcome,
            approver=approver,
        )
        return decided
