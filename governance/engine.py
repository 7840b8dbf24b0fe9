"""The consent and data-governance engine facade.

Wires the registry, catalog, rights processor, ledger, assessment
store, breach register and reporter around shared storage ports and
exposes their operations as one object.  Instances are created
explicitly and passed to whoever needs them; there is no module-level
singleton.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from config.settings import Settings
from governance.services.activity_catalog import ActivityCatalog
from governance.services.assessments import AssessmentService
from governance.services.breaches import BreachRegister
from governance.services.clock import Clock, utcnow
from governance.services.compliance_report import ComplianceReporter
from governance.services.consent_registry import ConsentRegistry
from governance.services.identifiers import IdentifierGenerator, UUIDGenerator
from governance.services.ledger import ProcessingLedger
from governance.services.locks import KeyedLock
from governance.services.rights_requests import RightsRequestProcessor
from governance.services.stores import (
    ActivityStore,
    AssessmentStore,
    BreachStore,
    ConsentStore,
    InMemoryActivityStore,
    InMemoryAssessmentStore,
    InMemoryBreachStore,
    InMemoryConsentStore,
    InMemoryLedgerStore,
    LedgerStore,
)

if TYPE_CHECKING:
    from governance.models import (
        AccessResponse,
        AccessScope,
        AssessmentInput,
        BreachReport,
        BreachStatus,
        ComplianceReport,
        Consent,
        DataBreachRecord,
        DataProcessingActivity,
        DataProcessingRecord,
        DataSubjectRights,
        ErasureReceipt,
        PortabilityExport,
        PrivacyImpactAssessment,
    )
    from governance.services.gateways import DataGateway, NotificationGateway

logger = structlog.get_logger(__name__)


class GovernanceEngine:
    """Public surface of the engine.

    Parameters
    ----------
    data_gateway:
        Gathers and deletes subject data in the collaborating subsystems.
    notification_gateway:
        Schedules regulator notifications for high-severity breaches.
    ids:
        Identifier generator; defaults to random UUIDs.
    settings:
        Engine settings; defaults to a fresh :class:`Settings` read from
        the environment.
    clock:
        Returns the current UTC time.
    consent_store, activity_store, ledger_store, assessment_store, breach_store:
        Storage ports; each defaults to its in-memory implementation.
    """

    def __init__(
        self,
        data_gateway: DataGateway,
        notification_gateway: NotificationGateway,
        ids: IdentifierGenerator | None = None,
        *,
        settings: Settings | None = None,
        clock: Clock = utcnow,
        consent_store: ConsentStore | None = None,
        activity_store: ActivityStore | None = None,
        ledger_store: LedgerStore | None = None,
        assessment_store: AssessmentStore | None = None,
        breach_store: BreachStore | None = None,
    ) -> None:
        if data_gateway is None:
            raise TypeError("data_gateway is required")
        if notification_gateway is None:
            raise TypeError("notification_gateway is required")

        self.settings = settings or Settings()
        ids = ids or UUIDGenerator()
        consents = consent_store or InMemoryConsentStore()
        activities = activity_store or InMemoryActivityStore()
        assessments = assessment_store or InMemoryAssessmentStore()
        breaches = breach_store or InMemoryBreachStore()
        subject_locks = KeyedLock()

        self.consents = ConsentRegistry(consents, ids, subject_locks, self.settings, clock)
        self.catalog = ActivityCatalog(activities, clock)
        self.rights = RightsRequestProcessor(consents, data_gateway, ids, subject_locks, self.settings, clock)
        self.ledger = ProcessingLedger(ledger_store or InMemoryLedgerStore(), self.catalog, consents, ids, clock)
        self.assessments = AssessmentService(assessments, self.catalog, ids, clock)
        self.breaches = BreachRegister(breaches, notification_gateway, ids, clock)
        self.reporter = ComplianceReporter(
            consents,
            activities,
            assessments,
            breaches,
            lookback_days=self.settings.breach_lookback_days,
            clock=clock,
        )
        logger.info("engine.initialised", env=self.settings.env)

    # -- consent -------------------------------------------------------------

    async def register_consent(
        self,
        subject_id: str,
        grants: Mapping[str, bool] | None = None,
        **fields: Any,
    ) -> Consent:
        return await self.consents.register_consent(subject_id, grants, **fields)

    async def get_consent(self, subject_id: str) -> Consent | None:
        return await self.consents.get_consent(subject_id)

    async def get_rights(self, subject_id: str) -> DataSubjectRights | None:
        return await self.consents.get_rights(subject_id)

    async def has_grant(self, subject_id: str, grant_name: str) -> bool:
        return await self.consents.has_grant(subject_id, grant_name)

    async def withdraw_grants(self, subject_id: str, grant_names: Iterable[str]) -> Consent:
        return await self.consents.withdraw_grants(subject_id, grant_names)

    # -- catalog -------------------------------------------------------------

    async def seed_defaults(self) -> list[DataProcessingActivity]:
        return await self.catalog.seed_defaults()

    async def register_activity(self, activity: DataProcessingActivity) -> DataProcessingActivity:
        return await self.catalog.register_activity(activity)

    async def get_activity(self, activity_id: str) -> DataProcessingActivity:
        return await self.catalog.get_activity(activity_id)

    async def list_activities(self) -> list[DataProcessingActivity]:
        return await self.catalog.list_activities()

    # -- rights requests -----------------------------------------------------

    async def process_access_request(self, subject_id: str, scope: AccessScope | str = "full") -> AccessResponse:
        return await self.rights.process_access_request(subject_id, scope)

    async def process_portability_request(self, subject_id: str) -> PortabilityExport:
        return await self.rights.process_portability_request(subject_id)

    async def process_erasure_request(self, subject_id: str, reason: str = "") -> ErasureReceipt:
        return await self.rights.process_erasure_request(subject_id, reason)

    # -- ledger --------------------------------------------------------------

    async def record_processing(
        self,
        subject_id: str,
        activity_id: str,
        data_type: str,
        purpose: str,
        legal_basis: str,
        data_categories: Iterable[str],
        **options: Any,
    ) -> DataProcessingRecord:
        return await self.ledger.record_processing(
            subject_id, activity_id, data_type, purpose, legal_basis, data_categories, **options
        )

    async def list_records(self, subject_id: str | None = None) -> list[DataProcessingRecord]:
        return await self.ledger.list_records(subject_id)

    # -- assessments ---------------------------------------------------------

    async def create_assessment(self, activity_id: str, risk: AssessmentInput) -> PrivacyImpactAssessment:
        return await self.assessments.create_assessment(activity_id, risk)

    async def approve_assessment(self, assessment_id: str, approver: str) -> PrivacyImpactAssessment:
        return await self.assessments.approve(assessment_id, approver)

    async def reject_assessment(self, assessment_id: str, approver: str) -> PrivacyImpactAssessment:
        return await self.assessments.reject(assessment_id, approver)

    async def get_assessment(self, assessment_id: str) -> PrivacyImpactAssessment:
        return await self.assessments.get_assessment(assessment_id)

    async def list_assessments(self, activity_id: str | None = None) -> list[PrivacyImpactAssessment]:
        return await self.assessments.list_assessments(activity_id)

    # -- breaches ------------------------------------------------------------

    async def record_breach(self, report: BreachReport) -> DataBreachRecord:
        return await self.breaches.record_breach(report)

    async def advance_breach_status(
        self,
        breach_id: str,
        status: BreachStatus | str,
        *,
        reported_to: str | None = None,
    ) -> DataBreachRecord:
        return await self.breaches.advance_status(breach_id, status, reported_to=reported_to)

    async def get_breach(self, breach_id: str) -> DataBreachRecord:
        return await self.breaches.get_breach(breach_id)

    async def list_breaches(self) -> list[DataBreachRecord]:
        return await self.breaches.list_breaches()

    # -- reporting -----------------------------------------------------------

    async def generate_compliance_report(self) -> ComplianceReport:
        return await self.reporter.generate_report()
