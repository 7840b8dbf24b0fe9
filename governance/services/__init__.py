"""Governance service layer: registry, catalog, rights workflows, ledger,
assessments, breaches and reporting, plus their storage ports and the
collaborator interfaces they depend on.
"""

from __future__ import annotations

from governance.services.activity_catalog import ActivityCatalog
from governance.services.assessments import AssessmentService
from governance.services.breaches import BreachRegister
from governance.services.compliance_report import ComplianceReporter
from governance.services.consent_registry import ConsentRegistry
from governance.services.gateways import DataGateway, NotificationGateway
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

__all__ = [
    "ActivityCatalog",
    "ActivityStore",
    "AssessmentService",
    "AssessmentStore",
    "BreachRegister",
    "BreachStore",
    "ComplianceReporter",
    "ConsentRegistry",
    "ConsentStore",
    "DataGateway",
    "IdentifierGenerator",
    "InMemoryActivityStore",
    "InMemoryAssessmentStore",
    "InMemoryBreachStore",
    "InMemoryConsentStore",
    "InMemoryLedgerStore",
    "KeyedLock",
    "LedgerStore",
    "NotificationGateway",
    "ProcessingLedger",
    "RightsRequestProcessor",
    "UUIDGenerator",
]
