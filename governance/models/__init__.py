from governance.models.activity import DataProcessingActivity, DataProcessingRecord
from governance.models.assessment import AssessmentInput, PrivacyImpactAssessment
from governance.models.breach import BreachReport, DataBreachRecord
from governance.models.consent import (
    GRANT_NAMES,
    Consent,
    ConsentGrants,
    ContactInfo,
    DataSubjectRights,
)
from governance.models.enums import (
    AccessScope,
    AssessmentStatus,
    BreachSeverity,
    BreachStatus,
    BreachType,
    GrantName,
    RiskLevel,
)
from governance.models.report import ComplianceReport, Deduction, ReportSummary, RiskSummary
from governance.models.rights import (
    AccessResponse,
    DeletionOutcome,
    ErasureReceipt,
    PortabilityExport,
    SubsystemDeletion,
)

__all__ = [
    "GRANT_NAMES",
    "AccessResponse",
    "AccessScope",
    "AssessmentInput",
    "AssessmentStatus",
    "BreachReport",
    "BreachSeverity",
    "BreachStatus",
    "BreachType",
    "ComplianceReport",
    "Consent",
    "ConsentGrants",
    "ContactInfo",
    "DataBreachRecord",
    "DataProcessingActivity",
    "DataProcessingRecord",
    "DataSubjectRights",
    "Deduction",
    "DeletionOutcome",
    "ErasureReceipt",
    "GrantName",
    "PortabilityExport",
    "PrivacyImpactAssessment",
    "ReportSummary",
    "RiskLevel",
    "RiskSummary",
    "SubsystemDeletion",
]
