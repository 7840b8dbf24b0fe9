from __future__ import annotations

from enum import StrEnum


class GrantName(StrEnum):
    """Named consent grants a data subject can give or withdraw."""

    __slots__ = ()

    DATA_PROCESSING = "data_processing"
    ANALYTICS = "analytics"
    MARKETING = "marketing"
    DATA_SHARING = "data_sharing"
    DATA_RETENTION = "data_retention"
    PROFILING = "profiling"
    AUTOMATED_DECISION_MAKING = "automated_decision_making"
    THIRD_PARTY_SHARING = "third_party_sharing"
    DATA_PORTABILITY = "data_portability"
    RIGHT_TO_ERASURE = "right_to_erasure"


class AccessScope(StrEnum):
    __slots__ = ()

    FULL = "full"
    SPECIFIC = "specific"


class RiskLevel(StrEnum):
    __slots__ = ()

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssessmentStatus(StrEnum):
    __slots__ = ()

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BreachType(StrEnum):
    __slots__ = ()

    CONFIDENTIALITY = "confidentiality"
    INTEGRITY = "integrity"
    AVAILABILITY = "availability"


class BreachSeverity(StrEnum):
    __slots__ = ()

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BreachStatus(StrEnum):
    __slots__ = ()

    INVESTIGATING = "investigating"
    CONTAINED = "contained"
    RESOLVED = "resolved"
    REPORTED = "reported"
