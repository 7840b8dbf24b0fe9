"""Built-in processing activities seeded into the catalog at startup.

Covers the three activities every deployment performs: account
registration and authentication, health data processing, and usage
analytics.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Final

from governance.models.activity import DataProcessingActivity

_DEFAULT_ACTIVITIES: Final[list[dict[str, Any]]] = [
    {
        "activity_id": "user-registration",
        "name": "User Registration and Authentication",
        "purpose": "User account creation and authentication",
        "legal_basis": "Consent and contract performance",
        "data_categories": ["personal_data", "contact_information", "authentication_data"],
        "data_subjects": ["users"],
        "recipients": ["internal_systems"],
        "transfers": ["eu_only"],
        "retention_days": 365,
        "security_measures": ["encryption", "access_controls", "audit_logging"],
    },
    {
        "activity_id": "health-data-processing",
        "name": "Health Data Processing",
        "purpose": "Gut health monitoring and recommendations",
        "legal_basis": "Explicit consent",
        "data_categories": ["health_data", "symptom_data", "medication_data"],
        "data_subjects": ["users"],
        "recipients": ["internal_systems", "healthcare_providers"],
        "transfers": ["eu_only"],
        "retention_days": 90,
        "security_measures": ["encryption", "pseudonymization", "access_controls"],
    },
    {
        "activity_id": "analytics-processing",
        "name": "Analytics and Usage Data",
        "purpose": "Service improvement and analytics",
        "legal_basis": "Legitimate interest",
        "data_categories": ["usage_data", "analytics_data", "performance_data"],
        "data_subjects": ["users"],
        "recipients": ["internal_systems", "analytics_providers"],
        "transfers": ["eu_only"],
        "retention_days": 90,
        "security_measures": ["anonymization", "pseudonymization"],
    },
]


def default_activities(now: datetime | None = None) -> list[DataProcessingActivity]:
    """Build fresh catalog entries for the built-in activities."""
    stamp = now or datetime.now(UTC)
    return [
        DataProcessingActivity(**entry, created_at=stamp, updated_at=stamp)
        for entry in _DEFAULT_ACTIVITIES
    ]
