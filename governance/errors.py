"""Typed errors raised by the governance engine.

Every domain error is recoverable by the caller and carries a stable
``code`` plus key/value ``context`` (subject id, operation, ...) that
is safe to log once passed through :func:`to_dict`.
"""

from __future__ import annotations

from typing import Any

from governance.redaction import redact_value


class GovernanceError(Exception):
    code: str = "governance_error"
    recoverable: bool = True

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
            "context": redact_value(self.context),
        }


# ---- Malformed input ----
class InvalidArgumentError(GovernanceError):
    code = "invalid_argument"


class InvalidActivityError(InvalidArgumentError):
    code = "invalid_activity"


class InvalidTimelineError(InvalidArgumentError):
    code = "invalid_timeline"


# ---- Lookups ----
class NotFoundError(GovernanceError):
    code = "not_found"


class ConsentNotFoundError(NotFoundError):
    code = "consent_not_found"


class UnknownActivityError(NotFoundError):
    code = "unknown_activity"


class AssessmentNotFoundError(NotFoundError):
    code = "assessment_not_found"


class BreachNotFoundError(NotFoundError):
    code = "breach_not_found"


# ---- Workflow ----
class ConsentRequiredError(GovernanceError):
    """A rights request was attempted without the matching grant.

    An expected, user-facing outcome rather than a system fault.
    """

    code = "consent_required"


class InvalidTransitionError(GovernanceError):
    code = "invalid_transition"


class GatewayFailureError(GovernanceError):
    """A Data Gateway or Notification Gateway call failed.

    Engine state is left untouched when this is raised; the caller may
    retry.
    """

    code = "gateway_failure"
