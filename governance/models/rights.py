"""Envelopes returned by data-subject-rights requests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import orjson
from pydantic import BaseModel, Field

from governance.models.consent import Consent, ContactInfo, DataSubjectRights
from governance.models.enums import AccessScope


class SubsystemDeletion(BaseModel):
    """Outcome of deleting a subject's data in one collaborating subsystem."""

    subsystem: str
    success: bool
    detail: str = ""


class DeletionOutcome(BaseModel):
    """Per-subsystem result of a Data Gateway delete."""

    results: list[SubsystemDeletion] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(r.success for r in self.results)

    @property
    def failed_subsystems(self) -> list[str]:
        return [r.subsystem for r in self.results if not r.success]


class AccessResponse(BaseModel):
    """Everything held about a subject, returned by an access request."""

    request_id: str
    subject_id: str
    request_date: datetime
    scope: AccessScope
    data: dict[str, Any]
    consent: Consent
    rights: DataSubjectRights | None
    contact_info: ContactInfo


class PortabilityExport(BaseModel):
    """Machine-readable, versioned export of a subject's data.

    ``data_schema`` describes the structure of ``data`` so consumers can
    validate an export without out-of-band knowledge.  It serialises
    under the key ``schema``.
    """

    format: str = "JSON"
    version: str
    export_date: datetime
    request_id: str
    subject_id: str
    data: dict[str, Any]
    data_schema: dict[str, Any] = Field(serialization_alias="schema")

    def to_json(self) -> bytes:
        return orjson.dumps(self.model_dump(mode="json", by_alias=True))


class ErasureReceipt(BaseModel):
    request_id: str
    subject_id: str
    reason: str
    erased_at: datetime
    subsystems: list[SubsystemDeletion] = Field(default_factory=list)
