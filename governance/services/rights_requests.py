"""Data-subject-rights workflows: access, portability and erasure.

Each request is synchronous and single-pass.  The subject's lock is
held for the whole request, including the Data Gateway round trip, so
an access request can never observe a half-erased subject and two
erasures of the same subject cannot interleave.

Erasure is all-or-nothing from the caller's point of view: the consent
and rights records are removed only after the Data Gateway reports that
every subsystem deleted the subject's data.  On any gateway failure the
consent stays exactly as it was and a ``GatewayFailureError`` is raised.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import structlog

from governance.errors import (
    ConsentNotFoundError,
    ConsentRequiredError,
    GatewayFailureError,
    InvalidArgumentError,
)
from governance.models.enums import AccessScope, GrantName
from governance.models.rights import AccessResponse, ErasureReceipt, PortabilityExport
from governance.services.clock import Clock, utcnow
from governance.services.consent_registry import require_subject_id

if TYPE_CHECKING:
    from config.settings import Settings
    from governance.models.consent import Consent
    from governance.services.gateways import DataGateway
    from governance.services.identifiers import IdentifierGenerator
    from governance.services.locks import KeyedLock
    from governance.services.stores import ConsentStore

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Export schema
# ---------------------------------------------------------------------------


def describe_schema(value: Any) -> dict[str, Any]:
    """Return a JSON-Schema style structural descriptor of *value*.

    >>> describe_schema({"scans": [], "email": "a@b.c"})["properties"]["email"]
    {'type': 'string'}
    """
    if isinstance(value, dict):
        return {
            "type": "object",
            "properties": {str(k): describe_schema(v) for k, v in value.items()},
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        items: list[dict[str, Any]] = []
        for item in value:
            descriptor = describe_schema(item)
            if descriptor not in items:
                items.append(descriptor)
        if not items:
            return {"type": "array", "items": {}}
        return {"type": "array", "items": items[0] if len(items) == 1 else {"anyOf": items}}
    if value is None:
        return {"type": "null"}
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, datetime):
        return {"type": "string", "format": "date-time"}
    if isinstance(value, date):
        return {"type": "string", "format": "date"}
    return {"type": "string"}


# ---------------------------------------------------------------------------
# Processor
# ---------------------------------------------------------------------------


class RightsRequestProcessor:
    """Runs access, portability and erasure requests for one subject at a time.

    Parameters
    ----------
    consents:
        Consent storage port; read for grants, written only by erasure.
    gateway:
        Data Gateway gathering and deleting the subject's data across
        the collaborating subsystems.
    ids:
        Identifier generator for request ids.
    locks:
        Per-subject lock table shared with the consent registry.
    settings:
        Supplies the export format version.
    clock:
        Returns the current UTC time.
    """

    __slots__ = ("_clock", "_consents", "_gateway", "_ids", "_locks", "_settings")

    def __init__(
        self,
        consents: ConsentStore,
        gateway: DataGateway,
        ids: IdentifierGenerator,
        locks: KeyedLock,
        settings: Settings,
        clock: Clock = utcnow,
    ) -> None:
        self._consents = consents
        self._gateway = gateway
        self._ids = ids
        self._locks = locks
        self._settings = settings
        self._clock = clock

    # -- access --------------------------------------------------------------

    async def process_access_request(
        self,
        subject_id: str,
        scope: AccessScope | str = AccessScope.FULL,
    ) -> AccessResponse:
        require_subject_id(subject_id)
        try:
            access_scope = AccessScope(scope)
        except ValueError as exc:
            raise InvalidArgumentError("unknown access scope", subject_id=subject_id, scope=str(scope)) from exc

        async with self._locks.hold(subject_id):
            consent = await self._require_grant(subject_id, GrantName.DATA_PROCESSING, "access")
            request_id = self._ids.new_id("req")
            data = await self._gather(subject_id, access_scope, operation="access", request_id=request_id)
            rights = await self._consents.get_rights(subject_id)

        response = AccessResponse(
            request_id=request_id,
            subject_id=subject_id,
            request_date=self._clock(),
            scope=access_scope,
            data=data,
            consent=consent,
            rights=rights,
            contact_info=consent.contact_info,
        )
        logger.info(
            "rights.access.completed",
            subject_id=subject_id,
            request_id=request_id,
            scope=access_scope,
            data_types=sorted(data),
        )
        return response

    # -- portability ---------------------------------------------------------

    async def process_portability_request(self, subject_id: str) -> PortabilityExport:
        require_subject_id(subject_id)

        async with self._locks.hold(subject_id):
            await self._require_grant(subject_id, GrantName.DATA_PORTABILITY, "portability")
            request_id = self._ids.new_id("req")
            data = await self._gather(subject_id, AccessScope.FULL, operation="portability", request_id=request_id)

        schema = describe_schema(data)
        schema["version"] = self._settings.export_format_version
        export = PortabilityExport(
            version=self._settings.export_format_version,
            export_date=self._clock(),
            request_id=request_id,
            subject_id=subject_id,
            data=data,
            data_schema=schema,
        )
        logger.info(
            "rights.portability.completed",
            subject_id=subject_id,
            request_id=request_id,
            export_bytes=len(export.to_json()),
        )
        return export

    # -- erasure -------------------------------------------------------------

    async def process_erasure_request(self, subject_id: str, reason: str = "") -> ErasureReceipt:
        """Delete the subject's data everywhere, then forget their consent.

        Raises
        ------
        ConsentNotFoundError
            The subject has no consent: never registered or already erased.
        ConsentRequiredError
            The subject has not granted ``right_to_erasure``.
        GatewayFailureError
            The Data Gateway raised or reported a failed subsystem; the
            consent record is left untouched.
        """
        require_subject_id(subject_id)

        async with self._locks.hold(subject_id):
            consent = await self._consents.get(subject_id)
            if consent is None:
                raise ConsentNotFoundError("no consent registered for subject", subject_id=subject_id)
            if not consent.grants.is_granted(GrantName.RIGHT_TO_ERASURE):
                raise ConsentRequiredError(
                    "subject has not granted right_to_erasure",
                    subject_id=subject_id,
                    operation="erasure",
                    grant=GrantName.RIGHT_TO_ERASURE.value,
                )

            request_id = self._ids.new_id("req")
            log = logger.bind(subject_id=subject_id, request_id=request_id)

            try:
                outcome = await self._gateway.delete(subject_id)
            except Exception as exc:
                log.error("rights.erasure.failed", error=str(exc))
                raise GatewayFailureError(
                    "data gateway delete failed",
                    subject_id=subject_id,
                    operation="erasure",
                    request_id=request_id,
                ) from exc

            if not outcome.succeeded:
                log.error("rights.erasure.partial", failed_subsystems=outcome.failed_subsystems)
                raise GatewayFailureError(
                    "data gateway could not delete all subject data",
                    subject_id=subject_id,
                    operation="erasure",
                    request_id=request_id,
                    failed_subsystems=outcome.failed_subsystems,
                )

            await self._consents.remove(subject_id)

        log.info(
            "rights.erasure.completed",
            reason=reason,
            consent_id=consent.consent_id,
            subsystems=[r.subsystem for r in outcome.results],
        )
        return ErasureReceipt(
            request_id=request_id,
            subject_id=subject_id,
            reason=reason,
            erased_at=self._clock(),
            subsystems=outcome.results,
        )

    # -- helpers -------------------------------------------------------------

    async def _require_grant(self, subject_id: str, grant: GrantName, operation: str) -> Consent:
        consent = await self._consents.get(subject_id)
        if consent is None or not consent.grants.is_granted(grant):
            logger.info(
                "rights.consent_required",
                subject_id=subject_id,
                operation=operation,
                grant=grant,
                registered=consent is not None,
            )
            raise ConsentRequiredError(
                f"subject has not granted {grant.value}",
                subject_id=subject_id,
                operation=operation,
                grant=grant.value,
            )
        return consent

    async def _gather(
        self,
        subject_id: str,
        scope: AccessScope,
        *,
        operation: str,
        request_id: str,
    ) -> dict[str, Any]:
        try:
            return dict(await self._gateway.gather(subject_id, scope))
        except Exception as exc:
            logger.error(
                "rights.gather.failed",
                subject_id=subject_id,
                operation=operation,
                request_id=request_id,
                error=str(exc),
            )
            raise GatewayFailureError(
                "data gateway gather failed",
                subject_id=subject_id,
                operation=operation,
                request_id=request_id,
            ) from exc
