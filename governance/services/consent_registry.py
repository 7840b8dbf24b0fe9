"""Consent registry: the current consent state of every data subject.

Default-deny is the safety invariant here.  A subject that never
registered, or a grant that was never given, always reads as *not
granted*; :meth:`ConsentRegistry.has_grant` never raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from governance.errors import ConsentNotFoundError, InvalidArgumentError
from governance.models.consent import (
    GRANT_NAMES,
    Consent,
    ConsentGrants,
    ContactInfo,
    DataSubjectRights,
)
from governance.services.clock import Clock, utcnow

if TYPE_CHECKING:
    from config.settings import Settings
    from governance.services.identifiers import IdentifierGenerator
    from governance.services.locks import KeyedLock
    from governance.services.stores import ConsentStore

logger = structlog.get_logger(__name__)


def require_subject_id(subject_id: str) -> None:
    if not isinstance(subject_id, str) or not subject_id.strip():
        raise InvalidArgumentError("subject_id must be a non-empty string", subject_id=subject_id)


def _normalise_grants(grants: Mapping[str, bool] | None) -> dict[str, bool]:
    if not grants:
        return {}
    unknown = sorted(str(name) for name in grants if str(name) not in GRANT_NAMES)
    if unknown:
        raise InvalidArgumentError("unknown consent grants", grants=unknown)
    return {str(name): bool(value) for name, value in grants.items()}


def _coerce_contact(contact_info: ContactInfo | Mapping[str, Any] | None) -> ContactInfo | None:
    if contact_info is None or isinstance(contact_info, ContactInfo):
        return contact_info
    try:
        return ContactInfo.model_validate(dict(contact_info))
    except ValidationError as exc:
        raise InvalidArgumentError("invalid contact info", errors=exc.error_count()) from exc


class ConsentRegistry:
    """Owns register/update, lookup and partial withdrawal of consent.

    Parameters
    ----------
    store:
        Storage port holding consents and their paired rights records.
    ids:
        Identifier generator for new consent ids.
    locks:
        Per-subject lock table, shared with the rights request processor
        so consent writes and erasure never interleave for one subject.
    settings:
        Supplies the defaults filled in on first registration.
    clock:
        Returns the current UTC time.
    """

    __slots__ = ("_clock", "_ids", "_locks", "_settings", "_store")

    def __init__(
        self,
        store: ConsentStore,
        ids: IdentifierGenerator,
        locks: KeyedLock,
        settings: Settings,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._ids = ids
        self._locks = locks
        self._settings = settings
        self._clock = clock

    # -- writes --------------------------------------------------------------

    async def register_consent(
        self,
        subject_id: str,
        grants: Mapping[str, bool] | None = None,
        *,
        legal_basis: str | None = None,
        purposes: Iterable[str] | None = None,
        retention_days: int | None = None,
        withdrawal_method: str | None = None,
        contact_info: ContactInfo | Mapping[str, Any] | None = None,
    ) -> Consent:
        """Create the subject's consent, or merge *grants* into the existing one.

        Grants not named in *grants* keep their current value (``False``
        on first registration).  Descriptive fields passed explicitly
        overwrite the stored ones; on first registration the rest fall
        back to the configured defaults.
        """
        require_subject_id(subject_id)
        updates = _normalise_grants(grants)
        if retention_days is not None and retention_days <= 0:
            raise InvalidArgumentError(
                "retention_days must be positive",
                subject_id=subject_id,
                retention_days=retention_days,
            )
        contact = _coerce_contact(contact_info)

        fields: dict[str, Any] = {}
        if legal_basis is not None:
            fields["legal_basis"] = legal_basis
        if purposes is not None:
            fields["purposes"] = list(purposes)
        if retention_days is not None:
            fields["retention_days"] = retention_days
        if withdrawal_method is not None:
            fields["withdrawal_method"] = withdrawal_method
        if contact is not None:
            fields["contact_info"] = contact

        async with self._locks.hold(subject_id):
            existing = await self._store.get(subject_id)
            now = self._clock()

            if existing is None:
                defaults = self._settings
                consent = Consent(
                    consent_id=self._ids.new_id("consent"),
                    subject_id=subject_id,
                    version=defaults.consent_schema_version,
                    consent_date=now,
                    last_updated=now,
                    grants=ConsentGrants().merged(updates),
                    legal_basis=fields.get("legal_basis", defaults.default_legal_basis),
                    purposes=fields.get("purposes", list(defaults.default_purposes)),
                    retention_days=fields.get("retention_days", defaults.default_consent_retention_days),
                    withdrawal_method=fields.get("withdrawal_method", defaults.default_withdrawal_method),
                    contact_info=fields.get("contact_info", ContactInfo(email=defaults.privacy_contact_email)),
                )
                await self._store.save(consent, DataSubjectRights(subject_id=subject_id))
                logger.info(
                    "consent.registered",
                    subject_id=subject_id,
                    consent_id=consent.consent_id,
                    version=consent.version,
                    granted=[g.value for g in consent.grants.active()],
                )
                return consent

            consent = existing.model_copy(
                update={
                    **fields,
                    "grants": existing.grants.merged(updates),
                    "last_updated": max(now, existing.consent_date),
                }
            )
            await self._store.save(consent)

        logger.info(
            "consent.updated",
            subject_id=subject_id,
            consent_id=consent.consent_id,
            changed_grants=sorted(updates),
        )
        return consent

    async def withdraw_grants(self, subject_id: str, grant_names: Iterable[str]) -> Consent:
        """Set the named grants to ``False``.

        Unknown names are ignored so older callers keep working when the
        grant set changes.
        """
        require_subject_id(subject_id)
        requested = [str(name) for name in grant_names]
        known = {name: False for name in requested if name in GRANT_NAMES}

        async with self._locks.hold(subject_id):
            existing = await self._store.get(subject_id)
            if existing is None:
                raise ConsentNotFoundError("no consent registered for subject", subject_id=subject_id)
            consent = existing.model_copy(
                update={
                    "grants": existing.grants.merged(known),
                    "last_updated": max(self._clock(), existing.consent_date),
                }
            )
            await self._store.save(consent)

        logger.info(
            "consent.withdrawn",
            subject_id=subject_id,
            consent_id=consent.consent_id,
            withdrawn=sorted(known),
            ignored=sorted(set(requested) - set(known)),
        )
        return consent

    # -- reads ---------------------------------------------------------------

    async def get_consent(self, subject_id: str) -> Consent | None:
        """Return the subject's consent, or ``None`` when none is registered."""
        return await self._store.get(subject_id)

    async def get_rights(self, subject_id: str) -> DataSubjectRights | None:
        return await self._store.get_rights(subject_id)

    async def has_grant(self, subject_id: str, grant_name: str) -> bool:
        """True only if *grant_name* is explicitly granted.

        Grant names are the snake_case :class:`GrantName` values
        (``"data_processing"``, ``"right_to_erasure"``, ...); any other
        name, including camelCase spellings, reads as not granted.
        """
        consent = await self._store.get(subject_id)
        if consent is None:
            return False
        return consent.grants.is_granted(str(grant_name))
