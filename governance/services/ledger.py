"""Processing record ledger: append-only audit log of processing events.

Processing without consent is logged, not blocked: the legal basis of
an activity may be contract or legitimate interest rather than consent.
Records are never updated or removed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from governance.errors import InvalidArgumentError
from governance.models.activity import DataProcessingRecord
from governance.services.clock import Clock, utcnow
from governance.services.consent_registry import require_subject_id

if TYPE_CHECKING:
    from governance.services.activity_catalog import ActivityCatalog
    from governance.services.identifiers import IdentifierGenerator
    from governance.services.stores import ConsentStore, LedgerStore

logger = structlog.get_logger(__name__)


class ProcessingLedger:
    __slots__ = ("_catalog", "_clock", "_consents", "_ids", "_store")

    def __init__(
        self,
        store: LedgerStore,
        catalog: ActivityCatalog,
        consents: ConsentStore,
        ids: IdentifierGenerator,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._consents = consents
        self._ids = ids
        self._clock = clock

    async def record_processing(
        self,
        subject_id: str,
        activity_id: str,
        data_type: str,
        purpose: str,
        legal_basis: str,
        data_categories: Iterable[str],
        *,
        retention_days: int | None = None,
        automated_decision: bool = False,
        profiling: bool = False,
    ) -> DataProcessingRecord:
        """Append one processing event and return the stored record.

        Raises
        ------
        UnknownActivityError
            *activity_id* is not in the catalog; nothing is appended.
        InvalidArgumentError
            Empty *subject_id* or non-positive *retention_days*.
        """
        require_subject_id(subject_id)
        activity = await self._catalog.get_activity(activity_id)

        retention = activity.retention_days if retention_days is None else retention_days
        if retention <= 0:
            raise InvalidArgumentError(
                "retention_days must be positive",
                activity_id=activity_id,
                retention_days=retention,
            )

        consent = await self._consents.get(subject_id)
        record = DataProcessingRecord(
            record_id=self._ids.new_id("record"),
            subject_id=subject_id,
            activity_id=activity_id,
            data_type=data_type,
            purpose=purpose,
            legal_basis=legal_basis,
            data_categories=list(data_categories),
            retention_days=retention,
            processed_at=self._clock(),
            consent_id=consent.consent_id if consent is not None else "",
            automated_decision=automated_decision,
            profiling=profiling,
        )
        await self._store.append(record)

        logger.info(
            "ledger.processing_recorded",
            record_id=record.record_id,
            subject_id=subject_id,
            activity_id=activity_id,
            data_type=data_type,
            purpose=purpose,
            with_consent=bool(record.consent_id),
        )
        return record

    async def list_records(self, subject_id: str | None = None) -> list[DataProcessingRecord]:
        if subject_id is None:
            return await self._store.list_all()
        return await self._store.list_for_subject(subject_id)

    async def record_count(self) -> int:
        return await self._store.count()
