"""Storage ports for every engine entity, with in-memory implementations.

Each port is an async :class:`~typing.Protocol` so a persistent backend
(SQL, Redis, Firestore, ...) can replace the in-memory default without
touching engine logic.  The in-memory stores keep private deep copies
of what they are given and hand out fresh copies on every read, so no
caller can edit a stored record in place.  Reads never block; writes
are serialised per store with an :class:`asyncio.Lock`.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from governance.models.activity import DataProcessingActivity, DataProcessingRecord
from governance.models.assessment import PrivacyImpactAssessment
from governance.models.breach import DataBreachRecord
from governance.models.consent import Consent, DataSubjectRights

# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


@runtime_checkable
class ConsentStore(Protocol):
    """Consent records and their paired rights, keyed by subject."""

    async def get(self, subject_id: str) -> Consent | None: ...

    async def get_rights(self, subject_id: str) -> DataSubjectRights | None: ...

    async def save(self, consent: Consent, rights: DataSubjectRights | None = None) -> None: ...

    async def remove(self, subject_id: str) -> bool: ...

    async def list_all(self) -> list[Consent]: ...


@runtime_checkable
class ActivityStore(Protocol):
    async def get(self, activity_id: str) -> DataProcessingActivity | None: ...

    async def add(self, activity: DataProcessingActivity) -> bool: ...

    async def list_all(self) -> list[DataProcessingActivity]: ...


@runtime_checkable
class LedgerStore(Protocol):
    """Append-only: there is deliberately no update or delete."""

    async def append(self, record: DataProcessingRecord) -> None: ...

    async def list_all(self) -> list[DataProcessingRecord]: ...

    async def list_for_subject(self, subject_id: str) -> list[DataProcessingRecord]: ...

    async def count(self) -> int: ...


@runtime_checkable
class AssessmentStore(Protocol):
    async def get(self, assessment_id: str) -> PrivacyImpactAssessment | None: ...

    async def save(self, assessment: PrivacyImpactAssessment) -> None: ...

    async def list_all(self) -> list[PrivacyImpactAssessment]: ...


@runtime_checkable
class BreachStore(Protocol):
    async def get(self, breach_id: str) -> DataBreachRecord | None: ...

    async def save(self, breach: DataBreachRecord) -> None: ...

    async def list_all(self) -> list[DataBreachRecord]: ...


# ---------------------------------------------------------------------------
# In-memory implementations
# ---------------------------------------------------------------------------

_Model = TypeVar("_Model", bound=BaseModel)


def _detached(model: _Model) -> _Model:
    """Deep copy so list fields of a stored model cannot be edited in place."""
    return model.model_copy(deep=True)


class InMemoryConsentStore:
    """Dict-backed consent store keyed by subject id."""

    __slots__ = ("_by_subject", "_lock", "_rights")

    def __init__(self) -> None:
        self._by_subject: dict[str, Consent] = {}
        self._rights: dict[str, DataSubjectRights] = {}
        self._lock = asyncio.Lock()

    async def get(self, subject_id: str) -> Consent | None:
        consent = self._by_subject.get(subject_id)
        return _detached(consent) if consent is not None else None

    async def get_rights(self, subject_id: str) -> DataSubjectRights | None:
        return self._rights.get(subject_id)

    async def save(self, consent: Consent, rights: DataSubjectRights | None = None) -> None:
        async with self._lock:
            self._by_subject[consent.subject_id] = _detached(consent)
            if rights is not None:
                self._rights[consent.subject_id] = rights

    async def remove(self, subject_id: str) -> bool:
        async with self._lock:
            self._rights.pop(subject_id, None)
            return self._by_subject.pop(subject_id, None) is not None

    async def list_all(self) -> list[Consent]:
        return [_detached(c) for c in self._by_subject.values()]


class InMemoryActivityStore:
    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[str, DataProcessingActivity] = {}
        self._lock = asyncio.Lock()

    async def get(self, activity_id: str) -> DataProcessingActivity | None:
        activity = self._data.get(activity_id)
        return _detached(activity) if activity is not None else None

    async def add(self, activity: DataProcessingActivity) -> bool:
        """Insert *activity*; return ``False`` if its id is already taken."""
        async with self._lock:
            if activity.activity_id in self._data:
                return False
            self._data[activity.activity_id] = _detached(activity)
            return True

    async def list_all(self) -> list[DataProcessingActivity]:
        return [_detached(a) for a in self._data.values()]


class InMemoryLedgerStore:
    __slots__ = ("_by_subject", "_lock", "_records")

    def __init__(self) -> None:
        self._records: list[DataProcessingRecord] = []
        self._by_subject: dict[str, list[DataProcessingRecord]] = {}
        self._lock = asyncio.Lock()

    async def append(self, record: DataProcessingRecord) -> None:
        stored = _detached(record)
        async with self._lock:
            self._records.append(stored)
            self._by_subject.setdefault(stored.subject_id, []).append(stored)

    async def list_all(self) -> list[DataProcessingRecord]:
        return [_detached(r) for r in self._records]

    async def list_for_subject(self, subject_id: str) -> list[DataProcessingRecord]:
        return [_detached(r) for r in self._by_subject.get(subject_id, ())]

    async def count(self) -> int:
        return len(self._records)


class InMemoryAssessmentStore:
    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[str, PrivacyImpactAssessment] = {}
        self._lock = asyncio.Lock()

    async def get(self, assessment_id: str) -> PrivacyImpactAssessment | None:
        assessment = self._data.get(assessment_id)
        return _detached(assessment) if assessment is not None else None

    async def save(self, assessment: PrivacyImpactAssessment) -> None:
        async with self._lock:
            self._data[assessment.assessment_id] = _detached(assessment)

    async def list_all(self) -> list[PrivacyImpactAssessment]:
        return [_detached(a) for a in self._data.values()]


class InMemoryBreachStore:
    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[str, DataBreachRecord] = {}
        self._lock = asyncio.Lock()

    async def get(self, breach_id: str) -> DataBreachRecord | None:
        breach = self._data.get(breach_id)
        return _detached(breach) if breach is not None else None

    async def save(self, breach: DataBreachRecord) -> None:
        async with self._lock:
            self._data[breach.breach_id] = _detached(breach)

    async def list_all(self) -> list[DataBreachRecord]:
        return [_detached(b) for b in self._data.values()]
