"""Shared fakes and fixtures for the governance engine tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from config.settings import Settings
from governance.engine import GovernanceEngine
from governance.models import AccessScope, DataBreachRecord, DeletionOutcome, SubsystemDeletion

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class SequentialIds:
    """Deterministic identifier generator: ``<kind>-<n>``."""

    def __init__(self) -> None:
        self._counter = 0

    def new_id(self, kind: str) -> str:
        self._counter += 1
        return f"{kind}-{self._counter}"


class FakeDataGateway:
    """Records calls; delete outcome and failures are configurable per test."""

    def __init__(self) -> None:
        self.gather_calls: list[tuple[str, AccessScope]] = []
        self.delete_calls: list[str] = []
        self.gather_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.delete_outcome = DeletionOutcome(
            results=[
                SubsystemDeletion(subsystem="profiles", success=True),
                SubsystemDeletion(subsystem="health", success=True),
            ]
        )

    async def gather(self, subject_id: str, scope: AccessScope) -> dict[str, Any]:
        self.gather_calls.append((subject_id, scope))
        if self.gather_error is not None:
            raise self.gather_error
        return {
            "profile": {"subject_id": subject_id, "email": "user@example.com"},
            "health_data": {"symptoms": [], "medications": []},
            "scan_history": [],
            "preferences": {},
        }

    async def delete(self, subject_id: str) -> DeletionOutcome:
        self.delete_calls.append(subject_id)
        if self.delete_error is not None:
            raise self.delete_error
        return self.delete_outcome


class BlockingDataGateway(FakeDataGateway):
    """Delete waits on :attr:`release` so tests can interleave requests."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.delete_started = asyncio.Event()

    async def delete(self, subject_id: str) -> DeletionOutcome:
        self.delete_started.set()
        await self.release.wait()
        return await super().delete(subject_id)


class FakeNotificationGateway:
    def __init__(self) -> None:
        self.scheduled: list[DataBreachRecord] = []
        self.error: Exception | None = None

    async def schedule_regulatory_notification(self, breach: DataBreachRecord) -> None:
        if self.error is not None:
            raise self.error
        self.scheduled.append(breach)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def data_gateway() -> FakeDataGateway:
    return FakeDataGateway()


@pytest.fixture
def notifier() -> FakeNotificationGateway:
    return FakeNotificationGateway()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, privacy_contact_email="privacy@test.example")


@pytest.fixture
def engine(
    data_gateway: FakeDataGateway,
    notifier: FakeNotificationGateway,
    ids: SequentialIds,
    settings: Settings,
    clock: FakeClock,
) -> GovernanceEngine:
    return GovernanceEngine(data_gateway, notifier, ids, settings=settings, clock=clock)


@pytest.fixture
async def seeded_engine(engine: GovernanceEngine) -> GovernanceEngine:
    await engine.seed_defaults()
    return engine


@pytest.fixture
def blocking_gateway() -> BlockingDataGateway:
    return BlockingDataGateway()


@pytest.fixture
def blocking_engine(
    blocking_gateway: BlockingDataGateway,
    notifier: FakeNotificationGateway,
    ids: SequentialIds,
    settings: Settings,
    clock: FakeClock,
) -> GovernanceEngine:
    return GovernanceEngine(blocking_gateway, notifier, ids, settings=settings, clock=clock)
