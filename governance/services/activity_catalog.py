"""Processing activity catalog.

A read-mostly reference table of the declared data-processing
activities.  The ledger and the assessment store refuse to reference
activities that are not catalogued here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from governance.data.seed import default_activities
from governance.errors import InvalidActivityError, UnknownActivityError
from governance.services.clock import Clock, utcnow

if TYPE_CHECKING:
    from governance.models.activity import DataProcessingActivity
    from governance.services.stores import ActivityStore

logger = structlog.get_logger(__name__)


def validate_activity(activity: DataProcessingActivity) -> None:
    """Raise :class:`InvalidActivityError` unless *activity* is well formed."""
    problems: list[str] = []
    if activity.retention_days <= 0:
        problems.append("retention_days must be positive")
    if not [c for c in activity.data_categories if c.strip()]:
        problems.append("data_categories must not be empty")
    if not activity.legal_basis.strip():
        problems.append("legal_basis must not be empty")
    if problems:
        raise InvalidActivityError(
            "invalid processing activity",
            activity_id=activity.activity_id,
            problems=problems,
        )


class ActivityCatalog:
    __slots__ = ("_clock", "_store")

    def __init__(self, store: ActivityStore, clock: Clock = utcnow) -> None:
        self._store = store
        self._clock = clock

    async def register_activity(self, activity: DataProcessingActivity) -> DataProcessingActivity:
        validate_activity(activity)
        if not await self._store.add(activity):
            raise InvalidActivityError(
                "processing activity already registered",
                activity_id=activity.activity_id,
            )
        logger.info(
            "catalog.activity_registered",
            activity_id=activity.activity_id,
            legal_basis=activity.legal_basis,
            retention_days=activity.retention_days,
        )
        return activity

    async def seed_defaults(self) -> list[DataProcessingActivity]:
        """Insert the built-in activities that are not catalogued yet.

        Returns the activities actually added; safe to call repeatedly.
        """
        added: list[DataProcessingActivity] = []
        for activity in default_activities(self._clock()):
            validate_activity(activity)
            if await self._store.add(activity):
                added.append(activity)

        logger.info("catalog.defaults_seeded", added=len(added))
        return added

    async def get_activity(self, activity_id: str) -> DataProcessingActivity:
        activity = await self._store.get(activity_id)
        if activity is None:
            raise UnknownActivityError("processing activity not found", activity_id=activity_id)
        return activity

    async def exists(self, activity_id: str) -> bool:
        return await self._store.get(activity_id) is not None

    async def list_activities(self) -> list[DataProcessingActivity]:
        return await self._store.list_all()
