"""Breach register.

Records personal-data breaches, flags the ones that must be reported to
the regulator and hands them to the Notification Gateway.  Delivery is
the gateway's business; the register only schedules it.

Status lifecycle::

    investigating -> contained -> resolved
          \\              \\            \\
           +--------------+------------+--> reported (terminal)

Forward moves may skip a step; nothing ever moves backwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import structlog

from governance.errors import (
    BreachNotFoundError,
    GatewayFailureError,
    InvalidArgumentError,
    InvalidTimelineError,
    InvalidTransitionError,
)
from governance.models.breach import BreachReport, DataBreachRecord
from governance.models.enums import BreachSeverity, BreachStatus
from governance.services.clock import Clock, utcnow
from governance.services.locks import KeyedLock

if TYPE_CHECKING:
    from governance.services.gateways import NotificationGateway
    from governance.services.identifiers import IdentifierGenerator
    from governance.services.stores import BreachStore

logger = structlog.get_logger(__name__)

_NOTIFIABLE_SEVERITIES: Final[frozenset[BreachSeverity]] = frozenset(
    {BreachSeverity.HIGH, BreachSeverity.CRITICAL}
)

# Position along the investigation track; REPORTED sits outside it.
_PROGRESS: Final[dict[BreachStatus, int]] = {
    BreachStatus.INVESTIGATING: 0,
    BreachStatus.CONTAINED: 1,
    BreachStatus.RESOLVED: 2,
}


def can_transition(current: BreachStatus, target: BreachStatus) -> bool:
    if current == BreachStatus.REPORTED:
        return False
    if target == BreachStatus.REPORTED:
        return True
    return _PROGRESS[target] > _PROGRESS[current]


def requires_regulatory_notification(severity: BreachSeverity) -> bool:
    return severity in _NOTIFIABLE_SEVERITIES


class BreachRegister:
    """Write path for breach incidents.

    Parameters
    ----------
    store:
        Storage port for breach records.
    notifications:
        Gateway invoked once per notifiable breach, before the record is
        stored.  If it fails, nothing is stored.
    ids:
        Identifier generator for breach ids.
    clock:
        Returns the current UTC time.
    """

    __slots__ = ("_clock", "_ids", "_locks", "_notifications", "_store")

    def __init__(
        self,
        store: BreachStore,
        notifications: NotificationGateway,
        ids: IdentifierGenerator,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._ids = ids
        self._clock = clock
        self._locks = KeyedLock()

    async def record_breach(self, report: BreachReport) -> DataBreachRecord:
        now = self._clock()
        discovery_date = report.discovery_date or now
        breach_date = report.breach_date or discovery_date
        if discovery_date < breach_date:
            raise InvalidTimelineError(
                "discovery_date precedes breach_date",
                breach_date=breach_date.isoformat(),
                discovery_date=discovery_date.isoformat(),
            )

        breach = DataBreachRecord(
            breach_id=self._ids.new_id("breach"),
            breach_date=breach_date,
            discovery_date=discovery_date,
            affected_subjects=report.affected_subjects,
            data_categories=list(report.data_categories),
            breach_type=report.breach_type,
            severity=report.severity,
            description=report.description,
            cause=report.cause,
            measures=list(report.measures),
            regulatory_notification=requires_regulatory_notification(report.severity),
            subject_notification=report.subject_notification,
        )

        log = logger.bind(breach_id=breach.breach_id, severity=breach.severity)

        if breach.regulatory_notification:
            try:
                await self._notifications.schedule_regulatory_notification(breach)
            except Exception as exc:
                log.error("breach.notification.failed", error=str(exc))
                raise GatewayFailureError(
                    "regulatory notification could not be scheduled",
                    operation="schedule_regulatory_notification",
                    breach_id=breach.breach_id,
                ) from exc
            log.warning("breach.notification.scheduled")

        await self._store.save(breach)
        log.warning(
            "breach.recorded",
            affected_subjects=breach.affected_subjects,
            breach_type=breach.breach_type,
            regulatory_notification=breach.regulatory_notification,
        )
        return breach

    async def advance_status(
        self,
        breach_id: str,
        status: BreachStatus,
        *,
        reported_to: str | None = None,
    ) -> DataBreachRecord:
        """Move a breach forward along its lifecycle.

        Moving to ``reported`` confirms the notification was sent: it
        needs the recipient in *reported_to* and stamps the report time.
        """
        try:
            target = BreachStatus(status)
        except ValueError as exc:
            raise InvalidArgumentError("unknown breach status", breach_id=breach_id, status=str(status)) from exc
        if target == BreachStatus.REPORTED and not (reported_to and reported_to.strip()):
            raise InvalidArgumentError("reported_to is required when reporting a breach", breach_id=breach_id)

        async with self._locks.hold(breach_id):
            current = await self.get_breach(breach_id)
            if not can_transition(current.status, target):
                raise InvalidTransitionError(
                    "breach status cannot move backwards",
                    breach_id=breach_id,
                    current=current.status,
                    requested=target,
                )

            update: dict[str, object] = {"status": target}
            if target == BreachStatus.REPORTED:
                now = self._clock()
                update.update(reported_to=reported_to, reported_at=now, notification_date=now)
            advanced = current.model_copy(update=update)
            await self._store.save(advanced)

        logger.info(
            "breach.status_changed",
            breach_id=breach_id,
            previous=current.status,
            status=target,
        )
        return advanced

    async def get_breach(self, breach_id: str) -> DataBreachRecord:
        breach = await self._store.get(breach_id)
        if breach is None:
            raise BreachNotFoundError("breach not found", breach_id=breach_id)
        return breach

    async def list_breaches(self) -> list[DataBreachRecord]:
        return await self._store.list_all()
