"""Interfaces of the external collaborators the engine delegates I/O to.

The engine never talks to a database, a network or a message queue
itself.  Gathering and deleting a subject's data across other
subsystems is the Data Gateway's job; delivering regulator
notifications is the Notification Gateway's.  Both are awaited, and any
exception they raise is surfaced to the caller as a
``GatewayFailureError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from governance.models.breach import DataBreachRecord
    from governance.models.enums import AccessScope
    from governance.models.rights import DeletionOutcome


@runtime_checkable
class DataGateway(Protocol):
    """Fetches and deletes a subject's data in the collaborating subsystems."""

    async def gather(self, subject_id: str, scope: AccessScope) -> dict[str, Any]: ...

    async def delete(self, subject_id: str) -> DeletionOutcome: ...


@runtime_checkable
class NotificationGateway(Protocol):
    """Schedules delivery of a breach notification to the regulator."""

    async def schedule_regulatory_notification(self, breach: DataBreachRecord) -> None: ...
