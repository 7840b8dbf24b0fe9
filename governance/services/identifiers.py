"""Identifier generation for consents, requests, records, assessments and breaches."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import uuid4


@runtime_checkable
class IdentifierGenerator(Protocol):
    """Supplies globally unique identifiers; safe under concurrent use."""

    def new_id(self, kind: str) -> str: ...


class UUIDGenerator:
    """Random UUID4 identifiers, prefixed with the entity kind for readability.

    The prefix is cosmetic: nothing in the engine parses identifiers.
    """

    __slots__ = ()

    def new_id(self, kind: str) -> str:
        return f"{kind}_{uuid4().hex}"
