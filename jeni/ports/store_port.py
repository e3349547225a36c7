"""Record store port — abstract interface for persisted user data.

Core modules depend on this protocol, never on a specific database.
Every call is scoped to one owner; rows are plain dicts.
"""

from __future__ import annotations

from typing import Any, Protocol

from jeni.data.models import RecordKind


class StoreError(Exception):
    """Raised when any record store operation fails."""


class RecordStore(Protocol):
    """Abstract record store used by core modules."""

    async def create(
        self, kind: RecordKind, owner: str, values: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def update(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any],
        values: dict[str, Any],
    ) -> int: ...

    async def query(
        self,
        kind: RecordKind,
        owner: str,
        where: dict[str, Any] | None = None,
        since: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...
