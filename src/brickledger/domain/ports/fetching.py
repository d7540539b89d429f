"""Ports for fetching remote catalog data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from brickledger.domain.model import RemoteMinifig, RemotePart, RemotePartSearchHit


@runtime_checkable
class SetInventoryFetcher(Protocol):
    def fetch_set_inventory(
        self, set_id: str, *, include_minifigs: bool = True
    ) -> list[RemotePart]: ...

    def fetch_set_minifigs(self, set_id: str) -> list[RemoteMinifig]: ...


@runtime_checkable
class PartSearchClient(Protocol):
    """Remote part search used when the local catalog has no match."""

    def search_parts(self, query: str) -> list[RemotePartSearchHit]: ...


__all__ = ["PartSearchClient", "SetInventoryFetcher"]
