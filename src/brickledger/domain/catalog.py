"""Canonical catalog store: idempotent part/color upserts and offline search."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from brickledger.domain.model import CanonicalColor, CanonicalPart, CatalogSource

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from brickledger.domain.model import RemotePart
    from brickledger.domain.ports.fetching import PartSearchClient
    from brickledger.domain.ports.unit_of_work import CatalogRepositories, CatalogUnitOfWork

log = logging.getLogger(__name__)

SEARCH_LIMIT = 50
_ID_LIKE = re.compile(r"^[A-Za-z0-9]+$")

# vendor keys used in Rebrickable ``external_ids`` payloads
EXTERNAL_ID_SOURCES: dict[str, CatalogSource] = {
    "BrickLink": CatalogSource.BRICKLINK,
    "BrickOwl": CatalogSource.BRICKOWL,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogSearchHit:
    part_id: int
    shape_key: str
    name: str
    source_id: str | None = None


@dataclass(slots=True)
class CatalogHydrationResult:
    part_ids: dict[str, int] = field(default_factory=dict)
    color_ids: dict[str, int] = field(default_factory=dict)
    skipped: int = 0

    @property
    def parts(self) -> int:
        return len(self.part_ids)

    @property
    def colors(self) -> int:
        return len(self.color_ids)


def _require(value: str, what: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{what} must not be empty")
    return cleaned


def _persisted_id(entity: CanonicalPart | CanonicalColor) -> int:
    if entity.id is None:
        raise RuntimeError(f"{type(entity).__name__} was not assigned an id")
    return entity.id


def _upsert_part(
    repositories: CatalogRepositories,
    source: CatalogSource,
    source_id: str,
    display_name: str,
) -> CanonicalPart:
    shape_key = _require(source_id, "source_id")
    name = _require(display_name, "display_name")

    part = repositories.parts.get_by_shape_key(shape_key)
    if part is None:
        part = CanonicalPart(shape_key=shape_key, name_generic=name)
        repositories.parts.add(part)
    else:
        part.rename(name)
        part.touch()
    repositories.parts.upsert_source_id(part, source, shape_key)
    return part


def _upsert_color(
    repositories: CatalogRepositories,
    source: CatalogSource,
    source_id: str,
    display_name: str,
    rgb: str | None,
) -> CanonicalColor:
    external_id = _require(source_id, "source_id")
    name = _require(display_name, "display_name")
    rgb_hex = (rgb or "").strip() or None

    color = repositories.colors.get_by_source_id(source, external_id)
    if color is None:
        color = repositories.colors.get_by_name(name)
    if color is None:
        color = CanonicalColor(generic_name=name, rgb_hex=rgb_hex)
        repositories.colors.add(color)
    else:
        color.backfill(name=name, rgb_hex=rgb_hex)
        color.touch()
    repositories.colors.upsert_source_id(color, source, external_id, name)
    return color


@dataclass(slots=True)
class CanonicalCatalog:
    """Canonical parts and colors, each upsert committed as one unit of work."""

    unit_of_work_factory: Callable[[], CatalogUnitOfWork]
    source: CatalogSource = CatalogSource.REBRICKABLE

    def upsert_part(
        self,
        source_id: str,
        display_name: str,
        *,
        source: CatalogSource | None = None,
    ) -> int:
        with self.unit_of_work_factory() as uow:
            part = _upsert_part(uow.repositories, source or self.source, source_id, display_name)
            uow.commit()
        return _persisted_id(part)

    def upsert_color(
        self,
        source_id: str,
        display_name: str,
        rgb: str | None = None,
        *,
        source: CatalogSource | None = None,
    ) -> int:
        with self.unit_of_work_factory() as uow:
            color = _upsert_color(
                uow.repositories, source or self.source, source_id, display_name, rgb
            )
            uow.commit()
        return _persisted_id(color)

    def hydrate(self, remote_parts: Iterable[RemotePart]) -> CatalogHydrationResult:
        """Upsert every part and color of a fetched inventory in one transaction."""

        result = CatalogHydrationResult()
        with self.unit_of_work_factory() as uow:
            for remote in remote_parts:
                design_id = remote.design_id.strip()
                if not design_id:
                    result.skipped += 1
                    continue
                part = _upsert_part(
                    uow.repositories,
                    self.source,
                    design_id,
                    remote.display_name.strip() or design_id,
                )
                result.part_ids[design_id] = _persisted_id(part)

                if remote.color_external_id and remote.color_name:
                    color = _upsert_color(
                        uow.repositories,
                        self.source,
                        remote.color_external_id,
                        remote.color_name,
                        remote.color_rgb,
                    )
                    result.color_ids[remote.color_external_id] = _persisted_id(color)
            uow.commit()

        log.info(
            f"Hydrated catalog with {result.parts} parts and {result.colors} colors "
            f"({result.skipped} entries skipped)"
        )
        return result

    def search(
        self,
        query: str,
        preferred_source: CatalogSource = CatalogSource.BRICKLINK,
    ) -> list[CatalogSearchHit]:
        """Offline search; id-like queries match shape key prefixes."""

        text = query.strip()
        if not text:
            return []
        id_like = _ID_LIKE.match(text) is not None

        with self.unit_of_work_factory() as uow:
            rows = uow.repositories.parts.search(
                text,
                id_like=id_like,
                preferred_source=preferred_source,
                limit=SEARCH_LIMIT,
            )
            return [
                CatalogSearchHit(
                    part_id=_persisted_id(part),
                    shape_key=part.shape_key,
                    name=part.name_generic,
                    source_id=source_id,
                )
                for part, source_id in rows
            ]

    def search_with_fallback(
        self,
        query: str,
        preferred_source: CatalogSource,
        client: PartSearchClient,
    ) -> list[CatalogSearchHit]:
        """Search locally; on no match, hydrate from the remote catalog and retry."""

        text = query.strip()
        if not text:
            return []
        hits = self.search(text, preferred_source)
        if hits:
            return hits

        remote_hits = client.search_parts(text)
        if not remote_hits:
            return []

        with self.unit_of_work_factory() as uow:
            for remote in remote_hits:
                part = _upsert_part(
                    uow.repositories, self.source, remote.design_id, remote.display_name
                )
                for vendor, vendor_ids in remote.external_ids.items():
                    vendor_source = EXTERNAL_ID_SOURCES.get(vendor)
                    if vendor_source is None:
                        continue
                    for vendor_id in vendor_ids:
                        if vendor_id.strip():
                            uow.repositories.parts.upsert_source_id(
                                part, vendor_source, vendor_id.strip()
                            )
            uow.commit()
        log.info(f"Remote search hydrated {len(remote_hits)} parts for {text!r}")
        return self.search(text, preferred_source)
