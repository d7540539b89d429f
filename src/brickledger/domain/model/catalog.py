"""Canonical catalog entities and vendor cross-references."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from brickledger.domain.model.enums import CatalogSource  # noqa: TC001


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(eq=False, kw_only=True)
class CanonicalPart:
    """Vendor-agnostic part identity keyed by its shape key."""

    shape_key: str
    name_generic: str
    category_id: int | None = None
    is_printed: bool = False
    is_minifig_part: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: int | None = None

    def rename(self, name: str) -> bool:
        """Apply a non-empty display name; return whether it changed."""

        if not name or name == self.name_generic:
            return False
        self.name_generic = name
        return True

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or utcnow()


@dataclass(eq=False, kw_only=True)
class CanonicalColor:
    """Canonical color; name and RGB are backfilled, never overwritten."""

    generic_name: str
    rgb_hex: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: int | None = None

    def backfill(self, *, name: str | None, rgb_hex: str | None) -> bool:
        changed = False
        if not self.generic_name and name:
            self.generic_name = name
            changed = True
        if not self.rgb_hex and rgb_hex:
            self.rgb_hex = rgb_hex
            changed = True
        return changed

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or utcnow()


@dataclass(eq=False, kw_only=True)
class PartSourceId:
    part_id: int
    source: CatalogSource
    source_id: str
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class ColorSourceId:
    color_id: int
    source: CatalogSource
    source_id: str
    name: str | None = None
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class PartCrossReference:
    canonical_part_id: str
    rebrickable_part_id: str | None = None
    bricklink_part_id: str | None = None
    brickowl_part_id: str | None = None
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class ColorCrossReference:
    canonical_color_id: int
    rebrickable_color_id: str | None = None
    bricklink_color_id: str | None = None
    brickowl_color_id: str | None = None
    id: int | None = None
