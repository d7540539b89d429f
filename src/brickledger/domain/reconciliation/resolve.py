"""Resolve vendor line items to canonical (part, color) pairs.

Responsibilities of this stage:
- look up vendor part and color ids in the cross-reference tables
- apply the part and color fallback policies on a miss
- split the input into mapped and unmapped items without touching storage
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from brickledger.domain.model import vendor_key

from .contracts import ResolutionResult, ResolvedLineItem
from .policy import (
    ColorFallback,
    PartFallback,
    integer_color_fallback,
    passthrough_part_fallback,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from brickledger.domain.model import VendorLineItem
    from brickledger.domain.ports.persistence import CrossReferenceRepository

log = logging.getLogger(__name__)


class CrossReferenceLookup(Protocol):
    def find_part_mapping(self, vendor_part_id: str) -> str | None: ...

    def find_color_mapping(self, vendor_color_id: str) -> int | None: ...


@dataclass(frozen=True, slots=True)
class CrossReferenceIndex:
    """In-memory snapshot of the cross-reference tables."""

    parts: Mapping[str, str] = field(default_factory=dict)
    colors: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_repository(cls, repository: CrossReferenceRepository) -> CrossReferenceIndex:
        # repositories already key their maps by vendor_key
        return cls(parts=dict(repository.part_map()), colors=dict(repository.color_map()))

    def find_part_mapping(self, vendor_part_id: str) -> str | None:
        return self.parts.get(vendor_key(vendor_part_id))

    def find_color_mapping(self, vendor_color_id: str) -> int | None:
        return self.colors.get(vendor_key(vendor_color_id))


class ResolveLineItems(Protocol):
    def __call__(
        self,
        items: Iterable[VendorLineItem],
        *,
        lookup: CrossReferenceLookup,
    ) -> ResolutionResult: ...


@dataclass(slots=True)
class CrossReferenceResolver:
    part_fallback: PartFallback = passthrough_part_fallback
    color_fallback: ColorFallback = integer_color_fallback

    def __call__(
        self,
        items: Iterable[VendorLineItem],
        *,
        lookup: CrossReferenceLookup,
    ) -> ResolutionResult:
        result = ResolutionResult()
        for item in items:
            part_id = lookup.find_part_mapping(item.vendor_part_id)
            if part_id is None:
                part_id = self.part_fallback(item.vendor_part_id)
            color_id = lookup.find_color_mapping(item.vendor_color_id)
            if color_id is None:
                color_id = self.color_fallback(item.vendor_color_id)

            if part_id and color_id is not None:
                result.mapped.append(
                    ResolvedLineItem(item=item, part_id=part_id, color_id=color_id)
                )
            else:
                log.debug(
                    f"Unmapped vendor item part={item.vendor_part_id!r} "
                    f"color={item.vendor_color_id!r}"
                )
                result.unmapped.append(item)

        if result.unmapped:
            log.warning(f"{len(result.unmapped)} vendor items could not be mapped")
        return result
