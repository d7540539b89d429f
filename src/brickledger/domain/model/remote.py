"""Normalized records returned by the remote catalog client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from brickledger.domain.model.enums import ComponentKind


@dataclass(frozen=True, slots=True, kw_only=True)
class RemotePart:
    design_id: str
    display_name: str
    quantity: int
    is_spare: bool = False
    color_external_id: str | None = None
    color_name: str | None = None
    color_rgb: str | None = None
    image_url: str | None = None
    kind: ComponentKind = ComponentKind.PART


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteMinifig:
    design_id: str
    display_name: str
    quantity: int = 1
    is_spare: bool = False
    image_url: str | None = None
    external_ids: Mapping[str, str] = field(default_factory=dict)

    def as_part(self) -> RemotePart:
        return RemotePart(
            design_id=self.design_id,
            display_name=self.display_name,
            quantity=self.quantity,
            is_spare=self.is_spare,
            image_url=self.image_url,
            kind=ComponentKind.MINIFIG,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoteSetMetadata:
    set_id: str
    name: str
    year: int | None = None
    num_parts: int | None = None
    theme_id: int | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RemotePartSearchHit:
    design_id: str
    display_name: str
    image_url: str | None = None
    external_ids: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
