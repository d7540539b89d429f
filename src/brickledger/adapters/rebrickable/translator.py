"""Translate Rebrickable payloads into domain records."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from brickledger.domain.model import (
    RemoteMinifig,
    RemotePart,
    RemotePartSearchHit,
    RemoteSetMetadata,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import MinifigDetail, PartInfo, SetDetail, SetMinifigResult, SetPartResult

UNKNOWN_PART_NAME = "Unknown part"
UNKNOWN_MINIFIG_NAME = "Minifigure"


def normalize_set_number(set_id: str) -> str:
    """Trim ``set_id`` and append the ``-1`` variant when none is given."""

    trimmed = set_id.strip()
    if not trimmed:
        return trimmed
    return trimmed if "-" in trimmed else f"{trimmed}-1"


def parse_set_part(result: SetPartResult) -> RemotePart | None:
    part = result.part
    if part is None or part.part_num is None:
        return None
    color = result.color
    return RemotePart(
        design_id=part.part_num,
        display_name=part.name or UNKNOWN_PART_NAME,
        quantity=result.quantity,
        is_spare=result.is_spare,
        color_external_id=str(color.id) if color is not None and color.id is not None else None,
        color_name=color.name if color is not None else None,
        color_rgb=color.rgb if color is not None else None,
        image_url=part.part_img_url,
    )


def parse_set_minifig(result: SetMinifigResult, detail: MinifigDetail | None) -> RemoteMinifig:
    """Combine a list entry with its (optional) detail lookup."""

    fig_id = result.list_fig_id
    name = result.list_name
    image_url: str | None = None
    external_ids: dict[str, str] = {}
    if detail is not None:
        fig_id = detail.fig_num or fig_id
        name = detail.name or name
        image_url = detail.image_url
        external_ids = detail.first_external_ids()
    return RemoteMinifig(
        design_id=fig_id or "",
        display_name=name or fig_id or UNKNOWN_MINIFIG_NAME,
        quantity=result.quantity,
        image_url=image_url,
        external_ids=external_ids,
    )


def parse_minifig_detail(fig_id: str, detail: MinifigDetail) -> RemoteMinifig:
    return RemoteMinifig(
        design_id=detail.fig_num or fig_id,
        display_name=detail.name or fig_id,
        image_url=detail.image_url,
        external_ids=detail.first_external_ids(),
    )


def parse_set_detail(normalized_set_id: str, detail: SetDetail) -> RemoteSetMetadata:
    return RemoteSetMetadata(
        set_id=detail.set_num or normalized_set_id,
        name=detail.name or normalized_set_id,
        year=detail.year,
        num_parts=detail.num_parts,
        theme_id=detail.theme_id,
        image_url=detail.set_img_url,
    )


def parse_search_hit(part: PartInfo) -> RemotePartSearchHit | None:
    if part.part_num is None:
        return None
    return RemotePartSearchHit(
        design_id=part.part_num,
        display_name=part.name or part.part_num,
        image_url=part.part_img_url,
        external_ids={vendor: tuple(ids) for vendor, ids in part.external_ids.items()},
    )


def collect_minifigs(minifigs: Iterable[RemoteMinifig]) -> list[RemoteMinifig]:
    """Merge minifigs sharing a (case-insensitive) fig id or name."""

    collected: dict[str, RemoteMinifig] = {}
    for minifig in minifigs:
        key = (minifig.design_id or minifig.display_name).strip().lower() or "unknown"
        existing = collected.get(key)
        if existing is None:
            collected[key] = minifig
            continue
        collected[key] = replace(
            existing,
            quantity=existing.quantity + minifig.quantity,
            image_url=existing.image_url or minifig.image_url,
            external_ids=existing.external_ids or minifig.external_ids,
        )
    return list(collected.values())


def dedupe_remote_parts(parts: Iterable[RemotePart]) -> list[RemotePart]:
    """Sum quantities of entries sharing kind, design id, color name and spare flag."""

    merged: dict[tuple[str, str, str, bool], RemotePart] = {}
    for part in parts:
        key = (part.kind.value, part.design_id, part.color_name or "", part.is_spare)
        existing = merged.get(key)
        if existing is None:
            merged[key] = part
        else:
            merged[key] = replace(existing, quantity=existing.quantity + part.quantity)
    return list(merged.values())
