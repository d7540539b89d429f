"""Pydantic models describing the Rebrickable API payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _stringify_external_ids(value: object) -> object:
    # Rebrickable mixes numeric and string ids inside external_ids
    if not isinstance(value, Mapping):
        return value
    mapping_value = cast(Mapping[object, object], value)
    normalized: dict[str, list[str]] = {}
    for vendor, ids in mapping_value.items():
        if isinstance(ids, list):
            items = cast(list[object], ids)
            normalized[str(vendor)] = [str(item) for item in items if item is not None]
        elif ids is not None:
            normalized[str(vendor)] = [str(ids)]
    return normalized


class RebrickableBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ErrorPayload(RebrickableBaseModel):
    detail: str


class PartInfo(RebrickableBaseModel):
    part_num: str | None = None
    name: str | None = None
    part_img_url: str | None = None
    external_ids: dict[str, list[str]] = Field(default_factory=dict)

    _normalize_part_num = field_validator("part_num", "name", "part_img_url", mode="before")(
        _blank_to_none
    )
    _normalize_external_ids = field_validator("external_ids", mode="before")(
        _stringify_external_ids
    )


class ColorInfo(RebrickableBaseModel):
    id: int | None = None
    name: str | None = None
    rgb: str | None = None

    _normalize_text = field_validator("name", "rgb", mode="before")(_blank_to_none)


class SetPartResult(RebrickableBaseModel):
    quantity: int = 0
    is_spare: bool = False
    part: PartInfo | None = None
    color: ColorInfo | None = None


class MinifigRef(RebrickableBaseModel):
    fig_num: str | None = None
    name: str | None = None


class SetMinifigResult(RebrickableBaseModel):
    set_num: str | None = None
    fig_num: str | None = None
    name: str | None = None
    quantity: int = 0
    set_img_url: str | None = None
    img_url: str | None = None
    minifig: MinifigRef | None = None

    _normalize_text = field_validator("set_num", "fig_num", "name", mode="before")(_blank_to_none)

    @property
    def list_fig_id(self) -> str | None:
        """``minifig.fig_num`` is authoritative; the root fields are fallbacks."""

        if self.minifig is not None and self.minifig.fig_num:
            return self.minifig.fig_num
        return self.fig_num or self.set_num

    @property
    def list_name(self) -> str | None:
        if self.minifig is not None and self.minifig.name:
            return self.minifig.name
        return self.name


class MinifigDetail(RebrickableBaseModel):
    fig_num: str | None = Field(
        default=None, validation_alias=AliasChoices("fig_num", "set_num")
    )
    name: str | None = None
    img_url: str | None = None
    set_img_url: str | None = None
    external_ids: dict[str, list[str]] = Field(default_factory=dict)

    _normalize_text = field_validator("fig_num", "name", mode="before")(_blank_to_none)
    _normalize_external_ids = field_validator("external_ids", mode="before")(
        _stringify_external_ids
    )

    @property
    def image_url(self) -> str | None:
        return self.img_url or self.set_img_url

    def first_external_ids(self) -> dict[str, str]:
        return {vendor: ids[0] for vendor, ids in self.external_ids.items() if ids}


class SetDetail(RebrickableBaseModel):
    set_num: str | None = None
    name: str | None = None
    year: int | None = None
    num_parts: int | None = None
    theme_id: int | None = None
    set_img_url: str | None = None


class PageEnvelope(RebrickableBaseModel):
    count: int | None = None
    next: str | None = None

    _normalize_next = field_validator("next", mode="before")(_blank_to_none)


class SetPartsPage(PageEnvelope):
    results: list[SetPartResult] = Field(default_factory=list)


class SetMinifigsPage(PageEnvelope):
    results: list[SetMinifigResult] = Field(default_factory=list)


class PartSearchPage(PageEnvelope):
    results: list[PartInfo] = Field(default_factory=list)
