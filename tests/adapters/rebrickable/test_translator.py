from __future__ import annotations

import pytest

from brickledger.adapters.rebrickable import dedupe_remote_parts, normalize_set_number
from brickledger.adapters.rebrickable.schema import (
    MinifigDetail,
    PartInfo,
    SetMinifigResult,
    SetPartResult,
)
from brickledger.adapters.rebrickable.translator import (
    collect_minifigs,
    parse_search_hit,
    parse_set_minifig,
    parse_set_part,
)
from brickledger.domain.model import ComponentKind, RemoteMinifig, RemotePart


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("75192", "75192-1"), (" 75192-2 ", "75192-2"), ("10497-1", "10497-1"), ("  ", "")],
)
def test_normalize_set_number(raw: str, expected: str) -> None:
    assert normalize_set_number(raw) == expected


def test_parse_set_part_reads_part_and_color() -> None:
    result = SetPartResult.model_validate(
        {
            "quantity": 4,
            "is_spare": True,
            "part": {"part_num": "3001", "name": "Brick 2 x 4", "part_img_url": ""},
            "color": {"id": 4, "name": "Red", "rgb": "C91A09"},
        }
    )

    part = parse_set_part(result)

    assert part == RemotePart(
        design_id="3001",
        display_name="Brick 2 x 4",
        quantity=4,
        is_spare=True,
        color_external_id="4",
        color_name="Red",
        color_rgb="C91A09",
    )


def test_parse_set_part_without_part_number_is_skipped() -> None:
    result = SetPartResult.model_validate({"quantity": 1, "part": {"part_num": " "}})

    assert parse_set_part(result) is None


def test_parse_set_minifig_prefers_detail_over_listing() -> None:
    listing = SetMinifigResult.model_validate(
        {"set_num": "fig-001", "name": "Luke", "quantity": 2, "minifig": {"fig_num": "fig-999"}}
    )
    detail = MinifigDetail.model_validate(
        {"set_num": "fig-999", "name": "Luke Skywalker", "img_url": "https://img.test/luke.png"}
    )

    minifig = parse_set_minifig(listing, detail)

    assert minifig.design_id == "fig-999"
    assert minifig.display_name == "Luke Skywalker"
    assert minifig.quantity == 2
    assert minifig.image_url == "https://img.test/luke.png"


def test_parse_set_minifig_without_detail_falls_back_to_listing() -> None:
    listing = SetMinifigResult.model_validate({"fig_num": "fig-002", "quantity": 1})

    minifig = parse_set_minifig(listing, None)

    assert minifig.design_id == "fig-002"
    assert minifig.display_name == "fig-002"


def test_collect_minifigs_merges_case_insensitively() -> None:
    merged = collect_minifigs(
        [
            RemoteMinifig(design_id="FIG-001", display_name="Luke", quantity=1),
            RemoteMinifig(
                design_id="fig-001",
                display_name="Luke",
                quantity=2,
                image_url="https://img.test/luke.png",
            ),
            RemoteMinifig(design_id="", display_name="Unnamed", quantity=1),
        ]
    )

    assert [(fig.design_id, fig.quantity) for fig in merged] == [("FIG-001", 3), ("", 1)]
    assert merged[0].image_url == "https://img.test/luke.png"


def test_dedupe_remote_parts_keeps_spares_and_kinds_apart() -> None:
    parts = [
        RemotePart(design_id="3001", display_name="Brick", quantity=2, color_name="Red"),
        RemotePart(design_id="3001", display_name="Brick", quantity=1, color_name="Red"),
        RemotePart(
            design_id="3001", display_name="Brick", quantity=1, color_name="Red", is_spare=True
        ),
        RemotePart(design_id="3001", display_name="Brick", quantity=1, color_name="Blue"),
        RemotePart(
            design_id="3001", display_name="Fig", quantity=1, kind=ComponentKind.MINIFIG
        ),
    ]

    deduped = dedupe_remote_parts(parts)

    assert [(part.color_name, part.is_spare, part.kind, part.quantity) for part in deduped] == [
        ("Red", False, ComponentKind.PART, 3),
        ("Red", True, ComponentKind.PART, 1),
        ("Blue", False, ComponentKind.PART, 1),
        (None, False, ComponentKind.MINIFIG, 1),
    ]


def test_parse_search_hit_stringifies_external_ids() -> None:
    part = PartInfo.model_validate(
        {"part_num": "3001", "name": "", "external_ids": {"LDraw": [3001], "BrickLink": "3001"}}
    )

    hit = parse_search_hit(part)

    assert hit is not None
    assert hit.display_name == "3001"
    assert hit.external_ids == {"LDraw": ("3001",), "BrickLink": ("3001",)}
