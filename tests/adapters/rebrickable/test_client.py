from __future__ import annotations

import httpx
import pytest

from brickledger.adapters.rebrickable import (
    CatalogClientState,
    RebrickableAPIError,
    RebrickableClient,
)
from brickledger.domain.model import ComponentKind
from tests.helpers.http_fakes import (
    BASE_URL,
    RecordingHandler,
    make_client_factory,
    page,
    rebrickable_test_config,
    set_part,
)

PARTS_PATH = "/api/v3/lego/sets/75192-1/parts/"
MINIFIGS_PATH = "/api/v3/lego/sets/75192-1/minifigs/"


def _client(handler: RecordingHandler, clock: list[float] | None = None) -> RebrickableClient:
    now = clock if clock is not None else [0.0]
    return RebrickableClient(
        config=rebrickable_test_config(),
        client_factory=make_client_factory(handler),
        clock=lambda: now[0],
    )


def _parts_route(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("page") == "2":
        blue = set_part("3023", quantity=4, color_id=1, color_name="Blue")
        return httpx.Response(200, json=page([blue]))
    return httpx.Response(
        200,
        json=page(
            [set_part("3001", quantity=2), set_part("3001", quantity=3)],
            next_url=f"{BASE_URL}/sets/75192-1/parts/?page=2&page_size=2",
        ),
    )


def _detail(fig_num: str, name: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "set_num": fig_num,
            "name": name,
            "set_img_url": f"https://img.test/{fig_num}.png",
            "external_ids": {"BrickLink": [f"bl-{fig_num}"]},
        },
    )


def test_fetch_set_inventory_follows_pages_and_appends_minifigs() -> None:
    handler = RecordingHandler(
        {
            PARTS_PATH: _parts_route,
            MINIFIGS_PATH: lambda _: httpx.Response(
                200, json=page([{"set_num": "fig-001", "name": "Luke", "quantity": 2}])
            ),
            "/api/v3/lego/minifigs/fig-001/": lambda _: _detail("fig-001", "Luke Skywalker"),
        }
    )

    parts = _client(handler).fetch_set_inventory("75192")

    summary = [(part.kind, part.design_id, part.color_name, part.quantity) for part in parts]
    assert summary == [
        (ComponentKind.PART, "3001", "Black", 5),
        (ComponentKind.PART, "3023", "Blue", 4),
        (ComponentKind.MINIFIG, "fig-001", None, 2),
    ]
    assert parts[0].color_external_id == "0"
    assert parts[2].display_name == "Luke Skywalker"
    assert parts[2].image_url == "https://img.test/fig-001.png"
    first = handler.requests[0]
    assert first.url.path == PARTS_PATH
    assert first.url.params["page_size"] == "2"


def test_fetch_set_inventory_without_minifigs() -> None:
    handler = RecordingHandler({PARTS_PATH: _parts_route})

    parts = _client(handler).fetch_set_inventory("75192-1", include_minifigs=False)

    assert {part.kind for part in parts} == {ComponentKind.PART}
    assert MINIFIGS_PATH not in handler.paths()


def test_fetch_set_inventory_rejects_empty_part_list() -> None:
    handler = RecordingHandler({PARTS_PATH: lambda _: httpx.Response(200, json=page([]))})

    with pytest.raises(RebrickableAPIError, match="no parts"):
        _client(handler).fetch_set_inventory("75192")


def test_fetch_set_inventory_raises_on_listing_error() -> None:
    handler = RecordingHandler(
        {PARTS_PATH: lambda _: httpx.Response(401, json={"detail": "Invalid key."})}
    )

    with pytest.raises(RebrickableAPIError) as excinfo:
        _client(handler).fetch_set_inventory("75192")

    assert excinfo.value.status_code == 401


def test_fetch_set_inventory_tolerates_minifig_listing_failure() -> None:
    handler = RecordingHandler(
        {
            PARTS_PATH: _parts_route,
            MINIFIGS_PATH: lambda _: httpx.Response(500, json={"detail": "boom"}),
        }
    )

    parts = _client(handler).fetch_set_inventory("75192")

    assert [part.design_id for part in parts] == ["3001", "3023"]


def test_fetch_set_inventory_rejects_malformed_payload() -> None:
    handler = RecordingHandler(
        {PARTS_PATH: lambda _: httpx.Response(200, json={"results": "not a list"})}
    )

    with pytest.raises(RebrickableAPIError, match="Unexpected"):
        _client(handler).fetch_set_inventory("75192")


def test_pagination_stops_when_next_loops() -> None:
    looping = f"{BASE_URL}/sets/75192-1/parts/?page_size=2"
    handler = RecordingHandler(
        {PARTS_PATH: lambda _: httpx.Response(200, json=page([set_part("3001")], next_url=looping))}
    )

    parts = _client(handler).fetch_set_inventory("75192", include_minifigs=False)

    assert len(parts) == 1
    assert handler.paths() == [PARTS_PATH]


def test_minifig_details_are_cached_per_client() -> None:
    handler = RecordingHandler(
        {
            MINIFIGS_PATH: lambda _: httpx.Response(
                200,
                json=page(
                    [
                        {"set_num": "fig-001", "quantity": 1},
                        {"set_num": "fig-404", "name": "Mystery", "quantity": 1},
                    ]
                ),
            ),
            "/api/v3/lego/minifigs/fig-001/": lambda _: _detail("fig-001", "Luke Skywalker"),
        }
    )
    client = _client(handler)

    first = client.fetch_set_minifigs("75192")
    second = client.fetch_set_minifigs("75192")

    assert first == second
    assert [fig.display_name for fig in first] == ["Luke Skywalker", "Mystery"]
    assert first[0].external_ids == {"BrickLink": "bl-fig-001"}
    assert handler.paths().count("/api/v3/lego/minifigs/fig-001/") == 1
    # a 404 detail is remembered as a miss
    assert handler.paths().count("/api/v3/lego/minifigs/fig-404/") == 1
    assert client.state.detail_cache["fig-404"] is None


def test_rate_limited_details_pause_lookups_until_cooldown_expires() -> None:
    handler = RecordingHandler(
        {
            MINIFIGS_PATH: lambda _: httpx.Response(
                200,
                json=page(
                    [
                        {"set_num": "fig-a", "name": "Alpha", "quantity": 1},
                        {"set_num": "fig-b", "name": "Beta", "quantity": 1},
                    ]
                ),
            ),
            "/api/v3/lego/minifigs/fig-a/": lambda _: httpx.Response(
                429, json={"detail": "Request was throttled."}
            ),
            "/api/v3/lego/minifigs/fig-b/": lambda _: _detail("fig-b", "Beta Trooper"),
        }
    )
    clock = [100.0]
    client = _client(handler, clock)

    minifigs = client.fetch_set_minifigs("75192")

    assert [fig.display_name for fig in minifigs] == ["Alpha", "Beta"]
    assert "/api/v3/lego/minifigs/fig-b/" not in handler.paths()
    assert "fig-a" not in client.state.detail_cache
    assert client.state.in_cooldown(159.0)

    clock[0] = 161.0
    detail = client.fetch_minifig_metadata("fig-b")

    assert detail is not None
    assert detail.display_name == "Beta Trooper"


def test_clients_sharing_state_share_the_detail_cache() -> None:
    handler = RecordingHandler(
        {"/api/v3/lego/minifigs/fig-001/": lambda _: _detail("fig-001", "Luke Skywalker")}
    )
    state = CatalogClientState()
    factory = make_client_factory(handler)
    config = rebrickable_test_config()

    RebrickableClient(config=config, client_factory=factory, state=state).fetch_minifig_metadata(
        "fig-001"
    )
    RebrickableClient(config=config, client_factory=factory, state=state).fetch_minifig_metadata(
        "fig-001"
    )

    assert handler.paths() == ["/api/v3/lego/minifigs/fig-001/"]


def test_fetch_set_metadata() -> None:
    handler = RecordingHandler(
        {
            "/api/v3/lego/sets/75192-1/": lambda _: httpx.Response(
                200,
                json={
                    "set_num": "75192-1",
                    "name": "Millennium Falcon",
                    "year": 2017,
                    "theme_id": 171,
                    "num_parts": 7541,
                    "set_img_url": "https://img.test/75192-1.jpg",
                },
            )
        }
    )

    metadata = _client(handler).fetch_set_metadata(" 75192 ")

    assert metadata is not None
    assert metadata.name == "Millennium Falcon"
    assert metadata.year == 2017
    assert metadata.num_parts == 7541


def test_fetch_set_metadata_not_found() -> None:
    handler = RecordingHandler({})

    assert _client(handler).fetch_set_metadata("0000") is None


def test_search_parts() -> None:
    def search_route(request: httpx.Request) -> httpx.Response:
        assert request.url.params["search"] == "brick 2 x 4"
        assert request.url.params["page_size"] == "50"
        return httpx.Response(
            200,
            json=page(
                [
                    {
                        "part_num": "3001",
                        "name": "Brick 2 x 4",
                        "external_ids": {"BrickLink": ["3001"], "BrickOwl": [771344]},
                    },
                    {"part_num": None, "name": "broken"},
                ]
            ),
        )

    handler = RecordingHandler({"/api/v3/lego/parts/": search_route})

    hits = _client(handler).search_parts(" brick 2 x 4 ")

    assert len(hits) == 1
    assert hits[0].design_id == "3001"
    assert hits[0].external_ids == {"BrickLink": ("3001",), "BrickOwl": ("771344",)}
