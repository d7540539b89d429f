"""Rebrickable configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, cast

from .env import optional_env_choice, optional_env_float, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

REBRICKABLE_BASE_URL = "https://rebrickable.com/api/v3/lego"
REBRICKABLE_TIMEOUT_SECONDS = 15.0
DEFAULT_DETAIL_COOLDOWN_SECONDS = 60.0
DEFAULT_PAGE_SIZE = 1000

# "sqlite" keeps responses in the data dir across CLI runs
type HttpCacheMode = Literal["sqlite", "memory", "off"]
HTTP_CACHE_MODES: tuple[HttpCacheMode, ...] = ("sqlite", "memory", "off")
DEFAULT_HTTP_CACHE: HttpCacheMode = "sqlite"


def _should_cache_payload(payload: object) -> bool:
    # Rebrickable reports throttling and auth problems as {"detail": "..."}.
    return not (isinstance(payload, dict) and "detail" in payload)


@dataclass(frozen=True, slots=True)
class RebrickableConfig:
    api_key: str
    resilience: ResilienceConfig
    detail_cooldown_seconds: float = DEFAULT_DETAIL_COOLDOWN_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def base_url(self) -> str:
        return (self.resilience.base_url or REBRICKABLE_BASE_URL).rstrip("/")


def default_rebrickable_resilience(
    api_key: str, *, http_cache: HttpCacheMode = DEFAULT_HTTP_CACHE
) -> ResilienceConfig:
    cache = None
    if http_cache != "off":
        cache = CacheConfig(backend=http_cache, should_cache=_should_cache_payload)
    return ResilienceConfig(
        name="rebrickable",
        base_url=REBRICKABLE_BASE_URL,
        timeout_seconds=REBRICKABLE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        cache=cache,
        default_headers={
            "Authorization": f"key {api_key}",
            "Accept": "application/json",
        },
    )


def get_rebrickable_config(*, resilience: ResilienceConfig | None = None) -> RebrickableConfig:
    values = require_env_vars(("REBRICKABLE_API_KEY",))
    api_key = values["REBRICKABLE_API_KEY"]
    http_cache = cast(
        "HttpCacheMode",
        optional_env_choice("REBRICKABLE_HTTP_CACHE", HTTP_CACHE_MODES, DEFAULT_HTTP_CACHE),
    )
    return RebrickableConfig(
        api_key=api_key,
        resilience=resilience or default_rebrickable_resilience(api_key, http_cache=http_cache),
        detail_cooldown_seconds=optional_env_float(
            "REBRICKABLE_COOLDOWN_SECONDS", DEFAULT_DETAIL_COOLDOWN_SECONDS
        ),
    )
