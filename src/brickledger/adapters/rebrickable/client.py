"""HTTP client for the Rebrickable catalog API."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from brickledger.adapters.http_resilience import ResilientClient
from brickledger.config.rebrickable import RebrickableConfig, get_rebrickable_config
from brickledger.domain.ports.fetching import PartSearchClient, SetInventoryFetcher

from .schema import (
    MinifigDetail,
    PageEnvelope,
    PartSearchPage,
    SetDetail,
    SetMinifigsPage,
    SetPartsPage,
)
from .translator import (
    collect_minifigs,
    dedupe_remote_parts,
    normalize_set_number,
    parse_minifig_detail,
    parse_search_hit,
    parse_set_detail,
    parse_set_minifig,
    parse_set_part,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from brickledger.config.http_resilience import ResilienceConfig
    from brickledger.domain.model import (
        RemoteMinifig,
        RemotePart,
        RemotePartSearchHit,
        RemoteSetMetadata,
    )

log = getLogger(__name__)

SEARCH_PAGE_SIZE = 50


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class RebrickableAPIError(RuntimeError):
    """Raised when a primary Rebrickable request fails or returns an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class CatalogClientState:
    """Minifig detail cache and 429 cooldown shared by all calls of one client."""

    detail_cache: dict[str, MinifigDetail | None] = field(default_factory=dict)
    cooldown_until: float | None = None

    def in_cooldown(self, now: float) -> bool:
        return self.cooldown_until is not None and now < self.cooldown_until

    def start_cooldown(self, now: float, seconds: float) -> None:
        self.cooldown_until = now + seconds


@dataclass(slots=True)
class RebrickableClient:
    config: RebrickableConfig = field(default_factory=get_rebrickable_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    state: CatalogClientState = field(default_factory=CatalogClientState)
    clock: Callable[[], float] = field(default=time.monotonic)

    # Public synchronous API --------------------------------------------------

    def fetch_set_inventory(
        self, set_id: str, *, include_minifigs: bool = True
    ) -> list[RemotePart]:
        return asyncio.run(self._fetch_set_inventory_async(set_id, include_minifigs))

    def fetch_set_minifigs(self, set_id: str) -> list[RemoteMinifig]:
        return asyncio.run(self._with_client(self._fetch_set_minifigs, set_id))

    def fetch_set_metadata(self, set_id: str) -> RemoteSetMetadata | None:
        return asyncio.run(self._with_client(self._fetch_set_metadata, set_id))

    def fetch_minifig_metadata(self, fig_id: str) -> RemoteMinifig | None:
        return asyncio.run(self._with_client(self._fetch_minifig_metadata, fig_id))

    def search_parts(self, query: str) -> list[RemotePartSearchHit]:
        return asyncio.run(self._with_client(self._search_parts, query))

    # Async implementation ----------------------------------------------------

    async def _with_client[TResult](
        self,
        operation: Callable[[ResilientClient, str], Awaitable[TResult]],
        argument: str,
    ) -> TResult:
        async with self.client_factory(self.config.resilience) as client:
            return await operation(client, argument)

    async def _fetch_set_inventory_async(
        self, set_id: str, include_minifigs: bool
    ) -> list[RemotePart]:
        normalized = normalize_set_number(set_id)
        async with self.client_factory(self.config.resilience) as client:
            parts: list[RemotePart] = []
            url = self._listing_url(normalized, "parts")
            async for page in self._pages(client, url, SetPartsPage):
                for result in page.results:
                    part = parse_set_part(result)
                    if part is None:
                        log.debug(f"Skipping part entry without part number in {normalized}")
                        continue
                    parts.append(part)
            if not parts:
                raise RebrickableAPIError(f"Rebrickable returned no parts for set {normalized}")

            if include_minifigs:
                try:
                    minifigs = await self._fetch_set_minifigs(client, normalized)
                except (RebrickableAPIError, httpx.HTTPError) as exc:
                    log.warning(f"Rebrickable minifig listing failed for {normalized}: {exc}")
                    minifigs = []
                parts.extend(minifig.as_part() for minifig in minifigs)

        return dedupe_remote_parts(parts)

    async def _fetch_set_minifigs(
        self, client: ResilientClient, set_id: str
    ) -> list[RemoteMinifig]:
        normalized = normalize_set_number(set_id)
        url = self._listing_url(normalized, "minifigs")
        minifigs: list[RemoteMinifig] = []
        async for page in self._pages(client, url, SetMinifigsPage):
            for result in page.results:
                fig_id = result.list_fig_id
                detail = await self._minifig_detail(client, fig_id) if fig_id else None
                minifigs.append(parse_set_minifig(result, detail))
        return collect_minifigs(minifigs)

    async def _fetch_set_metadata(
        self, client: ResilientClient, set_id: str
    ) -> RemoteSetMetadata | None:
        normalized = normalize_set_number(set_id)
        response = await client.get(f"{self.config.base_url}/sets/{normalized}/")
        if response.status_code == httpx.codes.NOT_FOUND:
            log.warning(f"Rebrickable set metadata not found for {normalized}")
            return None
        self._raise_for_status(response, what="set metadata")
        detail = self._validate(SetDetail, response)
        return parse_set_detail(normalized, detail)

    async def _fetch_minifig_metadata(
        self, client: ResilientClient, fig_id: str
    ) -> RemoteMinifig | None:
        detail = await self._minifig_detail(client, fig_id.strip())
        if detail is None:
            return None
        return parse_minifig_detail(fig_id.strip(), detail)

    async def _search_parts(
        self, client: ResilientClient, query: str
    ) -> list[RemotePartSearchHit]:
        response = await client.get(
            f"{self.config.base_url}/parts/",
            params={"search": query.strip(), "page_size": SEARCH_PAGE_SIZE},
        )
        self._raise_for_status(response, what="part search")
        page = self._validate(PartSearchPage, response)
        hits = [parse_search_hit(part) for part in page.results]
        return [hit for hit in hits if hit is not None]

    def _listing_url(self, set_id: str, listing: str) -> str:
        return f"{self.config.base_url}/sets/{set_id}/{listing}/?page_size={self.config.page_size}"

    async def _pages[TPage: PageEnvelope](
        self,
        client: ResilientClient,
        url: str,
        page_model: type[TPage],
    ) -> AsyncIterator[TPage]:
        """Follow ``next`` links until the listing is exhausted."""

        next_url: str | None = url
        seen: set[str] = set()
        while next_url:
            if next_url in seen:
                log.warning(f"Rebrickable pagination loops back to {next_url}; stopping")
                return
            seen.add(next_url)
            response = await client.get(next_url)
            self._raise_for_status(response, what="listing")
            page = self._validate(page_model, response)
            yield page
            next_url = page.next

    async def _minifig_detail(self, client: ResilientClient, fig_id: str) -> MinifigDetail | None:
        """Detail lookup that never raises; misses come back as ``None``."""

        if fig_id in self.state.detail_cache:
            return self.state.detail_cache[fig_id]

        now = self.clock()
        if self.state.in_cooldown(now):
            log.debug(f"Skipping minifig detail for {fig_id}: rate-limit cooldown active")
            return None

        try:
            response = await client.get(f"{self.config.base_url}/minifigs/{fig_id}/")
        except httpx.HTTPError as exc:
            log.warning(f"Rebrickable minifig detail request failed for {fig_id}: {exc}")
            return None

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            cooldown = self.config.detail_cooldown_seconds
            self.state.start_cooldown(now, cooldown)
            log.warning(f"Rebrickable rate limit hit; pausing minifig details for {cooldown:.0f}s")
            return None

        detail: MinifigDetail | None = None
        if not response.is_success:
            log.warning(
                f"Rebrickable minifig detail failed for {fig_id}: HTTP {response.status_code}"
            )
        else:
            try:
                detail = MinifigDetail.model_validate_json(response.content)
            except ValidationError:
                log.warning(f"Rebrickable minifig detail for {fig_id} is not valid JSON")
        self.state.detail_cache[fig_id] = detail
        return detail

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, what: str) -> None:
        if response.is_success:
            return
        log.error(f"Rebrickable {what} request failed: HTTP {response.status_code}")
        raise RebrickableAPIError(
            f"Rebrickable {what} request failed: HTTP {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def _validate[TModel: PageEnvelope | SetDetail](
        model: type[TModel], response: httpx.Response
    ) -> TModel:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise RebrickableAPIError(
                "Unexpected Rebrickable response payload", status_code=response.status_code
            ) from exc


if TYPE_CHECKING:
    _fetcher_check: SetInventoryFetcher = RebrickableClient()
    _search_check: PartSearchClient = RebrickableClient()
