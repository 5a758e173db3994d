"""
Data service.

Cache-or-fetch orchestration for the three lookups the API exposes:
set list, cards in a set, and card pricing. Each collection has its own
policy:

| Collection    | TTL                           | Stale                  | Fetch fails            |
|---------------|-------------------------------|------------------------|------------------------|
| Set list      | 24h                           | serve, refresh in bg   | cache, else fallback   |
| Cards for set | none (current sets: 24h)      | refetch current sets   | cache, else []         |
| Card pricing  | 24h hard                      | refetch synchronously  | cache flagged is_stale |

Concurrent callers for the same key share one in-flight upstream request.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, TypeVar

from pokeprice.cache.base import CacheStore, Clock, cache_age_seconds, is_stale, utc_now
from pokeprice.clients.pokedata import SERVICE_NAME, PokeDataClient
from pokeprice.config import (
    CARD_PRICING_COLLECTION,
    CARDS_BY_SET_COLLECTION,
    CONFIG_COLLECTION,
    SET_LIST_COLLECTION,
    settings,
)
from pokeprice.models.cache import PricingResult
from pokeprice.models.card import Card
from pokeprice.models.failure import MissingIdentifierError, UpstreamError
from pokeprice.models.mapping import SetMappingEntry
from pokeprice.models.set import (
    PokemonSet,
    ensure_set_ids,
    is_synthesized_id,
    sort_sets_by_release_date,
)
from pokeprice.services.current_sets import DEFAULT_CURRENT_SETS, CurrentSetsConfig
from pokeprice.services.expansion import classify
from pokeprice.services.set_mapping import SetMappingTable

logger = logging.getLogger(__name__)

T = TypeVar("T")

SET_LIST_KEY = "all"
CURRENT_SETS_KEY = "current_sets"
CARD_IMAGE_BASE_URL = "https://images.pokemontcg.io"


@dataclass
class RefreshStatus:
    """Counters for background set-list refreshes, exposed via /status/refresh."""

    attempts: int = 0
    successes: int = 0
    failures: int = 0
    last_success: datetime | None = None
    last_failure: datetime | None = None
    last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attempts": self.attempts,
            "successes": self.successes,
            "failures": self.failures,
            "last_success": self.last_success.isoformat() if self.last_success else None,
            "last_failure": self.last_failure.isoformat() if self.last_failure else None,
            "last_error": self.last_error,
        }


def load_fallback_sets(path: Path | None = None) -> list[PokemonSet]:
    """
    Load the bundled set list served when upstream and cache both fail.

    Returns an empty list if the file is missing or unreadable.
    """
    if path is None:
        path = settings.fallback_sets_path

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error("Fallback set list not found at %s", path)
        return []
    except ValueError as e:
        logger.error("Fallback set list %s is not valid JSON: %s", path, e)
        return []

    if not isinstance(data, list):
        logger.error("Fallback set list %s is not a list", path)
        return []

    return [PokemonSet.from_dict(item) for item in data if isinstance(item, dict)]


async def load_current_sets(cache: CacheStore) -> CurrentSetsConfig:
    """Read the persisted current-sets snapshot, or the baseline if none."""
    entry = await cache.get(CONFIG_COLLECTION, CURRENT_SETS_KEY)
    if entry is None or not isinstance(entry.payload, dict):
        return DEFAULT_CURRENT_SETS

    try:
        return CurrentSetsConfig.from_dict(entry.payload)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring invalid current-sets config: %s", e)
        return DEFAULT_CURRENT_SETS


def card_image_urls(tcg_set_id: str, card_number: str) -> tuple[str, str] | None:
    """
    Build Pokemon TCG image URLs for a card.

    Numeric card numbers lose their leading zeros ("002" -> "2"), matching
    the image host's paths. Returns None for an empty card number.
    """
    number = card_number.strip()
    if not number:
        return None
    if number.isdigit():
        number = str(int(number))

    base = f"{CARD_IMAGE_BASE_URL}/{tcg_set_id}/{number}"
    return f"{base}.png", f"{base}_hires.png"


def _normalize_sets(sets: list[PokemonSet]) -> list[PokemonSet]:
    sets = ensure_set_ids(sets)
    sets = [s if s.series_expansion else replace(s, series_expansion=classify(s)) for s in sets]
    return sort_sets_by_release_date(sets)


class DataService:
    """
    Orchestrates cache and upstream for sets, cards, and pricing.

    Collaborators are injected so tests can substitute the clock, the
    cache store, and the upstream client.
    """

    def __init__(
        self,
        client: PokeDataClient,
        cache: CacheStore,
        current_sets: CurrentSetsConfig = DEFAULT_CURRENT_SETS,
        mapping: SetMappingTable | None = None,
        fallback_loader: Callable[[], list[PokemonSet]] = load_fallback_sets,
        *,
        set_list_ttl: timedelta | None = None,
        pricing_ttl: timedelta | None = None,
        current_set_revalidate: timedelta | None = None,
        set_list_timeout: float | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._client = client
        self._cache = cache
        self._mapping = mapping if mapping is not None else SetMappingTable()
        self._fallback_loader = fallback_loader
        self._clock = clock

        self.current_sets = current_sets
        if set_list_ttl is None:
            set_list_ttl = timedelta(hours=settings.set_list_ttl_hours)
        if pricing_ttl is None:
            pricing_ttl = timedelta(hours=settings.pricing_ttl_hours)
        if current_set_revalidate is None:
            current_set_revalidate = timedelta(hours=settings.current_set_revalidate_hours)
        self.set_list_ttl = set_list_ttl
        self.pricing_ttl = pricing_ttl
        self.current_set_revalidate = current_set_revalidate
        self.set_list_timeout = (
            set_list_timeout if set_list_timeout is not None else settings.set_list_timeout
        )

        self.refresh_status = RefreshStatus()
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._background_tasks: set[asyncio.Task[None]] = set()

    # --- single flight ---

    async def _single_flight(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Run factory() once per key among concurrent callers.

        The shared task is shielded so a caller giving up (timeout or
        cancellation) doesn't cancel the fetch for the others.
        """
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the exception retrieved; every waiter that stayed gets it anyway
        if not task.cancelled():
            task.exception()

    def in_flight(self, key: str) -> bool:
        return key in self._in_flight

    # --- set list ---

    async def get_set_list(self, force_refresh: bool = False) -> list[PokemonSet]:
        """
        Get all sets, newest first, each with a non-null id.

        A fresh cache is served as-is. A stale cache is served while a
        background refresh runs. Otherwise upstream is fetched with a short
        timeout; on failure the last cached list, then the bundled fallback
        list, is returned.
        """
        entry = None
        if not force_refresh:
            entry = await self._cache.get(SET_LIST_COLLECTION, SET_LIST_KEY)
        if entry is not None:
            cached = self._sets_from_payload(entry.payload)
            if cached:
                if is_stale(entry.written_at, self.set_list_ttl, self._clock()):
                    logger.info("Set list cache is stale; refreshing in background")
                    self._schedule_background_refresh()
                return cached

        try:
            return await asyncio.wait_for(
                self._single_flight(SET_LIST_COLLECTION, self._fetch_set_list),
                timeout=self.set_list_timeout,
            )
        except TimeoutError:
            logger.warning("Set list fetch exceeded %.1fs", self.set_list_timeout)
        except UpstreamError as e:
            logger.warning("Set list fetch failed: %s", e.message)

        if entry is None:
            entry = await self._cache.get(SET_LIST_COLLECTION, SET_LIST_KEY)
        if entry is not None:
            cached = self._sets_from_payload(entry.payload)
            if cached:
                logger.info("Serving last known set list (%d sets)", len(cached))
                return cached

        fallback = _normalize_sets(self._fallback_loader())
        logger.warning("Serving bundled fallback set list (%d sets)", len(fallback))
        return fallback

    async def refresh_set_list(self) -> list[PokemonSet]:
        """
        Fetch the set list from upstream, bypassing cache and timeout.

        Raises:
            UpstreamError: If the fetch fails
        """
        return await self._single_flight(SET_LIST_COLLECTION, self._fetch_set_list)

    async def _fetch_set_list(self) -> list[PokemonSet]:
        sets = await self._client.get_sets()
        if not sets:
            raise UpstreamError(SERVICE_NAME, None, "Set list response contained no sets")

        sets = _normalize_sets(sets)
        await self._cache.put(SET_LIST_COLLECTION, SET_LIST_KEY, [s.to_dict() for s in sets])
        await self.update_current_sets(sets)

        logger.info("Fetched %d sets from %s", len(sets), SERVICE_NAME)
        return sets

    def _sets_from_payload(self, payload: Any) -> list[PokemonSet]:
        if not isinstance(payload, list):
            return []
        sets = [PokemonSet.from_dict(item) for item in payload if isinstance(item, dict)]
        return _normalize_sets(sets)

    def _schedule_background_refresh(self) -> None:
        if self.in_flight(SET_LIST_COLLECTION):
            return
        task = asyncio.create_task(self._background_refresh())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _background_refresh(self) -> None:
        self.refresh_status.attempts += 1
        try:
            await self.refresh_set_list()
        except Exception as e:
            self.refresh_status.failures += 1
            self.refresh_status.last_failure = self._clock()
            self.refresh_status.last_error = str(e)
            logger.warning("Background set list refresh failed: %s", e)
            return

        self.refresh_status.successes += 1
        self.refresh_status.last_success = self._clock()

    async def wait_for_background_tasks(self) -> None:
        """Wait for scheduled background refreshes (shutdown and tests)."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    # --- cards ---

    async def get_cards_for_set(
        self,
        set_id: int | None,
        set_code: str | None = None,
        force_refresh: bool = False,
    ) -> list[Card]:
        """
        Get the cards of one set, with image URLs where a mapping exists.

        Cached cards are served indefinitely, except for current sets which
        are refetched once older than current_set_revalidate. Sets whose id
        was synthesized by ensure_set_ids have no PokeData counterpart and
        yield [] without a fetch.

        Raises:
            MissingIdentifierError: If set_id is missing. The set code alone
                is ambiguous, so no fetch is attempted.
        """
        if set_id is None:
            raise MissingIdentifierError("set_id")
        if is_synthesized_id(set_id):
            logger.info("Set %s has no PokeData id; no cards to fetch", set_id)
            return []

        key = str(set_id)
        entry = None if force_refresh else await self._cache.get(CARDS_BY_SET_COLLECTION, key)
        if entry is not None:
            cached = self._cards_from_payload(entry.payload)
            if set_code is None:
                set_code = await self._lookup_set_code(set_id)
            revalidate = self.current_sets.is_current(set_code) and is_stale(
                entry.written_at, self.current_set_revalidate, self._clock()
            )
            if not revalidate:
                return cached
            logger.info("Revalidating cards for current set %s (%s)", set_id, set_code)

        try:
            return await self._single_flight(
                f"{CARDS_BY_SET_COLLECTION}:{key}", lambda: self._fetch_cards(set_id)
            )
        except UpstreamError as e:
            logger.warning("Card fetch for set %s failed: %s", set_id, e.message)

        if entry is None:
            entry = await self._cache.get(CARDS_BY_SET_COLLECTION, key)
        return self._cards_from_payload(entry.payload) if entry is not None else []

    async def _fetch_cards(self, set_id: int) -> list[Card]:
        fetched = await self._client.get_cards_in_set(set_id)
        cards = [self.enhance_card_images(card) for card in fetched]
        if cards:
            payload = [c.to_dict() for c in cards]
            await self._cache.put(CARDS_BY_SET_COLLECTION, str(set_id), payload)
        else:
            logger.warning("No cards returned for set %s; not caching", set_id)
        return cards

    def _cards_from_payload(self, payload: Any) -> list[Card]:
        if not isinstance(payload, list):
            return []

        cards: list[Card] = []
        for item in payload:
            try:
                cards.append(self.enhance_card_images(Card.from_dict(item)))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed cached card: %s", e)
        return cards

    async def _lookup_set_code(self, set_id: int) -> str | None:
        entry = await self._cache.get(SET_LIST_COLLECTION, SET_LIST_KEY)
        if entry is None or not isinstance(entry.payload, list):
            return None
        for item in entry.payload:
            if isinstance(item, dict) and str(item.get("id")) == str(set_id):
                return item.get("code")
        return None

    def enhance_card_images(self, card: Card, mapping: SetMappingEntry | None = None) -> Card:
        """
        Fill in Pokemon TCG image URLs from the reconciled set mapping.

        Cards that already have images, or whose set has no mapping, are
        returned unchanged.
        """
        if card.image_small and card.image_large:
            return card

        if mapping is None:
            mapping = self._mapping.get_by_internal_id(card.set_id)
        if mapping is None:
            return card

        urls = card_image_urls(mapping.external_set_id, card.card_number)
        if urls is None:
            return card
        return card.with_images(*urls)

    # --- pricing ---

    async def get_card_pricing(
        self,
        card_id: str | None,
        set_id: int | None = None,
    ) -> PricingResult:
        """
        Get pricing for a card.

        Cached pricing younger than pricing_ttl is served directly. Older
        pricing is refetched; if that fails, the cached value is served with
        is_stale=True.

        Raises:
            MissingIdentifierError: If card_id is missing
            UpstreamError: If the fetch fails and nothing is cached
        """
        if not card_id:
            raise MissingIdentifierError("card_id")

        key = str(card_id)
        entry = await self._cache.get(CARD_PRICING_COLLECTION, key)
        now = self._clock()
        if entry is not None and not is_stale(entry.written_at, self.pricing_ttl, now):
            return PricingResult(
                card_id=key,
                pricing=entry.payload,
                from_cache=True,
                cache_age=cache_age_seconds(entry.written_at, now),
            )

        try:
            pricing = await self._single_flight(
                f"{CARD_PRICING_COLLECTION}:{key}", lambda: self._fetch_pricing(key)
            )
        except UpstreamError as e:
            if entry is None:
                raise
            logger.warning(
                "Pricing fetch for card %s (set %s) failed, serving stale cache: %s",
                key,
                set_id,
                e.message,
            )
            return PricingResult(
                card_id=key,
                pricing=entry.payload,
                from_cache=True,
                cache_age=cache_age_seconds(entry.written_at, self._clock()),
                is_stale=True,
            )

        return PricingResult(card_id=key, pricing=pricing, from_cache=False, cache_age=0)

    async def _fetch_pricing(self, card_id: str) -> dict[str, Any]:
        pricing = await self._client.get_card_pricing(card_id)
        await self._cache.put(CARD_PRICING_COLLECTION, card_id, pricing)
        return pricing

    # --- current sets ---

    async def update_current_sets(self, sets: list[PokemonSet]) -> CurrentSetsConfig:
        """
        Swap in a current-sets snapshot derived from sets and persist it.

        Keeps the existing snapshot when no set qualifies.
        """
        updated = self.current_sets.updated_from_sets(sets, today=self._clock().date())
        if updated is self.current_sets:
            return updated

        self.current_sets = updated
        await self._cache.put(CONFIG_COLLECTION, CURRENT_SETS_KEY, updated.to_dict())
        logger.info("Current sets updated: %s", ", ".join(sorted(updated.current_set_codes)))
        return updated

    async def preload_current_sets(self, force_refresh: bool = False) -> dict[int, int]:
        """
        Warm the card cache for every current set.

        Args:
            force_refresh: Refetch cards even if cached

        Returns:
            Set id -> number of cards now available
        """
        sets = await self.get_set_list()
        loaded: dict[int, int] = {}
        for s in sets:
            if s.id is None or is_synthesized_id(s.id):
                continue
            if not self.current_sets.is_current(s.code):
                continue
            cards = await self.get_cards_for_set(s.id, s.code, force_refresh=force_refresh)
            loaded[s.id] = len(cards)

        logger.info("Preloaded cards for %d current sets", len(loaded))
        return loaded


async def create_data_service(
    cache: CacheStore,
    client: PokeDataClient | None = None,
) -> DataService:
    """Build a DataService wired to persisted config and the mapping file."""
    return DataService(
        client=client or PokeDataClient(),
        cache=cache,
        current_sets=await load_current_sets(cache),
        mapping=SetMappingTable.load(),
    )
