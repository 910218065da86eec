"""App icon lookup through the public iTunes search API.

App Store Connect does not expose icons, so rows are decorated with the
artwork URL the public store lists for the same bundle id. Lookups are
best effort: any failure simply means no icon.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from collections.abc import Iterable
from typing import Any

import aiohttp
import orjson

from release_desk.constants import (
    ARTWORK_KEYS,
    ICON_CACHE_BYTE_LIMIT,
    ICON_CACHE_COUNT_LIMIT,
    ICON_LOOKUP_CONCURRENCY,
    ITUNES_LOOKUP_URL,
)
from release_desk.core.gate import BoundedConcurrencyGate
from release_desk.logger import get_logger

logger = get_logger(__name__)


class IconCache:
    """LRU map of bundle id to icon URL bounded by count and total bytes.

    The byte cost of an entry is the UTF-8 size of its key plus value.
    """

    def __init__(
        self,
        count_limit: int = ICON_CACHE_COUNT_LIMIT,
        byte_limit: int = ICON_CACHE_BYTE_LIMIT,
    ) -> None:
        self.count_limit = count_limit
        self.byte_limit = byte_limit
        self._entries: OrderedDict[str, str] = OrderedDict()
        self._bytes = 0

    @staticmethod
    def _cost(key: str, value: str) -> int:
        return len(key.encode()) + len(value.encode())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def total_bytes(self) -> int:
        """Current byte cost of all entries."""
        return self._bytes

    def get(self, key: str) -> str | None:
        """Return the cached URL and mark it most recently used."""
        value = self._entries.get(key)
        if value is not None:
            self._entries.move_to_end(key)
        return value

    def put(self, key: str, value: str) -> None:
        """Store a URL, evicting least recently used entries as needed."""
        cost = self._cost(key, value)
        if cost > self.byte_limit:
            logger.debug("Icon URL for %s too large to cache", key)
            return
        old = self._entries.pop(key, None)
        if old is not None:
            self._bytes -= self._cost(key, old)
        self._entries[key] = value
        self._bytes += cost

        while (
            len(self._entries) > self.count_limit
            or self._bytes > self.byte_limit
        ):
            evicted_key, evicted = self._entries.popitem(last=False)
            self._bytes -= self._cost(evicted_key, evicted)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
        self._bytes = 0


def pick_artwork_url(result: dict[str, Any]) -> str | None:
    """Return the largest artwork URL of one lookup result."""
    for key in ARTWORK_KEYS:
        value = result.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class IconResolver:
    """Resolves bundle ids to icon URLs with caching."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        cache: IconCache | None = None,
        gate: BoundedConcurrencyGate | None = None,
        lookup_url: str = ITUNES_LOOKUP_URL,
    ) -> None:
        """Initialize the resolver.

        Args:
            session: Shared aiohttp session
            cache: Icon cache (a fresh one by default)
            gate: Limits concurrent lookups in ``fetch_icons``
            lookup_url: iTunes lookup endpoint

        """
        self.session = session
        self.cache = cache if cache is not None else IconCache()
        self.gate = gate or BoundedConcurrencyGate(ICON_LOOKUP_CONCURRENCY)
        self.lookup_url = lookup_url

    async def _lookup(self, bundle_id: str) -> str | None:
        async with self.session.get(
            self.lookup_url, params={"bundleId": bundle_id}
        ) as response:
            if response.status != 200:
                logger.debug(
                    "Icon lookup for %s returned HTTP %d",
                    bundle_id,
                    response.status,
                )
                return None
            # iTunes serves JSON as text/javascript; decode the raw body.
            raw = await response.read()

        document = orjson.loads(raw)
        results = None
        if isinstance(document, dict):
            results = document.get("results")
        if (
            not isinstance(results, list)
            or not results
            or not isinstance(results[0], dict)
        ):
            logger.debug("No store listing for %s", bundle_id)
            return None
        return pick_artwork_url(results[0])

    async def fetch_icon(self, bundle_id: str) -> str | None:
        """Return the icon URL for ``bundle_id`` or None. Never raises."""
        if not bundle_id:
            return None
        cached = self.cache.get(bundle_id)
        if cached is not None:
            return cached

        try:
            url = await self._lookup(bundle_id)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("Icon lookup for %s failed: %s", bundle_id, e)
            return None
        except Exception as e:  # noqa: BLE001
            logger.debug("Bad icon lookup response for %s: %s", bundle_id, e)
            return None

        if url:
            self.cache.put(bundle_id, url)
        return url

    async def _fetch_gated(self, bundle_id: str) -> str | None:
        async with self.gate:
            return await self.fetch_icon(bundle_id)

    async def fetch_icons(self, bundle_ids: Iterable[str]) -> dict[str, str]:
        """Resolve many bundle ids concurrently.

        Returns:
            Mapping for the ids that resolved; others are absent

        """
        unique = [bid for bid in dict.fromkeys(bundle_ids) if bid]
        urls = await asyncio.gather(*(self._fetch_gated(b) for b in unique))
        icons = {
            bundle_id: url
            for bundle_id, url in zip(unique, urls, strict=True)
            if url
        }
        logger.debug("Resolved %d of %d icons", len(icons), len(unique))
        return icons

    def clear_cache(self) -> None:
        """Forget every cached icon URL."""
        self.cache.clear()
