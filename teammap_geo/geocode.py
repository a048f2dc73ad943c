"""
Offline geocoding of directory location strings, with caching.

Strategy:
  1. Parse and normalize the location string into tokens (cache key)
  2. Check the in-memory cache; a cached None is a valid answer
  3. On a miss, try each token against the tiers
     US states -> Canadian provinces -> Australian states -> countries
  4. Store the result, including negative results

Tier order is fixed and first match wins: "California, United States"
resolves to the state, and "CA" resolves to California rather than Canada.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from teammap_geo.gazetteer import Gazetteer, get_gazetteer
from teammap_geo.models import GeocodeResult
from teammap_geo.normalize import LocationParser, normalize_location_name

logger = logging.getLogger(__name__)

_MISSING = object()


# ── Resolver ───────────────────────────────────────────────────────────

class LocationResolver:
    """Tiered gazetteer matcher. Pure: no state beyond the gazetteer it was given."""

    def __init__(self, gazetteer: Optional[Gazetteer], parser: Optional[LocationParser] = None):
        self.gazetteer = gazetteer
        self.parser = parser or LocationParser()

    @classmethod
    def default(cls) -> "LocationResolver":
        return cls(get_gazetteer())

    @property
    def available(self) -> bool:
        return self.gazetteer is not None

    def resolve(self, token: str) -> Optional[GeocodeResult]:
        """Match a single token against every tier in order."""
        if self.gazetteer is None:
            return None
        normalized = normalize_location_name(token)
        if not normalized:
            return None

        for tier in self.gazetteer.tiers:
            entry = tier.match(normalized)
            if entry is not None:
                return GeocodeResult(
                    token=token,
                    lat=entry.lat,
                    lng=entry.lng,
                    name=tier.qualified_name(entry),
                    display_name=entry.name,
                    tier=tier.key,
                    code=entry.code,
                )
        return None

    def resolve_location(self, raw: str) -> Optional[GeocodeResult]:
        """Parse a raw string and return the first token that resolves."""
        if self.gazetteer is None:
            return None
        parsed = self.parser.parse(raw)
        if parsed is None:
            return None

        for token in parsed.tokens:
            result = self.resolve(token)
            if result is not None:
                logger.debug("Resolved '%s' via token '%s' -> %s [%s]",
                             raw, token, result.name, result.tier)
                return result

        logger.debug("No gazetteer match for '%s' (tokens=%s)", raw, parsed.tokens)
        return None


# ── Cache ──────────────────────────────────────────────────────────────

class GeocodeCache:
    """Normalized key -> GeocodeResult or None. Grows until clear()."""

    def __init__(self):
        self._entries: dict[str, Optional[GeocodeResult]] = {}
        self.hits = 0
        self.misses = 0

    def lookup(self, key: str):
        """Return the cached value, or _MISSING if the key was never resolved."""
        value = self._entries.get(key, _MISSING)
        if value is _MISSING:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def store(self, key: str, value: Optional[GeocodeResult]) -> None:
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        return {"size": len(self._entries), "hits": self.hits, "misses": self.misses}


# ── Batch resolution ──────────────────────────────────────────────────

class BatchResolver:
    """
    Cache-backed front end to a LocationResolver.
    Each instance owns its cache, so independent contexts never share state.
    """

    def __init__(self, resolver: LocationResolver, cache: Optional[GeocodeCache] = None):
        self.resolver = resolver
        self.cache = cache if cache is not None else GeocodeCache()

    def cache_key(self, raw: object) -> str:
        """
        Normalized tokens joined by commas, or "" when nothing could match.
        Token boundaries are kept, so "California, United States" and
        "California United States" are cached separately.
        """
        parsed = self.resolver.parser.parse(raw)
        if parsed is None:
            return ""
        tokens = (normalize_location_name(t) for t in parsed.tokens)
        return ",".join(t for t in tokens if t)

    def resolve_one(self, raw: object) -> Optional[GeocodeResult]:
        """Memoized resolve_location keyed by the normalized tokens."""
        if not isinstance(raw, str):
            return None
        key = self.cache_key(raw)
        if not key:
            return None

        cached = self.cache.lookup(key)
        if cached is not _MISSING:
            return cached

        result = self.resolver.resolve_location(raw)
        self.cache.store(key, result)
        return result

    def resolve_batch(self, locations: Iterable[object]) -> dict[str, GeocodeResult]:
        """
        Resolve each unique location once, sequentially.
        Only successes are present in the returned mapping.
        """
        unique = list(dict.fromkeys(
            loc for loc in locations if isinstance(loc, str) and loc
        ))
        hits_before = self.cache.hits

        results: dict[str, GeocodeResult] = {}
        for location in unique:
            result = self.resolve_one(location)
            if result is not None:
                results[location] = result

        logger.info("Resolved %d/%d unique locations (%d cache hits)",
                    len(results), len(unique), self.cache.hits - hits_before)
        return results

    def clear_cache(self) -> None:
        logger.debug("Clearing geocode cache (%d entries)", len(self.cache))
        self.cache.clear()
