"""
Aggregation orchestrator.
Ties together filter -> resolve -> group -> scale -> summarize in one call.
Called on every re-aggregation (e.g. after a filter change); the output is
rebuilt from scratch each time, only the geocode cache persists.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from teammap_geo.cluster import ClusterGrouper, PinScaler, person_location, summarize
from teammap_geo.filters import PersonFilter
from teammap_geo.geocode import BatchResolver
from teammap_geo.models import LocationMap, PersonRecord

logger = logging.getLogger(__name__)


def parse_people(rows: Sequence[Any]) -> list[PersonRecord]:
    """Validate raw directory rows, dropping those that are not usable records."""
    people: list[PersonRecord] = []
    dropped = 0
    for row in rows:
        if isinstance(row, PersonRecord):
            people.append(row)
            continue
        if not isinstance(row, dict) or row.get("id") is None:
            dropped += 1
            continue
        try:
            people.append(PersonRecord.model_validate(row))
        except ValidationError as e:
            logger.debug("Skipping directory row %r: %s", row.get("id"), e)
            dropped += 1
    if dropped:
        logger.info("Dropped %d malformed directory rows", dropped)
    return people


def build_location_map(
    people: Sequence[Any],
    resolver: BatchResolver,
    *,
    person_filter: Optional[PersonFilter] = None,
    grouper: Optional[ClusterGrouper] = None,
    scaler: Optional[PinScaler] = None,
) -> LocationMap:
    """
    Execute one aggregation:
      1. Filter: apply directory filters (if any)
      2. Resolve: geocode each unique location once via the cache
      3. Group: bucket people by rounded coordinate
      4. Scale: size pins relative to the largest group in view

    Never raises for bad input; unplaced people are reported in `unresolved`.
    """
    grouper = grouper or ClusterGrouper()
    scaler = scaler or PinScaler()
    start_time = time.monotonic()

    if person_filter is not None and person_filter.active:
        selected = person_filter.apply(people)
        logger.debug("Filter %s kept %d/%d people", person_filter, len(selected), len(people))
    else:
        selected = list(people)

    locations = [loc for loc in (person_location(p) for p in selected) if loc is not None]
    resolved = resolver.resolve_batch(locations)

    groups = scaler.apply(grouper.group(selected, resolved))
    summary = summarize(groups)
    unresolved = sorted({loc for loc in locations if loc not in resolved})

    elapsed = time.monotonic() - start_time
    logger.info("Built map in %.3fs: %s (%d unresolved location strings)",
                elapsed, summary.label(), len(unresolved))
    return LocationMap(groups=groups, summary=summary, unresolved=unresolved)
