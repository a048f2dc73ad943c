"""
Group resolved people into map pins and size the pins.

Grouping key is the coordinate pair rounded to a fixed number of decimals
("{lat},{lng}"). A group is anchored at the coordinate of its first member;
it is not re-centered as members are added.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from teammap_geo.config import get_settings
from teammap_geo.models import GeocodeResult, LocationGroup, MapSummary

logger = logging.getLogger(__name__)

Lookup = Union[Mapping, Callable[[str], Optional[GeocodeResult]]]


def person_location(person: Any) -> Optional[str]:
    """The person's location string, or None if missing or not a string."""
    if isinstance(person, Mapping):
        value = person.get("location")
    else:
        value = getattr(person, "location", None)
    if not isinstance(value, str) or not value.strip():
        return None
    return value


class ClusterGrouper:
    def __init__(self, precision: Optional[int] = None):
        self.precision = get_settings().cluster.precision if precision is None else precision

    def key_for(self, lat: float, lng: float) -> str:
        return f"{lat:.{self.precision}f},{lng:.{self.precision}f}"

    def group(self, people: Iterable[Any], lookup: Lookup) -> list[LocationGroup]:
        """
        Bucket people by rounded resolved coordinate.
        People without a usable location, or whose location does not
        resolve, are left out. Output keeps first-seen bucket order.
        """
        resolve = lookup.get if isinstance(lookup, Mapping) else lookup
        groups: dict[str, LocationGroup] = {}
        skipped = 0

        for person in people:
            location = person_location(person)
            if location is None:
                skipped += 1
                continue
            coords = resolve(location)
            if coords is None:
                skipped += 1
                continue

            key = self.key_for(coords.lat, coords.lng)
            group = groups.get(key)
            if group is None:
                group = LocationGroup(
                    key=key,
                    lat=coords.lat,
                    lng=coords.lng,
                    name=coords.name or location,
                )
                groups[key] = group
            group.members.append(person)

        logger.debug("Grouped into %d locations (%d people unplaced)", len(groups), skipped)
        return list(groups.values())


class PinScaler:
    """Log-scaled pin radius relative to the largest group in view."""

    def __init__(self, min_radius: Optional[float] = None, max_radius: Optional[float] = None):
        pins = get_settings().pins
        self.min_radius = pins.min_radius if min_radius is None else min_radius
        self.max_radius = pins.max_radius if max_radius is None else max_radius
        if self.max_radius < self.min_radius:
            raise ValueError(
                f"max_radius ({self.max_radius}) must be >= min_radius ({self.min_radius})"
            )

    def radius(self, count: int, max_count: int) -> float:
        if max_count <= 0:
            return self.min_radius
        count = max(0, min(count, max_count))
        normalized = math.log(count + 1) / math.log(max_count + 1)
        return self.min_radius + normalized * (self.max_radius - self.min_radius)

    def radii(self, groups: Sequence[LocationGroup]) -> list[float]:
        """One radius per group; the scale is recomputed from these groups."""
        max_count = max((g.count for g in groups), default=0)
        return [self.radius(g.count, max_count) for g in groups]

    def apply(self, groups: Sequence[LocationGroup]) -> list[LocationGroup]:
        """Set `radius` on each group in place and return them."""
        for group, r in zip(groups, self.radii(groups)):
            group.radius = round(r, 3)
        return list(groups)


def summarize(groups: Iterable[LocationGroup]) -> MapSummary:
    groups = list(groups)
    return MapSummary(people=sum(g.count for g in groups), locations=len(groups))
