"""
Static gazetteer of countries and first-level subdivisions.

The bundled document (data/gazetteer.json) has two sections:
  - countries: [{name, code, lat, lng, aliases?}, ...]
  - states:    {"US": [...], "CA": [...], "AU": [...]}

Design:
  - Loaded once per process; entries are immutable.
  - Loading is fail-open: a missing or corrupt file is logged and yields
    None, and the resolver then returns None for everything.
  - Each tier keeps its entries in source order together with their
    pre-normalized names so matching is a plain linear scan.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Mapping, Optional

from teammap_geo.config import get_settings
from teammap_geo.normalize import normalize_location_name

logger = logging.getLogger(__name__)

COUNTRY_TIER = "country"


@dataclass(frozen=True)
class GazetteerEntry:
    name: str
    code: str
    lat: float
    lng: float
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class Tier:
    """One matching pass: a subdivision set or the country list."""
    key: str                      # "US", "CA", "AU" or "country"
    parent: Optional[str]         # jurisdiction appended to qualified names
    entries: tuple[GazetteerEntry, ...]
    _names: tuple[frozenset[str], ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def build(cls, key: str, parent: Optional[str], entries: Iterable[GazetteerEntry]) -> "Tier":
        entries = tuple(entries)
        names = tuple(
            frozenset(
                n for n in (normalize_location_name(s) for s in (e.name, *e.aliases)) if n
            )
            for e in entries
        )
        return cls(key, parent, entries, names)

    def match(self, normalized: str) -> Optional[GazetteerEntry]:
        """First entry whose name, alias or code equals the normalized token."""
        if not normalized:
            return None
        for entry, names in zip(self.entries, self._names):
            if normalized in names or entry.code.lower() == normalized:
                return entry
        return None

    def qualified_name(self, entry: GazetteerEntry) -> str:
        return f"{entry.name}, {self.parent}" if self.parent else entry.name


def _entry_from_row(row: Mapping) -> GazetteerEntry:
    return GazetteerEntry(
        name=str(row["name"]),
        code=str(row["code"]),
        lat=float(row["lat"]),
        lng=float(row["lng"]),
        aliases=tuple(str(a) for a in row.get("aliases", ())),
    )


class Gazetteer:
    """Countries plus subdivision sets, exposed as ordered matching tiers."""

    def __init__(
        self,
        countries: Iterable[GazetteerEntry],
        subdivisions: Mapping[str, Iterable[GazetteerEntry]],
        subdivision_tiers: Optional[Iterable[tuple[str, str]]] = None,
    ):
        self.countries: tuple[GazetteerEntry, ...] = tuple(countries)
        self.subdivisions: dict[str, tuple[GazetteerEntry, ...]] = {
            code: tuple(entries) for code, entries in subdivisions.items()
        }
        if subdivision_tiers is None:
            subdivision_tiers = get_settings().gazetteer.subdivision_tiers

        tiers = [
            Tier.build(code, parent, self.subdivisions.get(code, ()))
            for code, parent in subdivision_tiers
        ]
        tiers.append(Tier.build(COUNTRY_TIER, None, self.countries))
        self.tiers: tuple[Tier, ...] = tuple(tiers)

    @classmethod
    def from_document(
        cls,
        doc: Mapping,
        subdivision_tiers: Optional[Iterable[tuple[str, str]]] = None,
    ) -> "Gazetteer":
        countries = [_entry_from_row(row) for row in doc.get("countries", [])]
        states = {
            code: [_entry_from_row(row) for row in rows]
            for code, rows in (doc.get("states") or {}).items()
        }
        return cls(countries, states, subdivision_tiers)

    def __len__(self) -> int:
        return len(self.countries) + sum(len(v) for v in self.subdivisions.values())


def load_gazetteer(path: Optional[str | Path] = None) -> Optional[Gazetteer]:
    """Read the gazetteer document. Returns None (never raises) on failure."""
    path = Path(path or get_settings().gazetteer.path)
    try:
        with path.open("r", encoding="utf-8") as f:
            doc = json.load(f)
        gazetteer = Gazetteer.from_document(doc)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Gazetteer unavailable (%s): %s; all locations will be unresolved", path, e)
        return None

    logger.info("Loaded gazetteer from %s: %d countries, %d subdivision sets",
                path, len(gazetteer.countries), len(gazetteer.subdivisions))
    return gazetteer


@lru_cache(maxsize=1)
def get_gazetteer() -> Optional[Gazetteer]:
    """Process-wide default gazetteer, loaded on first use."""
    return load_gazetteer()
