"""
Directory filters applied before aggregation.

Dropdown options cascade: the values offered for one field are computed
from people matching every *other* active criterion, so a selection can
never lead to an empty option list for the remaining fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

from teammap_geo.models import PersonRecord

FILTER_FIELDS = ("name", "job_title", "department", "division")


# Plain dicts may use the directory's camelCase keys; the first non-blank wins.
_DICT_KEYS = {
    "first_name": ("first_name", "displayFirstName", "firstName"),
    "last_name": ("last_name", "lastName"),
    "job_title": ("job_title", "jobTitle"),
}


def _field(person: Any, name: str) -> str:
    if isinstance(person, Mapping):
        for key in _DICT_KEYS.get(name, (name,)):
            value = person.get(key)
            if isinstance(value, str):
                value = value.replace("\0", "").strip()
                if value:
                    return value
        return ""
    value = getattr(person, name, None)
    return value if isinstance(value, str) else ""


def _full_name(person: Any) -> str:
    if isinstance(person, PersonRecord):
        return person.full_name
    return f"{_field(person, 'first_name')} {_field(person, 'last_name')}"


@dataclass(frozen=True)
class PersonFilter:
    name: str = ""
    job_title: str = ""
    department: str = ""
    division: str = ""

    @property
    def active(self) -> bool:
        return any(getattr(self, f) for f in FILTER_FIELDS)

    def matches(self, person: Any, exclude: Optional[str] = None) -> bool:
        if exclude != "name" and self.name:
            if self.name.lower() not in _full_name(person).lower():
                return False
        for f in ("job_title", "department", "division"):
            wanted = getattr(self, f)
            if f != exclude and wanted and _field(person, f) != wanted:
                return False
        return True

    def apply(self, people: Iterable[Any], exclude: Optional[str] = None) -> list[Any]:
        return [p for p in people if self.matches(p, exclude)]

    def available_values(self, field: str, people: Iterable[Any]) -> list[str]:
        """Sorted unique values of `field` among people passing the other criteria."""
        if field not in FILTER_FIELDS or field == "name":
            raise ValueError(f"Not a dropdown field: {field!r}")
        return sorted({v for v in (_field(p, field) for p in self.apply(people, exclude=field)) if v})

    def options(self, people: Iterable[Any]) -> dict[str, list[str]]:
        people = list(people)
        return {f: self.available_values(f, people) for f in FILTER_FIELDS if f != "name"}

    def prune(self, people: Iterable[Any]) -> "PersonFilter":
        """Drop dropdown selections that are no longer offered."""
        options = self.options(people)
        changes = {
            f: "" for f, values in options.items()
            if getattr(self, f) and getattr(self, f) not in values
        }
        return replace(self, **changes) if changes else self
