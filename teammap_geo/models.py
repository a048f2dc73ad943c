"""
Pydantic models used across the package for validation and serialization.
These are pure data objects.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


# ── Geocoding ──────────────────────────────────────────────────────────

class GeocodeResult(BaseModel):
    """A resolved location. Frozen because cached instances are shared."""
    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="The parsed token that matched")
    lat: float
    lng: float
    name: str = Field(..., description="Fully qualified, e.g. 'California, United States'")
    display_name: str = Field(..., description="Short form, e.g. 'California'")
    tier: str = Field(..., description="Subdivision set code ('US', 'CA', 'AU') or 'country'")
    code: str


# ── Directory records ─────────────────────────────────────────────────

_STRING_FIELDS = (
    "first_name", "last_name", "display_name", "job_title",
    "department", "division", "location", "photo_url",
)


def _clean(v) -> str:
    """Non-strings become empty; NUL bytes are dropped; whitespace trimmed."""
    if not isinstance(v, str):
        return ""
    return v.replace("\0", "").strip()


class PersonRecord(BaseModel):
    """A directory entry. Only `location` matters for mapping; the rest is carried along."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Any
    first_name: str = Field("", validation_alias=AliasChoices("first_name", "firstName"))
    last_name: str = Field("", validation_alias=AliasChoices("last_name", "lastName"))
    display_name: str = Field("", validation_alias=AliasChoices("display_name", "displayName"))
    job_title: str = Field("", validation_alias=AliasChoices("job_title", "jobTitle"))
    department: str = ""
    division: str = ""
    location: str = ""
    photo_url: str = Field("", validation_alias=AliasChoices("photo_url", "photoUrl"))

    @model_validator(mode="before")
    @classmethod
    def prefer_display_first_name(cls, data):
        """displayFirstName (a preferred name) wins over firstName unless it cleans to blank."""
        if not isinstance(data, dict):
            return data
        preferred = _clean(data.get("displayFirstName"))
        if preferred:
            data = {**data, "first_name": preferred}
            data.pop("firstName", None)
        return data

    @field_validator("id")
    @classmethod
    def require_id(cls, v):
        if v is None:
            raise ValueError("id is required")
        return v

    @field_validator(*_STRING_FIELDS, mode="before")
    @classmethod
    def sanitize_string(cls, v):
        return _clean(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ── Map output ────────────────────────────────────────────────────────

class LocationGroup(BaseModel):
    """People sharing one rounded coordinate; rendered as a single pin."""
    key: str
    lat: float
    lng: float
    name: str
    members: list[Any] = Field(default_factory=list)
    radius: Optional[float] = None

    @property
    def count(self) -> int:
        return len(self.members)


class MapSummary(BaseModel):
    people: int = 0
    locations: int = 0

    def label(self) -> str:
        return f"{self.people} people · {self.locations} locations"


class LocationMap(BaseModel):
    groups: list[LocationGroup] = Field(default_factory=list)
    summary: MapSummary = Field(default_factory=MapSummary)
    unresolved: list[str] = Field(default_factory=list)


# ── API request/response models ───────────────────────────────────────

class FilterParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    job_title: str = Field("", validation_alias=AliasChoices("job_title", "jobTitle"))
    department: str = ""
    division: str = ""


class ResolveRequest(BaseModel):
    locations: list[str] = Field(default_factory=list)


class ResolveResponse(BaseModel):
    resolved: dict[str, GeocodeResult] = Field(default_factory=dict)
    unresolved: list[str] = Field(default_factory=list)


class MapRequest(BaseModel):
    people: list[dict[str, Any]] = Field(default_factory=list)
    filters: FilterParams = Field(default_factory=FilterParams)


class HealthResponse(BaseModel):
    status: str = "ok"
    gazetteer_loaded: bool = False
    gazetteer_entries: int = 0
    cache_size: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
