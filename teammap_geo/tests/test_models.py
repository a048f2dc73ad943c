"""
Tests for Pydantic model validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from teammap_geo.models import (
    FilterParams,
    GeocodeResult,
    LocationGroup,
    LocationMap,
    MapSummary,
    PersonRecord,
)


class TestPersonRecord:
    def test_basic_parsing(self):
        data = {
            "id": 17,
            "firstName": "Ada",
            "lastName": "Lovelace",
            "jobTitle": "Engineer",
            "location": "Remote - United Kingdom",
        }
        person = PersonRecord.model_validate(data)
        assert person.id == 17
        assert person.first_name == "Ada"
        assert person.job_title == "Engineer"
        assert person.location == "Remote - United Kingdom"

    def test_display_first_name_preferred(self):
        person = PersonRecord.model_validate(
            {"id": 1, "firstName": "Augusta", "displayFirstName": "Ada"})
        assert person.first_name == "Ada"

    @pytest.mark.parametrize("preferred", ["   ", 5, None, "\0"])
    def test_blank_display_first_name_falls_back(self, preferred):
        person = PersonRecord.model_validate(
            {"id": 1, "firstName": "Ada", "displayFirstName": preferred})
        assert person.first_name == "Ada"

    def test_display_first_name_is_cleaned(self):
        person = PersonRecord.model_validate(
            {"id": 1, "firstName": "Augusta", "displayFirstName": "  Ada\0 "})
        assert person.first_name == "Ada"

    def test_snake_case_names_accepted(self):
        person = PersonRecord(id=1, first_name="Ada", photo_url="https://x/ada.png")
        assert person.photo_url == "https://x/ada.png"

    def test_sanitizes_strings(self):
        person = PersonRecord.model_validate(
            {"id": 1, "location": "  Ontario\0 ", "department": 42, "division": None})
        assert person.location == "Ontario"
        assert person.department == ""
        assert person.division == ""

    def test_missing_fields_default_to_empty(self):
        person = PersonRecord(id="abc")
        assert person.location == ""
        assert person.full_name == ""

    def test_extra_fields_allowed(self):
        person = PersonRecord.model_validate({"id": 1, "pronouns": "they/them"})
        assert person.model_extra == {"pronouns": "they/them"}

    @pytest.mark.parametrize("data", [{}, {"id": None}])
    def test_id_required(self, data):
        with pytest.raises(ValidationError):
            PersonRecord.model_validate(data)


class TestGeocodeResult:
    def test_frozen(self):
        result = GeocodeResult(token="UK", lat=55.38, lng=-3.44, name="United Kingdom",
                               display_name="United Kingdom", tier="country", code="GB")
        with pytest.raises(ValidationError):
            result.lat = 0.0

    def test_equality_by_value(self):
        kwargs = dict(token="CA", lat=36.12, lng=-119.68, name="California, United States",
                      display_name="California", tier="US", code="CA")
        assert GeocodeResult(**kwargs) == GeocodeResult(**kwargs)


class TestLocationMap:
    def test_empty(self):
        result = LocationMap()
        assert result.groups == []
        assert result.summary == MapSummary()
        assert result.unresolved == []

    def test_dump_includes_members(self):
        group = LocationGroup(key="1.00,2.00", lat=1.0, lng=2.0, name="Somewhere",
                              members=[PersonRecord(id=1, location="Somewhere")])
        dumped = LocationMap(groups=[group]).model_dump(mode="json")
        member = dumped["groups"][0]["members"][0]
        assert member["id"] == 1
        assert member["location"] == "Somewhere"


class TestFilterParams:
    def test_camel_case_alias(self):
        params = FilterParams.model_validate({"jobTitle": "Engineer"})
        assert params.job_title == "Engineer"
