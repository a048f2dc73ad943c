"""
Tests for the aggregation pipeline (filter -> resolve -> group -> scale).
"""

from __future__ import annotations

import pytest

from teammap_geo.cluster import ClusterGrouper, PinScaler
from teammap_geo.filters import PersonFilter
from teammap_geo.geocode import BatchResolver, LocationResolver
from teammap_geo.pipeline import build_location_map, parse_people

ROWS = [
    {"id": 1, "firstName": "Ada", "jobTitle": "Engineer", "location": "California - Work From Home"},
    {"id": 2, "firstName": "Grace", "jobTitle": "Admiral", "location": "CA"},
    {"id": 3, "firstName": "Alan", "jobTitle": "Engineer", "location": "Remote - Argentina"},
    {"id": 4, "firstName": "Linus", "jobTitle": "Engineer", "location": "Ontario"},
    {"id": 5, "firstName": "Nobody", "jobTitle": "Engineer", "location": "Atlantis"},
    {"id": 6, "firstName": "Empty", "jobTitle": "Engineer", "location": ""},
]


@pytest.fixture
def people():
    return parse_people(ROWS)


def _build(people, batch, **kwargs):
    return build_location_map(
        people, batch,
        grouper=ClusterGrouper(precision=2),
        scaler=PinScaler(min_radius=6, max_radius=20),
        **kwargs,
    )


class TestParsePeople:
    def test_drops_malformed_rows(self):
        rows = [{"id": 1, "location": "UK"}, {"location": "UK"}, "junk", None, {"id": None}]
        assert [p.id for p in parse_people(rows)] == [1]

    def test_keeps_existing_records(self, people):
        assert parse_people(people) == people


class TestBuildLocationMap:
    def test_groups_and_summary(self, people, batch):
        result = _build(people, batch)

        assert [g.name for g in result.groups] == [
            "California, United States", "Argentina", "Ontario, Canada",
        ]
        assert [g.count for g in result.groups] == [2, 1, 1]
        assert result.summary.people == 4
        assert result.summary.locations == 3
        assert result.unresolved == ["Atlantis"]

    def test_radii_relative_to_largest_group(self, people, batch):
        result = _build(people, batch)
        radii = [g.radius for g in result.groups]
        assert radii[0] == pytest.approx(20)
        assert radii[1] == radii[2]
        assert 6 < radii[1] < 20

    def test_filter_rebuilds_and_rescales(self, people, batch):
        result = _build(people, batch, person_filter=PersonFilter(job_title="Engineer"))
        assert [g.count for g in result.groups] == [1, 1, 1]
        assert all(g.radius == pytest.approx(20) for g in result.groups)
        assert result.summary.people == 3

    def test_cache_survives_reaggregation(self, people, gazetteer):
        batch = BatchResolver(LocationResolver(gazetteer))
        _build(people, batch)
        misses = batch.cache.misses
        _build(people, batch, person_filter=PersonFilter(name="a"))
        assert batch.cache.misses == misses

    def test_no_gazetteer_produces_empty_map(self, people):
        result = _build(people, BatchResolver(LocationResolver(None)))
        assert result.groups == []
        assert result.summary.people == 0
        assert len(result.unresolved) == 5

    def test_plain_dicts_are_accepted(self, batch):
        result = _build([{"id": 1, "location": "UK"}, {"id": 2}], batch)
        assert result.summary.people == 1

    def test_plain_camel_case_dicts_are_filtered(self, batch):
        rows = [
            {"id": 1, "jobTitle": "Engineer", "location": "UK"},
            {"id": 2, "jobTitle": "Admiral", "location": "Ontario"},
        ]
        result = _build(rows, batch, person_filter=PersonFilter(job_title="Engineer"))
        assert result.summary.people == 1
        assert result.groups[0].members == [rows[0]]
