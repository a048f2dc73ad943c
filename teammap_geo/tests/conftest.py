from __future__ import annotations

import pytest

from teammap_geo.gazetteer import Gazetteer
from teammap_geo.geocode import BatchResolver, LocationResolver

SMALL_GAZETTEER = {
    "countries": [
        {"name": "Argentina", "code": "AR", "lat": -38.42, "lng": -63.62},
        {"name": "Canada", "code": "CA", "lat": 56.13, "lng": -106.35},
        {"name": "Georgia", "code": "GE", "lat": 42.32, "lng": 43.36},
        {"name": "United Kingdom", "code": "GB", "lat": 55.38, "lng": -3.44, "aliases": ["UK"]},
        {"name": "United States", "code": "US", "lat": 37.09, "lng": -95.71},
    ],
    "states": {
        "US": [
            {"name": "California", "code": "CA", "lat": 36.12, "lng": -119.68},
            {"name": "Georgia", "code": "GA", "lat": 33.04, "lng": -83.64},
            {"name": "Washington", "code": "WA", "lat": 47.40, "lng": -121.49},
        ],
        "CA": [
            {"name": "Ontario", "code": "ON", "lat": 51.25, "lng": -85.32},
            {"name": "Québec", "code": "QC", "lat": 52.94, "lng": -73.55},
        ],
        "AU": [
            {"name": "New South Wales", "code": "NSW", "lat": -31.84, "lng": 145.61},
            {"name": "Western Australia", "code": "WA", "lat": -27.67, "lng": 121.63},
        ],
    },
}


@pytest.fixture
def gazetteer() -> Gazetteer:
    return Gazetteer.from_document(SMALL_GAZETTEER)


@pytest.fixture
def resolver(gazetteer) -> LocationResolver:
    return LocationResolver(gazetteer)


@pytest.fixture
def batch(resolver) -> BatchResolver:
    return BatchResolver(resolver)
