from __future__ import annotations

import itertools
import logging

from compliance.distance import AirportDistanceResolver, haversine_km
from reference.registry import Coordinates, ReferenceDataRegistry


def _resolver(**kwargs) -> AirportDistanceResolver:
    return AirportDistanceResolver.from_registry(ReferenceDataRegistry(), **kwargs)


def test_curated_route_exact_and_reverse_match():
    resolver = _resolver()
    assert resolver.resolve("LHR", "JFK") == 5556
    assert resolver.resolve("JFK", "LHR") == 5556
    assert resolver.resolve("lhr", " jfk ") == 5556


def test_curated_table_wins_over_coordinates():
    resolver = AirportDistanceResolver(
        {"AAABBB": 999},
        {"AAA": Coordinates(0.0, 0.0), "BBB": Coordinates(0.0, 1.0)},
        default_km=1500,
    )
    assert resolver.resolve("AAA", "BBB") == 999
    assert resolver.resolve("BBB", "AAA") == 999


def test_haversine_used_when_no_curated_route():
    resolver = AirportDistanceResolver(
        {},
        {"AAA": Coordinates(0.0, 0.0), "BBB": Coordinates(0.0, 1.0)},
        default_km=1500,
    )
    # one degree of longitude on the equator
    assert resolver.resolve("AAA", "BBB") == 111
    assert resolver.resolve("BBB", "AAA") == 111


def test_haversine_from_bundled_coordinates():
    registry = ReferenceDataRegistry()
    resolver = AirportDistanceResolver.from_registry(registry)
    assert "LGWMAN" not in resolver.route_distances and "MANLGW" not in resolver.route_distances
    coords = registry.coordinates()
    expected = round(haversine_km(coords["LGW"], coords["MAN"]))
    km = resolver.resolve("LGW", "MAN")
    assert km == expected
    assert 250 < km < 320


def test_default_distance_when_coordinates_unknown(caplog):
    resolver = _resolver(default_km=1500)
    with caplog.at_level(logging.WARNING, logger="compliance.distance"):
        assert resolver.resolve("XXX", "YYY") == 1500
        assert resolver.resolve("LHR", "QQQ") == 1500
    assert any(r.getMessage() == "distance_default_fallback" for r in caplog.records)


def test_default_distance_is_configurable():
    assert _resolver(default_km=3600).resolve("XXX", "YYY") == 3600


def test_resolve_is_symmetric_for_bundled_airports():
    resolver = _resolver()
    codes = sorted(ReferenceDataRegistry().coordinates())[:30] + ["XXX", "DXB", "HKG"]
    for a, b in itertools.combinations(codes, 2):
        assert resolver.resolve(a, b) == resolver.resolve(b, a), (a, b)


def test_same_airport_is_zero_km():
    assert _resolver().resolve("CDG", "CDG") == 0
