from __future__ import annotations

from datetime import date

from compliance.distance import AirportDistanceResolver
from compliance.eligibility_engine import EligibilityEngine
from models.schemas import Airline, Airport, DisruptionReport, FlightRoute, Regulation
from reference.registry import ReferenceDataRegistry


def test_unknown_airports_fall_back_to_default_distance():
    resolver = AirportDistanceResolver.from_registry(ReferenceDataRegistry(), default_km=1500)
    assert resolver.resolve("XXX", "YYY") == 1500

    route = FlightRoute(
        departure=Airport(iata="XXX", country="DE"),
        arrival=Airport(iata="YYY", country="AT"),
        airline=Airline(iata="OS", country="AT"),
        flight_number="OS112",
        flight_date="2026-05-05",
    )
    disruption = DisruptionReport(type="delay", reason="staff_shortage", delay_hours=3)

    result = EligibilityEngine(distance_resolver=resolver).evaluate(route, disruption, now=date(2026, 10, 19))

    assert result.eligible
    assert result.regulation is Regulation.EU261
    assert result.distance_km == 1500
    assert result.amount == 250
