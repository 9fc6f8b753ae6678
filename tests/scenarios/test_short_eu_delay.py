from __future__ import annotations

from datetime import date

from compliance.eligibility_engine import EligibilityEngine
from models.schemas import Airline, Airport, DisruptionReport, FlightRoute, ReasonCode, Regulation


def test_paris_to_frankfurt_two_hour_delay_is_not_compensable():
    route = FlightRoute(
        departure=Airport(iata="CDG", country="FR"),
        arrival=Airport(iata="FRA", country="DE"),
        airline=Airline(iata="LH", country="DE"),
        flight_number="LH1029",
        flight_date="2026-10-01",
    )
    disruption = DisruptionReport(type="delay", reason="technical_issue", delay_hours=2)

    result = EligibilityEngine().evaluate(route, disruption, now=date(2026, 10, 19))

    assert not result.eligible
    assert result.reason_code is ReasonCode.INSUFFICIENT_DELAY
    assert result.regulation is Regulation.EU261
    assert result.distance_km == 450
    assert result.amount == 0
    assert result.requires_manual_review
    assert "less than the required 3 hours" in result.message
