from __future__ import annotations

from datetime import date

from compliance.validation import DisruptionValidator, parse_flight_date, years_before
from models.schemas import Airline, Airport, DisruptionReport, FlightRoute

NOW = date(2026, 10, 19)


def _route(**overrides) -> FlightRoute:
    data = dict(
        departure=Airport(iata="LHR", country="GB"),
        arrival=Airport(iata="JFK", country="US"),
        airline=Airline(iata="BA", country="GB"),
        flight_number="BA117",
        flight_date="2026-09-01",
    )
    data.update(overrides)
    return FlightRoute(**data)


def _delay(hours=4, **overrides) -> DisruptionReport:
    data = dict(type="delay", reason="technical_issue", delay_hours=hours)
    data.update(overrides)
    return DisruptionReport(**data)


def _fields(route=None, disruption=None):
    result = DisruptionValidator().validate(route or _route(), disruption or _delay(), now=NOW)
    return [field for field, _ in result.as_pairs()]


def test_valid_claim_has_no_issues():
    result = DisruptionValidator().validate(_route(), _delay(), now=NOW)
    assert result.ok
    assert result.issues == []


def test_code_formats():
    assert "departure.iata" in _fields(_route(departure=Airport(iata="lh", country="GB")))
    assert "airline.iata" in _fields(_route(airline=Airline(iata="B", country="GB")))
    assert "flight_number" in _fields(_route(flight_number="B1"))
    assert "flight_number" in _fields(_route(flight_number="BA 117"))
    assert _fields(_route(airline=Airline(iata="U2", country="GB"), flight_number="U21234")) == []


def test_same_airport_rejected():
    assert "arrival.iata" in _fields(_route(arrival=Airport(iata="LHR", country="GB")))


def test_missing_countries_reported():
    fields = _fields(_route(departure=Airport(iata="LHR"), airline=Airline(iata="BA")))
    assert "departure.country" in fields
    assert "airline.country" in fields


def test_flight_date_format_and_calendar():
    assert "flight_date" in _fields(_route(flight_date="20240101"))
    assert "flight_date" in _fields(_route(flight_date="2024-02-30"))
    assert "flight_date" in _fields(_route(flight_date="01/02/2024"))
    assert parse_flight_date("2024-02-29") == date(2024, 2, 29)


def test_future_flight_date_rejected():
    assert _fields(_route(flight_date="2026-10-19")) == []
    assert _fields(_route(flight_date="2026-10-20")) == ["flight_date"]


def test_claim_window_boundary():
    assert _fields(_route(flight_date="2020-10-19")) == []
    assert _fields(_route(flight_date="2020-10-20")) == []
    assert _fields(_route(flight_date="2020-10-18")) == ["flight_date"]


def test_claim_window_configurable():
    validator = DisruptionValidator(claim_window_years=3)
    result = validator.validate(_route(flight_date="2022-10-18"), _delay(), now=NOW)
    assert [issue.message for issue in result.issues] == ["Flight date must be within the last 3 years"]


def test_years_before_leap_day():
    assert years_before(date(2024, 2, 29), 6) == date(2018, 2, 28)
    assert years_before(date(2024, 2, 29), 4) == date(2020, 2, 29)
    assert years_before(NOW, 6) == date(2020, 10, 19)


def test_delay_hours_rules():
    assert "disruption.delay_hours" in _fields(disruption=_delay(None))
    assert "disruption.delay_hours" in _fields(disruption=_delay(0))
    assert "disruption.delay_hours" in _fields(disruption=_delay(-2))
    assert "disruption.delay_hours" in _fields(disruption=_delay(2.5))
    assert "disruption.delay_hours" in _fields(disruption=_delay(73))
    assert _fields(disruption=_delay(72)) == []
    assert _fields(disruption=_delay(1)) == []


def test_unknown_type_and_reason():
    fields = _fields(disruption=DisruptionReport(type="diversion", reason="alien_invasion"))
    assert fields == ["disruption.type", "disruption.reason"]


def test_cancellation_requires_notice():
    cancelled = DisruptionReport(type="cancellation", reason="technical_issue")
    assert _fields(disruption=cancelled) == ["disruption.cancellation_notice_days"]
    negative = DisruptionReport(type="cancellation", reason="technical_issue", cancellation_notice_days=-1)
    assert _fields(disruption=negative) == ["disruption.cancellation_notice_days"]
    negative_rerouting = DisruptionReport(
        type="cancellation", reason="technical_issue", cancellation_notice_days=3, rerouting_hours=-1
    )
    assert _fields(disruption=negative_rerouting) == ["disruption.rerouting_hours"]


def test_all_issues_reported_together():
    route = _route(
        departure=Airport(iata="L1", country=""),
        airline=Airline(iata="", country="GB"),
        flight_number="?",
        flight_date="yesterday",
    )
    fields = _fields(route, _delay(100))
    assert fields == [
        "departure.iata",
        "departure.country",
        "airline.iata",
        "flight_number",
        "flight_date",
        "disruption.delay_hours",
    ]


def test_unrecognised_country_reported():
    route = _route(
        departure=Airport(iata="FRA", country="Atlantis"),
        airline=Airline(iata="LH", country="Middle Earth"),
        flight_number="LH400",
    )
    result = DisruptionValidator().validate(route, _delay(5), now=NOW)
    assert result.as_pairs() == [
        ("departure.country", "Unrecognised country: Atlantis"),
        ("airline.country", "Unrecognised country: Middle Earth"),
    ]


def test_native_country_names_accepted():
    route = _route(
        departure=Airport(iata="FRA", country="Deutschland"),
        arrival=Airport(iata="MAD", country="España"),
        airline=Airline(iata="LH", country="Deutschland"),
        flight_number="LH1120",
    )
    assert _fields(route) == []
