from __future__ import annotations

import math
import re
from datetime import date
from typing import List

from compliance.countries import normalize_country
from models.schemas import (
    DisruptionReason,
    DisruptionReport,
    DisruptionType,
    FlightRoute,
    ValidationIssue,
    ValidationResult,
)
from settings import SETTINGS

AIRPORT_CODE_RE = re.compile(r"^[A-Z]{3}$")
AIRLINE_CODE_RE = re.compile(r"^[A-Z0-9]{2,3}$")
FLIGHT_NUMBER_RE = re.compile(r"^[A-Z0-9]{2,3}\d{1,4}[A-Z]?$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_TYPES = {t.value for t in DisruptionType}
_REASONS = {r.value for r in DisruptionReason}


def years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier; 29 February falls back to the 28th."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def parse_flight_date(value: str) -> date | None:
    if not isinstance(value, str) or not ISO_DATE_RE.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _is_whole_number(value: float) -> bool:
    return math.isfinite(value) and float(value).is_integer()


def _country_issues(field: str, value: str) -> List[ValidationIssue]:
    if not (value or "").strip():
        return [ValidationIssue(field=field, message="Country is required")]
    if normalize_country(value) is None:
        return [ValidationIssue(field=field, message=f"Unrecognised country: {value.strip()}")]
    return []


class DisruptionValidator:
    """Collect every field-level problem with a route + disruption pair."""

    def __init__(self, claim_window_years: int | None = None, max_delay_hours: int | None = None) -> None:
        self.claim_window_years = SETTINGS.claim_window_years if claim_window_years is None else claim_window_years
        self.max_delay_hours = SETTINGS.max_delay_hours if max_delay_hours is None else max_delay_hours

    def validate(self, route: FlightRoute, disruption: DisruptionReport, *, now: date) -> ValidationResult:
        issues: List[ValidationIssue] = []
        issues.extend(self._route_issues(route, now))
        issues.extend(self._disruption_issues(disruption))
        return ValidationResult(issues=issues)

    def _route_issues(self, route: FlightRoute, now: date) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for field, airport in (("departure", route.departure), ("arrival", route.arrival)):
            if not AIRPORT_CODE_RE.match(airport.iata or ""):
                issues.append(ValidationIssue(field=f"{field}.iata", message="Airport code must be three capital letters (e.g. LHR)"))
            issues.extend(_country_issues(f"{field}.country", airport.country))
        if AIRPORT_CODE_RE.match(route.departure.iata or "") and route.departure.iata == route.arrival.iata:
            issues.append(ValidationIssue(field="arrival.iata", message="Arrival airport must differ from departure airport"))

        if not AIRLINE_CODE_RE.match(route.airline.iata or ""):
            issues.append(ValidationIssue(field="airline.iata", message="Airline code must be 2-3 letters or digits (e.g. BA)"))
        issues.extend(_country_issues("airline.country", route.airline.country))

        if not FLIGHT_NUMBER_RE.match(route.flight_number or ""):
            issues.append(ValidationIssue(field="flight_number", message="Invalid flight number format (e.g. BA1234)"))

        flight_date = parse_flight_date(route.flight_date)
        if flight_date is None:
            issues.append(ValidationIssue(field="flight_date", message="Flight date must be a calendar date in YYYY-MM-DD format"))
        elif flight_date > now:
            issues.append(ValidationIssue(field="flight_date", message="Flight date cannot be in the future"))
        elif flight_date < years_before(now, self.claim_window_years):
            issues.append(
                ValidationIssue(
                    field="flight_date",
                    message=f"Flight date must be within the last {self.claim_window_years} years",
                )
            )
        return issues

    def _disruption_issues(self, disruption: DisruptionReport) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        if disruption.type not in _TYPES:
            issues.append(ValidationIssue(field="disruption.type", message=f"Unknown disruption type: {disruption.type}"))
        if disruption.reason not in _REASONS:
            issues.append(ValidationIssue(field="disruption.reason", message=f"Unknown disruption reason: {disruption.reason}"))

        if disruption.type == DisruptionType.DELAY.value:
            hours = disruption.delay_hours
            if hours is None:
                issues.append(ValidationIssue(field="disruption.delay_hours", message="Delay duration is required for a delay"))
            elif not _is_whole_number(hours) or hours <= 0:
                issues.append(ValidationIssue(field="disruption.delay_hours", message="Delay duration must be a positive whole number of hours"))
            elif hours > self.max_delay_hours:
                issues.append(
                    ValidationIssue(
                        field="disruption.delay_hours",
                        message=f"Delay duration cannot exceed {self.max_delay_hours} hours",
                    )
                )

        if disruption.type == DisruptionType.CANCELLATION.value:
            notice = disruption.cancellation_notice_days
            if notice is None:
                issues.append(ValidationIssue(field="disruption.cancellation_notice_days", message="Cancellation notice period is required"))
            elif notice < 0:
                issues.append(ValidationIssue(field="disruption.cancellation_notice_days", message="Cancellation notice cannot be negative"))

        if disruption.rerouting_hours is not None and (not math.isfinite(disruption.rerouting_hours) or disruption.rerouting_hours < 0):
            issues.append(ValidationIssue(field="disruption.rerouting_hours", message="Rerouting time cannot be negative"))
        return issues
