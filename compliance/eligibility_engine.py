from __future__ import annotations

from datetime import date

from compliance.compensation_rules import CompensationCalculator
from compliance.countries import normalize_country
from compliance.distance import AirportDistanceResolver
from compliance.jurisdiction import JurisdictionClassifier
from compliance.validation import DisruptionValidator
from models.schemas import DisruptionReport, EligibilityResult, FlightRoute, ReasonCode
from reference.registry import ReferenceDataRegistry


class EligibilityEngine:
    """validate -> resolve distance -> classify jurisdiction -> calculate.

    ``evaluate`` performs no I/O and keeps no state between calls; the only
    time input is the explicit ``now`` used for the claim-window checks.
    """

    def __init__(
        self,
        distance_resolver: AirportDistanceResolver | None = None,
        classifier: JurisdictionClassifier | None = None,
        validator: DisruptionValidator | None = None,
        calculator: CompensationCalculator | None = None,
    ) -> None:
        self.distance_resolver = distance_resolver or AirportDistanceResolver.from_registry(ReferenceDataRegistry())
        self.classifier = classifier or JurisdictionClassifier()
        self.validator = validator or DisruptionValidator()
        self.calculator = calculator or CompensationCalculator()

    def evaluate(
        self,
        route: FlightRoute,
        disruption: DisruptionReport,
        *,
        now: date,
        distance_km: int | None = None,
    ) -> EligibilityResult:
        validation = self.validator.validate(route, disruption, now=now)
        if not validation.ok:
            return EligibilityResult(
                eligible=False,
                reason_code=ReasonCode.INVALID_INPUT,
                validation_errors=list(validation.issues),
                message="Flight or disruption details are invalid",
            )

        if distance_km is None or distance_km <= 0:
            distance_km = self.distance_resolver.resolve(route.departure.iata, route.arrival.iata)

        departure_country = normalize_country(route.departure.country)
        arrival_country = normalize_country(route.arrival.country)
        airline_country = normalize_country(route.airline.country)
        regulations = self.classifier.classify(departure_country, arrival_country, airline_country)

        return self.calculator.calculate(
            regulations,
            int(distance_km),
            disruption,
            departure_country=departure_country,
            arrival_country=arrival_country,
        )
