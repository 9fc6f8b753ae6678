from __future__ import annotations

import time
from datetime import date
from typing import Dict, List

from compliance.audit_logger import AuditLogger
from compliance.eligibility_engine import EligibilityEngine
from memory.reference_cache import ReferenceDataCache
from models.schemas import (
    Airline,
    Airport,
    DisruptionReport,
    EligibilityDecisionLog,
    EligibilityResult,
    FlightRoute,
    Regulation,
    ValidationIssue,
    ValidationResult,
)
from tools.aviation_client import AviationReferenceClient

AIRPORTS_KEY = "reference:airports"
AIRLINES_KEY = "reference:airlines"


class ReferenceDataError(LookupError):
    def __init__(self, issues: List[ValidationIssue]) -> None:
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in issues))
        self.issues = issues


class EligibilityTools:
    """Claim-intake entry point: cache-backed reference lookups around the engine."""

    def __init__(
        self,
        engine: EligibilityEngine | None = None,
        cache: ReferenceDataCache | None = None,
        aviation_client: AviationReferenceClient | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.engine = engine or EligibilityEngine()
        self.cache = cache or ReferenceDataCache()
        self.aviation_client = aviation_client or AviationReferenceClient()
        self.audit_logger = audit_logger or AuditLogger()

    async def airports_by_code(self) -> Dict[str, Airport]:
        airports = await self.cache.get_or_fetch(AIRPORTS_KEY, self.aviation_client.fetch_airports)
        return {a.iata: a for a in airports}

    async def airlines_by_code(self) -> Dict[str, Airline]:
        airlines = await self.cache.get_or_fetch(AIRLINES_KEY, self.aviation_client.fetch_airlines)
        return {a.iata: a for a in airlines}

    async def lookup_airport(self, iata: str) -> Airport | None:
        return (await self.airports_by_code()).get((iata or "").strip().upper())

    async def lookup_airline(self, iata: str) -> Airline | None:
        return (await self.airlines_by_code()).get((iata or "").strip().upper())

    async def build_route(
        self,
        *,
        departure_iata: str,
        arrival_iata: str,
        airline_iata: str,
        flight_number: str,
        flight_date: str | date,
        departure_country: str | None = None,
        arrival_country: str | None = None,
        airline_country: str | None = None,
    ) -> FlightRoute:
        """Assemble a FlightRoute, filling missing countries from reference data.

        Raises ReferenceDataError listing every code that could not be completed.
        """
        issues: List[ValidationIssue] = []
        departure = await self._airport(departure_iata, departure_country, "departure", issues)
        arrival = await self._airport(arrival_iata, arrival_country, "arrival", issues)

        code = (airline_iata or "").strip().upper()
        airline = Airline(iata=code, country=airline_country or "")
        if not airline_country:
            known = await self.lookup_airline(code)
            if known is None:
                issues.append(ValidationIssue(field="airline.country", message=f"Unknown airline {code}; please supply its country"))
            else:
                airline = known
        if issues:
            raise ReferenceDataError(issues)
        return FlightRoute(
            departure=departure,
            arrival=arrival,
            airline=airline,
            flight_number=(flight_number or "").strip().upper(),
            flight_date=flight_date,
        )

    async def _airport(self, iata: str, country: str | None, field: str, issues: List[ValidationIssue]) -> Airport:
        code = (iata or "").strip().upper()
        known = await self.lookup_airport(code)
        if country:
            if known is not None:
                return known.model_copy(update={"country": country})
            return Airport(iata=code, country=country)
        if known is None:
            issues.append(ValidationIssue(field=f"{field}.country", message=f"Unknown airport {code}; please supply its country"))
            return Airport(iata=code)
        return known

    def validate(self, route: FlightRoute, disruption: DisruptionReport, now: date | None = None) -> ValidationResult:
        return self.engine.validator.validate(route, disruption, now=now or date.today())

    async def check_eligibility(
        self,
        route: FlightRoute,
        disruption: DisruptionReport,
        now: date | None = None,
        distance_km: int | None = None,
    ) -> EligibilityResult:
        start = time.perf_counter()
        result = self.engine.evaluate(route, disruption, now=now or date.today(), distance_km=distance_km)
        self.audit_logger.log_decision(
            EligibilityDecisionLog(
                flight_number=route.flight_number,
                flight_date=route.flight_date,
                departure_iata=route.departure.iata,
                arrival_iata=route.arrival.iata,
                airline_iata=route.airline.iata,
                disruption_type=disruption.type,
                disruption_reason=disruption.reason,
                eligible=result.eligible,
                regulation=result.regulation,
                reason_code=result.reason_code,
                amount=result.amount,
                currency=result.currency,
                distance_km=result.distance_km,
                duration_ms=int((time.perf_counter() - start) * 1000),
                metadata={"validation_errors": len(result.validation_errors)},
            )
        )
        return result

    def compensation_table(self, regulation: Regulation) -> List[Dict[str, object]]:
        return self.engine.calculator.amount_table(regulation)

    async def resolve_distance(self, departure_iata: str, arrival_iata: str) -> int:
        return self.engine.distance_resolver.resolve(departure_iata, arrival_iata)
