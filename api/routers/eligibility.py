from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from models.schemas import DisruptionReport, FlightRoute, Regulation
from tools.eligibility_tools import EligibilityTools, ReferenceDataError


router = APIRouter(prefix="/eligibility", tags=["eligibility"])


class AirportInput(BaseModel):
    iata: str
    country: Optional[str] = None


class AirlineInput(BaseModel):
    iata: str
    country: Optional[str] = None


class EligibilityCheckRequest(BaseModel):
    departure: AirportInput
    arrival: AirportInput
    airline: AirlineInput
    flight_number: str
    flight_date: str
    disruption: DisruptionReport
    distance_km: Optional[int] = None
    evaluation_date: Optional[date] = None


def _tools(request: Request) -> EligibilityTools:
    return request.app.state.eligibility_tools


async def _route(tools: EligibilityTools, payload: EligibilityCheckRequest) -> FlightRoute:
    try:
        return await tools.build_route(
            departure_iata=payload.departure.iata,
            arrival_iata=payload.arrival.iata,
            airline_iata=payload.airline.iata,
            flight_number=payload.flight_number,
            flight_date=payload.flight_date,
            departure_country=payload.departure.country,
            arrival_country=payload.arrival.country,
            airline_country=payload.airline.country,
        )
    except ReferenceDataError as exc:
        raise HTTPException(
            status_code=422,
            detail={"issues": [issue.model_dump() for issue in exc.issues]},
        ) from exc


@router.post("/check")
async def check_eligibility(payload: EligibilityCheckRequest, request: Request):
    tools = _tools(request)
    route = await _route(tools, payload)
    result = await tools.check_eligibility(
        route,
        payload.disruption,
        now=payload.evaluation_date,
        distance_km=payload.distance_km,
    )
    return result.model_dump(mode="json")


@router.post("/validate")
async def validate_claim(payload: EligibilityCheckRequest, request: Request):
    tools = _tools(request)
    route = await _route(tools, payload)
    validation = tools.validate(route, payload.disruption, now=payload.evaluation_date)
    return {"ok": validation.ok, "issues": [issue.model_dump() for issue in validation.issues]}


@router.get("/amounts/{regulation}")
async def compensation_amounts(regulation: Regulation, request: Request):
    return {"regulation": regulation.value, "bands": _tools(request).compensation_table(regulation)}
