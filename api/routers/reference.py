from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from api.middleware.auth import require_role
from tools.eligibility_tools import EligibilityTools


router = APIRouter(prefix="/reference", tags=["reference"])


def _tools(request: Request) -> EligibilityTools:
    return request.app.state.eligibility_tools


@router.get("/airports/{iata}")
async def get_airport(iata: str, request: Request):
    airport = await _tools(request).lookup_airport(iata)
    if airport is None:
        raise HTTPException(status_code=404, detail="airport_not_found")
    return airport.model_dump(mode="json")


@router.get("/airlines/{iata}")
async def get_airline(iata: str, request: Request):
    airline = await _tools(request).lookup_airline(iata)
    if airline is None:
        raise HTTPException(status_code=404, detail="airline_not_found")
    return airline.model_dump(mode="json")


@router.get("/distance")
async def get_distance(
    request: Request,
    departure: str = Query(..., min_length=3, max_length=3),
    arrival: str = Query(..., min_length=3, max_length=3),
):
    km = await _tools(request).resolve_distance(departure, arrival)
    return {"departure": departure.upper(), "arrival": arrival.upper(), "distance_km": km}


@router.delete("/cache")
async def clear_cache(request: Request, _role: str = Depends(require_role("ADMIN"))):
    _tools(request).cache.clear()
    return {"ok": True, "cleared": True}


@router.delete("/cache/{key}")
async def invalidate_cache_key(key: str, request: Request, _role: str = Depends(require_role("ADMIN"))):
    removed = _tools(request).cache.invalidate(f"reference:{key}")
    return {"ok": True, "key": key, "removed": removed}
