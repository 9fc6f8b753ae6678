from __future__ import annotations

import logging
import math
from typing import Mapping

from reference.registry import Coordinates, ReferenceDataRegistry
from settings import SETTINGS

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    phi1 = math.radians(origin.latitude)
    phi2 = math.radians(destination.latitude)
    dphi = math.radians(destination.latitude - origin.latitude)
    dlambda = math.radians(destination.longitude - origin.longitude)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


class AirportDistanceResolver:
    """Resolve a flight distance in whole kilometres; never raises.

    Order: curated route, reversed curated route, haversine over known
    coordinates, then ``default_km``.
    """

    def __init__(
        self,
        route_distances: Mapping[str, int],
        coordinates: Mapping[str, Coordinates],
        default_km: int | None = None,
    ) -> None:
        self.route_distances = dict(route_distances)
        self.coordinates = dict(coordinates)
        self.default_km = SETTINGS.default_distance_km if default_km is None else int(default_km)

    @classmethod
    def from_registry(cls, registry: ReferenceDataRegistry, default_km: int | None = None) -> "AirportDistanceResolver":
        return cls(registry.route_distances(), registry.coordinates(), default_km=default_km)

    def resolve(self, departure_iata: str, arrival_iata: str) -> int:
        dep = (departure_iata or "").strip().upper()
        arr = (arrival_iata or "").strip().upper()

        curated = self.route_distances.get(dep + arr)
        if curated is None:
            curated = self.route_distances.get(arr + dep)
        if curated is not None:
            return int(curated)

        origin = self.coordinates.get(dep)
        destination = self.coordinates.get(arr)
        if origin is not None and destination is not None:
            return int(round(haversine_km(origin, destination)))

        logger.warning(
            "distance_default_fallback",
            extra={
                "departure": dep,
                "arrival": arr,
                "missing": [code for code, point in ((dep, origin), (arr, destination)) if point is None],
                "default_km": self.default_km,
            },
        )
        return self.default_km
