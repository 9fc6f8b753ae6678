from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.schemas import Airline, Airport
from settings import SETTINGS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["Coordinates"]:
        lat = data.get("latitude")
        lon = data.get("longitude")
        if lat is None or lon is None:
            return None
        return cls(latitude=float(lat), longitude=float(lon))


class ReferenceDataRegistry:
    """Static airport, airline and route-distance tables read from JSON once.

    The registry is constructed at process start and handed to the services
    that need it; files are parsed lazily on first access and memoised.
    """

    AIRPORTS_FILE = "airports.json"
    AIRLINES_FILE = "airlines.json"
    ROUTES_FILE = "route_distances.json"

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir or SETTINGS.reference_data_dir)
        self._cache: Dict[str, Any] = {}

    def _read(self, filename: str) -> Any:
        if filename in self._cache:
            return self._cache[filename]
        path = self.data_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"reference data not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        self._cache[filename] = payload
        return payload

    def _airport_rows(self) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._read(self.AIRPORTS_FILE)]

    def airports(self) -> List[Airport]:
        return [
            Airport(
                iata=str(row["iata"]).upper(),
                name=str(row.get("name", "")),
                city=str(row.get("city", "")),
                country=str(row.get("country", "")),
            )
            for row in self._airport_rows()
        ]

    def airlines(self) -> List[Airline]:
        return [
            Airline(iata=str(row["iata"]).upper(), name=str(row.get("name", "")), country=str(row.get("country", "")))
            for row in self._read(self.AIRLINES_FILE)
        ]

    def coordinates(self) -> Dict[str, Coordinates]:
        coords: Dict[str, Coordinates] = {}
        for row in self._airport_rows():
            point = Coordinates.from_dict(row)
            if point is not None:
                coords[str(row["iata"]).upper()] = point
        return coords

    def route_distances(self) -> Dict[str, int]:
        """Curated ``DEPARR -> km`` table.

        A key whose reverse was already loaded with a different value is
        dropped so both directions resolve to the first value seen.
        """
        raw = dict(self._read(self.ROUTES_FILE).get("routes", {}))
        routes: Dict[str, int] = {}
        for key, km in raw.items():
            key = str(key).upper()
            if len(key) != 6:
                logger.warning("route_distance_bad_key", extra={"key": key})
                continue
            reverse = key[3:] + key[:3]
            if reverse in routes and routes[reverse] != int(km):
                logger.warning(
                    "route_distance_asymmetric",
                    extra={"key": key, "km": int(km), "reverse_km": routes[reverse]},
                )
                continue
            routes[key] = int(km)
        return routes

    def routes_version(self) -> str:
        return str(self._read(self.ROUTES_FILE).get("version", "unknown"))
