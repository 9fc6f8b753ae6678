from __future__ import annotations

from typing import FrozenSet

from compliance.countries import is_eu, is_uk
from models.schemas import Regulation


class JurisdictionClassifier:
    """Decide which passenger-rights regimes cover a flight.

    Inputs are ISO alpha-2 codes already passed through ``normalize_country``;
    None means "unknown" and never matches EU or UK.
    """

    def classify(
        self,
        departure_country: str | None,
        arrival_country: str | None,
        airline_country: str | None,
    ) -> FrozenSet[Regulation]:
        regulations = set()
        if is_eu(departure_country) or (is_eu(arrival_country) and is_eu(airline_country)):
            regulations.add(Regulation.EU261)
        if is_uk(departure_country) or (is_uk(arrival_country) and is_uk(airline_country)):
            regulations.add(Regulation.UK261)
        return frozenset(regulations)
