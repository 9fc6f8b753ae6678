from .compensation_rules import CompensationCalculator
from .distance import AirportDistanceResolver
from .eligibility_engine import EligibilityEngine
from .jurisdiction import JurisdictionClassifier
from .validation import DisruptionValidator

__all__ = [
    "AirportDistanceResolver",
    "CompensationCalculator",
    "DisruptionValidator",
    "EligibilityEngine",
    "JurisdictionClassifier",
]
