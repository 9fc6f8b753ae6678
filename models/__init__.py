from .schemas import (
    Airline,
    Airport,
    Currency,
    DisruptionReason,
    DisruptionReport,
    DisruptionType,
    DistanceBand,
    DutyOfCare,
    EligibilityDecisionLog,
    EligibilityResult,
    FlightRoute,
    ReasonCode,
    Regulation,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "Airline",
    "Airport",
    "Currency",
    "DisruptionReason",
    "DisruptionReport",
    "DisruptionType",
    "DistanceBand",
    "DutyOfCare",
    "EligibilityDecisionLog",
    "EligibilityResult",
    "FlightRoute",
    "ReasonCode",
    "Regulation",
    "ValidationIssue",
    "ValidationResult",
]
