from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DisruptionType(str, Enum):
    DELAY = "delay"
    CANCELLATION = "cancellation"
    DENIED_BOARDING = "denied_boarding"


class DisruptionReason(str, Enum):
    TECHNICAL_ISSUE = "technical_issue"
    WEATHER = "weather"
    AIR_TRAFFIC_CONTROL = "air_traffic_control"
    SECURITY = "security"
    STAFF_SHORTAGE = "staff_shortage"
    STRIKE = "strike"
    OTHER_AIRLINE_FAULT = "other_airline_fault"
    OTHER = "other"


class Regulation(str, Enum):
    EU261 = "EU261"
    UK261 = "UK261"


class Currency(str, Enum):
    EUR = "EUR"
    GBP = "GBP"


class DistanceBand(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ReasonCode(str, Enum):
    ELIGIBLE = "eligible"
    INVALID_INPUT = "invalid_input"
    NO_JURISDICTION = "no_jurisdiction"
    INSUFFICIENT_DELAY = "insufficient_delay"
    SUFFICIENT_NOTICE = "sufficient_notice"
    REROUTED_WITHIN_LIMITS = "rerouted_within_limits"
    VOLUNTARY_DENIED_BOARDING = "voluntary_denied_boarding"
    EXTRAORDINARY_CIRCUMSTANCES = "extraordinary_circumstances"


class Airport(BaseModel):
    model_config = ConfigDict(frozen=True)

    iata: str
    name: str = ""
    city: str = ""
    country: str = ""


class Airline(BaseModel):
    model_config = ConfigDict(frozen=True)

    iata: str
    name: str = ""
    country: str = ""


class FlightRoute(BaseModel):
    """Caller-supplied flight facts.

    Fields stay loose strings; format and date checks belong to
    ``DisruptionValidator`` so every problem can be reported at once.
    """

    model_config = ConfigDict(frozen=True)

    departure: Airport
    arrival: Airport
    airline: Airline
    flight_number: str
    flight_date: str

    @field_validator("flight_date", mode="before")
    @classmethod
    def _date_to_iso(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return value


class DisruptionReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Accepts DisruptionType / DisruptionReason members or their raw values.
    type: str
    reason: str
    delay_hours: Optional[float] = None
    cancellation_notice_days: Optional[int] = None
    rerouting_hours: Optional[float] = None
    voluntary: bool = False
    is_domestic: Optional[bool] = None

    @field_validator("type", "reason", mode="before")
    @classmethod
    def _enum_to_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value


class ValidationIssue(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def as_pairs(self) -> List[tuple[str, str]]:
        return [(issue.field, issue.message) for issue in self.issues]


class DutyOfCare(BaseModel):
    meals: bool = False
    refreshments: bool = False
    communication: bool = False
    hotel: bool = False
    transport: bool = False


class EligibilityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    eligible: bool
    regulation: Optional[Regulation] = None
    distance_km: int = 0
    amount: int = 0
    currency: Optional[Currency] = None
    reason_code: ReasonCode
    applicable_regulations: List[Regulation] = Field(default_factory=list)
    distance_band: Optional[DistanceBand] = None
    requires_manual_review: bool = False
    duty_of_care: DutyOfCare = Field(default_factory=DutyOfCare)
    validation_errors: List[ValidationIssue] = Field(default_factory=list)
    message: str = ""


class EligibilityDecisionLog(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    flight_number: str
    flight_date: str
    departure_iata: str
    arrival_iata: str
    airline_iata: str
    disruption_type: str
    disruption_reason: str
    eligible: bool
    regulation: Optional[Regulation] = None
    reason_code: ReasonCode
    amount: int = 0
    currency: Optional[Currency] = None
    distance_km: int = 0
    duration_ms: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
