from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Tuple

from compliance.countries import is_eu, is_uk
from models.schemas import (
    Currency,
    DisruptionReason,
    DisruptionReport,
    DisruptionType,
    DistanceBand,
    DutyOfCare,
    EligibilityResult,
    ReasonCode,
    Regulation,
)

MIN_DELAY_HOURS = 3
SUFFICIENT_NOTICE_DAYS = 14
SHORT_NOTICE_DAYS = 7
OVERNIGHT_DELAY_HOURS = 12

EXTRAORDINARY_REASONS: FrozenSet[DisruptionReason] = frozenset(
    {DisruptionReason.WEATHER, DisruptionReason.AIR_TRAFFIC_CONTROL, DisruptionReason.SECURITY}
)

CURRENCY_BY_REGULATION: Dict[Regulation, Currency] = {
    Regulation.EU261: Currency.EUR,
    Regulation.UK261: Currency.GBP,
}


@dataclass(frozen=True)
class DistanceTier:
    band: DistanceBand
    max_km: int | None
    # Hours of delay from which duty of care starts for this band.
    care_after_hours: int
    # Longest rerouting that still excuses a 7-13 day notice cancellation.
    rerouting_limit_hours: int

    def contains(self, distance_km: int) -> bool:
        return self.max_km is None or distance_km <= self.max_km


DISTANCE_TIERS: Tuple[DistanceTier, ...] = (
    DistanceTier(DistanceBand.SHORT, 1500, care_after_hours=2, rerouting_limit_hours=2),
    DistanceTier(DistanceBand.MEDIUM, 3500, care_after_hours=3, rerouting_limit_hours=3),
    DistanceTier(DistanceBand.LONG, None, care_after_hours=4, rerouting_limit_hours=4),
)

COMPENSATION_AMOUNTS: Dict[Regulation, Dict[DistanceBand, int]] = {
    Regulation.EU261: {DistanceBand.SHORT: 250, DistanceBand.MEDIUM: 400, DistanceBand.LONG: 600},
    Regulation.UK261: {DistanceBand.SHORT: 220, DistanceBand.MEDIUM: 350, DistanceBand.LONG: 520},
}


def tier_for(distance_km: int) -> DistanceTier:
    for tier in DISTANCE_TIERS:
        if tier.contains(distance_km):
            return tier
    return DISTANCE_TIERS[-1]


class CompensationCalculator:
    """Turn classified regulations, distance and a validated disruption into a result.

    Amounts are whole major currency units (EUR or GBP); the product never
    pays fractional amounts.
    """

    def calculate(
        self,
        regulations: Iterable[Regulation],
        distance_km: int,
        disruption: DisruptionReport,
        *,
        departure_country: str | None = None,
        arrival_country: str | None = None,
    ) -> EligibilityResult:
        applicable = frozenset(regulations)
        ordered = sorted(applicable, key=lambda r: r.value)
        tier = tier_for(distance_km)
        kind = DisruptionType(disruption.type)
        reason = DisruptionReason(disruption.reason)

        if not applicable:
            return EligibilityResult(
                eligible=False,
                distance_km=distance_km,
                reason_code=ReasonCode.NO_JURISDICTION,
                distance_band=tier.band,
                requires_manual_review=True,
                message="Flight not covered by EU or UK regulations",
            )

        regulation = self.select_regulation(applicable, departure_country, arrival_country)
        currency = CURRENCY_BY_REGULATION[regulation]
        care = self.duty_of_care(disruption, tier)

        def _denied(code: ReasonCode, message: str) -> EligibilityResult:
            return EligibilityResult(
                eligible=False,
                regulation=regulation,
                distance_km=distance_km,
                amount=0,
                currency=currency,
                reason_code=code,
                applicable_regulations=ordered,
                distance_band=tier.band,
                requires_manual_review=True,
                duty_of_care=care,
                message=message,
            )

        if kind is DisruptionType.DELAY and (disruption.delay_hours or 0) < MIN_DELAY_HOURS:
            return _denied(
                ReasonCode.INSUFFICIENT_DELAY,
                f"Delay of {_hours(disruption.delay_hours)} hours is less than the required {MIN_DELAY_HOURS} hours",
            )
        if kind is DisruptionType.CANCELLATION:
            notice = disruption.cancellation_notice_days or 0
            if notice >= SUFFICIENT_NOTICE_DAYS:
                return _denied(ReasonCode.SUFFICIENT_NOTICE, f"Flight cancelled with at least {SUFFICIENT_NOTICE_DAYS} days notice")
            rerouting = disruption.rerouting_hours
            if notice >= SHORT_NOTICE_DAYS and rerouting is not None and rerouting <= tier.rerouting_limit_hours:
                return _denied(
                    ReasonCode.REROUTED_WITHIN_LIMITS,
                    f"Cancelled with {notice} days notice and rerouted within {tier.rerouting_limit_hours} hours",
                )
        if kind is DisruptionType.DENIED_BOARDING and disruption.voluntary:
            return _denied(ReasonCode.VOLUNTARY_DENIED_BOARDING, "Voluntary denied boarding")

        if reason in EXTRAORDINARY_REASONS:
            return _denied(ReasonCode.EXTRAORDINARY_CIRCUMSTANCES, "Disruption caused by extraordinary circumstances")

        amount = COMPENSATION_AMOUNTS[regulation][tier.band]
        return EligibilityResult(
            eligible=True,
            regulation=regulation,
            distance_km=distance_km,
            amount=amount,
            currency=currency,
            reason_code=ReasonCode.ELIGIBLE,
            applicable_regulations=ordered,
            distance_band=tier.band,
            requires_manual_review=False,
            duty_of_care=care,
            message=_eligible_message(kind, disruption),
        )

    def select_regulation(
        self,
        regulations: FrozenSet[Regulation],
        departure_country: str | None,
        arrival_country: str | None,
    ) -> Regulation:
        """Pick exactly one regulation; never averages or sums.

        With both in play the departure side wins. When departure is neither
        EU nor UK the arrival decides: UK261 for a UK arrival, else EU261.
        """
        if len(regulations) == 1:
            return next(iter(regulations))
        if is_uk(departure_country):
            return Regulation.UK261
        if is_eu(departure_country):
            return Regulation.EU261
        if is_uk(arrival_country):
            return Regulation.UK261
        return Regulation.EU261

    def duty_of_care(self, disruption: DisruptionReport, tier: DistanceTier) -> DutyOfCare:
        if disruption.type != DisruptionType.DELAY.value or not disruption.delay_hours:
            return DutyOfCare()
        hours = disruption.delay_hours
        if hours < tier.care_after_hours:
            return DutyOfCare()
        overnight = hours >= OVERNIGHT_DELAY_HOURS
        return DutyOfCare(meals=True, refreshments=True, communication=True, hotel=overnight, transport=overnight)

    def amount_table(self, regulation: Regulation) -> List[Dict[str, object]]:
        currency = CURRENCY_BY_REGULATION[regulation]
        return [
            {
                "band": tier.band.value,
                "max_km": tier.max_km,
                "amount": COMPENSATION_AMOUNTS[regulation][tier.band],
                "currency": currency.value,
            }
            for tier in DISTANCE_TIERS
        ]


def _hours(value: float | None) -> str:
    if value is None:
        return "0"
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def _eligible_message(kind: DisruptionType, disruption: DisruptionReport) -> str:
    if kind is DisruptionType.DELAY:
        return f"Flight delayed by {_hours(disruption.delay_hours)} hours"
    if kind is DisruptionType.CANCELLATION:
        return "Flight cancelled with insufficient notice"
    return "Involuntarily denied boarding"
