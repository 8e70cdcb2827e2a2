#!/usr/bin/env python3
"""
Multi-Signal Offer Score - Weighted blend of normalized offer signals.

Used when the caller already holds normalized signals for an offer (fit,
ETA, reliability, compliance, proximity) rather than the raw job/offer
fields the heuristic score works from.

Weights [default]:
- fit [0.25], eta [0.20] (1 - eta), price [0.20], reliability [0.15],
  rating [0.10] (rating / 5), compliance [0.07], distance [0.03] (1 - distance)

Price normalization: below the fair range 0.7, above it 0.6, inside it
1.0 at the low edge falling linearly to 0.7 at the high edge.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging
import math

from offer_engine.models import coerce_rating
from offer_engine.pricing.job_spec import hints_from_job_spec

logger = logging.getLogger(__name__)

SIGNAL_WEIGHTS = {
    'fit': 0.25,
    'eta': 0.20,
    'price': 0.20,
    'reliability': 0.15,
    'rating': 0.10,
    'compliance': 0.07,
    'distance': 0.03,
}

UNDERPRICED_NORM = 0.7
OVERPRICED_NORM = 0.6
IN_RANGE_SLOPE = 0.3

REQUIRED_PERMITS = ('identity', 'permit', 'insurance')

FIT_BASE = 0.5
FIT_CAPACITY_BONUS = 0.3
FIT_RANGE_BONUS = 0.2


@dataclass(frozen=True)
class OfferSignals:
    """Normalized signals; fit/eta/reliability/compliance/distance are 0-1, rating 0-5."""
    fit: float
    eta: float
    price: float
    fair_low: float
    fair_high: float
    rating: float
    reliability: float
    compliance: float
    distance: float


def _unit(x: float) -> float:
    x = float(x)
    if math.isnan(x):
        return 0.0
    return max(0.0, min(1.0, x))


def price_norm(price: float, fair_low: float, fair_high: float) -> float:
    if price < fair_low:
        return UNDERPRICED_NORM
    if price > fair_high or not math.isfinite(price):
        return OVERPRICED_NORM
    width = fair_high - fair_low
    if not (width > 0) or not math.isfinite(width):
        return 1.0
    position = (price - fair_low) / width
    return 1.0 - position * IN_RANGE_SLOPE


def score_offer_signals(signals: OfferSignals, weights: Optional[Mapping[str, float]] = None) -> float:
    """Blend normalized signals into a 0-1 score rounded to 3 decimals."""
    w = dict(SIGNAL_WEIGHTS)
    if weights:
        w.update(weights)

    score = (
        w['fit'] * _unit(signals.fit)
        + w['eta'] * (1 - _unit(signals.eta))
        + w['price'] * price_norm(signals.price, signals.fair_low, signals.fair_high)
        + w['reliability'] * _unit(signals.reliability)
        + w['rating'] * coerce_rating(signals.rating) / 5
        + w['compliance'] * _unit(signals.compliance)
        + w['distance'] * (1 - _unit(signals.distance))
    )
    return round(max(0.0, min(1.0, score)), 3)


def calculate_compliance(permits: Optional[Mapping[str, Any]], verified: bool) -> float:
    """Share of required permits held; unverified providers are not compliant."""
    if not verified:
        return 0.0
    permits = permits or {}
    held = sum(1 for name in REQUIRED_PERMITS if permits.get(name))
    return held / len(REQUIRED_PERMITS)


def _detail_number(details: Mapping[str, Any], *keys: str) -> Optional[float]:
    for key in keys:
        value = details.get(key)
        if value is None or isinstance(value, bool):
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            return number
    return None


def calculate_fit(job_spec: Optional[Mapping[str, Any]], offer_details: Optional[Mapping[str, Any]]) -> float:
    """
    Requirement fit from the job spec and what the offer declares.

    Starts at 0.5; +0.3 when the offered capacity covers the passengers and
    +0.2 when the offered range covers the trip distance.
    """
    distance, pax = hints_from_job_spec(dict(job_spec or {}))
    details = offer_details or {}
    fit = FIT_BASE

    capacity = _detail_number(details, 'capacity')
    if pax and capacity and capacity >= pax:
        fit += FIT_CAPACITY_BONUS

    max_distance = _detail_number(details, 'maxDistance', 'max_distance')
    if distance and max_distance and max_distance >= distance:
        fit += FIT_RANGE_BONUS

    return min(1.0, fit)
