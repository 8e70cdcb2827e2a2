#!/usr/bin/env python3
"""
Heuristic Price Bands - Deterministic fallback pricing.

Category rules:
- transport: distance-driven (base fee + per-km cost, spread 0.7x / 1.3x)
- tour: passenger-driven (per-passenger rate, spread 0.8x / 1.5x)
- service, financing and anything else: base (min, max) rate pair

Every rule is scaled by a per-city cost multiplier (unknown cities = 1.0)
and rounded half-up to whole currency units.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union
import logging
import math
import unicodedata

from offer_engine.config_loader import PricingConfig, RateRange
from offer_engine.models import JobCategory, PriceBand, round_half_up

logger = logging.getLogger(__name__)

# Peak windows as [start_hour, end_hour) on the timestamp's own clock
PEAK_HOUR_WINDOWS = ((7, 9), (17, 20), (23, 24), (0, 6))
# datetime.weekday(): Friday=4, Saturday=5
WEEKEND_DAYS = (4, 5)


def normalize_city(city: Optional[str], config: PricingConfig) -> str:
    """Lowercase, strip accents and resolve aliases ("Fès" -> "fes", "Tanger" -> "tangier")."""
    if not city:
        return ""
    decomposed = unicodedata.normalize("NFKD", city.strip().lower())
    key = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return config.city_aliases.get(key, key)


def city_multiplier(city: Optional[str], config: PricingConfig) -> float:
    return config.city_multipliers.get(normalize_city(city, config), 1.0)


def _parse_timestamp(timestamp: Union[str, datetime, None]) -> Optional[datetime]:
    if timestamp is None:
        return None
    if isinstance(timestamp, datetime):
        return timestamp
    raw = str(timestamp).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.debug("Ignoring unparsable timestamp %r", timestamp)
        return None


def surge_multiplier(timestamp: Union[str, datetime, None], config: PricingConfig) -> float:
    """Peak-hour surge beats weekend surge; no timestamp means no surge."""
    moment = _parse_timestamp(timestamp)
    if moment is None:
        return 1.0
    hour = moment.hour
    if any(start <= hour < end for start, end in PEAK_HOUR_WINDOWS):
        return config.peak_surge
    if moment.weekday() in WEEKEND_DAYS:
        return config.weekend_surge
    return 1.0


def _base_rates(category: JobCategory, config: PricingConfig) -> RateRange:
    return config.base_rates.get(category.value, RateRange())


def _usable_hint(value):
    """A distance or passenger hint counts only when it is a finite positive number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return value


def _all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _transport_amounts(km, base: RateRange, mult: float, config: PricingConfig):
    distance_cost = float(km) * config.per_km_rate
    low = (base.min + distance_cost * config.transport_min_factor) * mult
    high = (base.min + distance_cost * config.transport_max_factor) * mult
    recommended = (base.min + distance_cost) * mult
    return low, high, recommended


def _tour_amounts(pax, mult: float, config: PricingConfig):
    total_cost = config.per_passenger_rate * float(pax)
    return total_cost * config.tour_min_factor * mult, total_cost * config.tour_max_factor * mult, total_cost * mult


def heuristic_price_band(
    category: Union[JobCategory, str],
    city: Optional[str],
    config: PricingConfig,
    distance_km: Optional[float] = None,
    passenger_count: Optional[int] = None,
    timestamp: Union[str, datetime, None] = None,
) -> PriceBand:
    """Compute the fallback price band. Pure arithmetic; never calls out."""
    category = JobCategory.parse(category)
    base = _base_rates(category, config)
    city_mult = city_multiplier(city, config)

    surge = surge_multiplier(timestamp, config)
    applied_surge = surge if config.surge_enabled else 1.0
    mult = city_mult * applied_surge

    factors = {
        'base_min': base.min,
        'base_max': base.max,
        'city_multiplier': city_mult,
        'surge': surge,
        'surge_applied': config.surge_enabled,
    }

    if category is JobCategory.TRANSPORT:
        # Never price a zero-length trip: short hop is the conservative default
        km = _usable_hint(distance_km)
        if km is None:
            km = config.default_distance_km
        low, high, recommended = _transport_amounts(km, base, mult, config)
        if not _all_finite(low, high, recommended):
            logger.warning("Distance %r overflows the price band, using default distance", distance_km)
            km = config.default_distance_km
            low, high, recommended = _transport_amounts(km, base, mult, config)
        factors['distance_km'] = km
        factors['per_km_rate'] = config.per_km_rate

    elif category is JobCategory.TOUR:
        pax = _usable_hint(passenger_count)
        if pax is None:
            pax = config.default_passenger_count
        low, high, recommended = _tour_amounts(pax, mult, config)
        if not _all_finite(low, high, recommended):
            logger.warning("Passenger count %r overflows the price band, using default count", passenger_count)
            pax = config.default_passenger_count
            low, high, recommended = _tour_amounts(pax, mult, config)
        factors['passenger_count'] = pax
        factors['per_passenger_rate'] = config.per_passenger_rate

    else:
        # service, financing: plain base rate pair
        low = base.min * mult
        high = base.max * mult
        recommended = (base.min + base.max) / 2 * mult

    return PriceBand(
        min_amount=round_half_up(low),
        max_amount=round_half_up(high),
        recommended_amount=round_half_up(recommended),
        is_estimator_generated=False,
        currency=config.currency,
        factors=factors,
    )
