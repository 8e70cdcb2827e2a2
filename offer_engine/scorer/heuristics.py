#!/usr/bin/env python3
"""
Heuristic Offer Score - Deterministic weighted fallback.

Terms (each pre-scaled to its maximum contribution, defaults in brackets):
- price fairness [0.40]: proximity to the recommended price inside the band;
  fixed 0.20 when underpriced; shrinks linearly with overpricing, floored at 0
- provider rating [0.25]: linear in rating / 5
- verified bonus [0.05]
- response time [0.20]: step function of ETA, never below the 0.05 floor
- value/fit baseline [0.05]: fixed; semantic fit is left to the estimator

Degenerate bands (zero/negative width, non-finite amounts) are replaced
before any division so the result is always finite.
"""

from typing import Dict, Optional, Tuple
import logging
import math

from offer_engine.config_loader import PricingConfig, ScorerConfig
from offer_engine.models import OfferScore, OfferScoreInput, PriceBand
from offer_engine.pricing.heuristics import heuristic_price_band

logger = logging.getLogger(__name__)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _clamp01(x: float) -> float:
    return _clamp(x, 0.0, 1.0)


def default_band(config: ScorerConfig) -> PriceBand:
    band = config.default_band
    return PriceBand(
        min_amount=band.min_amount,
        max_amount=band.max_amount,
        recommended_amount=band.recommended_amount,
        is_estimator_generated=False,
    )


def resolve_band(
    score_input: OfferScoreInput,
    config: ScorerConfig,
    pricing_config: Optional[PricingConfig] = None,
) -> Tuple[PriceBand, str]:
    """Return a usable band and where it came from: 'job', 'heuristic' or 'default'."""
    band = score_input.price_band
    if band is not None and not band.is_degenerate:
        return band, 'job'

    logger.warning(
        "Degenerate price band %s for %s offer, substituting",
        (band.min_amount, band.max_amount) if band is not None else None,
        score_input.job_category.value,
    )
    fallback = heuristic_price_band(
        score_input.job_category, score_input.job_city, pricing_config or PricingConfig(),
    )
    if not fallback.is_degenerate:
        return fallback, 'heuristic'
    return default_band(config), 'default'


def price_fairness(price: float, band: PriceBand, config: ScorerConfig) -> float:
    """Price term in [0, price_weight]. *band* must be non-degenerate."""
    if price < band.min_amount:
        # Suspiciously cheap: quality risk, partial credit only
        return config.underpriced_score

    if price > band.max_amount:
        overprice = (price - band.max_amount) / max(band.max_amount, 1.0)
        return max(0.0, config.price_weight - overprice * config.overprice_slope)

    diff = abs(price - band.recommended_amount)
    proximity = _clamp01(1.0 - diff / band.width)
    return config.price_weight * proximity


def provider_quality(rating: float, verified: bool, config: ScorerConfig) -> Tuple[float, float]:
    """Return (rating term, verified bonus)."""
    rating_score = (_clamp(rating, 0.0, 5.0) / 5.0) * config.rating_weight
    verified_bonus = config.verified_bonus if verified else 0.0
    return rating_score, verified_bonus


def response_time(eta_minutes: float, config: ScorerConfig) -> float:
    for threshold, contribution in config.eta_steps:
        if eta_minutes <= threshold:
            return contribution
    return config.eta_floor


def heuristic_offer_score(
    score_input: OfferScoreInput,
    config: Optional[ScorerConfig] = None,
    pricing_config: Optional[PricingConfig] = None,
) -> OfferScore:
    config = config or ScorerConfig()
    band, band_source = resolve_band(score_input, config, pricing_config)

    price = float(score_input.offer_price)
    eta = float(score_input.offer_eta_minutes)

    components: Dict[str, float] = {}
    components['price'] = price_fairness(price, band, config) if math.isfinite(price) else 0.0
    components['rating'], components['verified'] = provider_quality(
        score_input.provider_rating, score_input.provider_verified, config,
    )
    components['eta'] = response_time(eta, config) if not math.isnan(eta) else config.eta_floor
    components['value'] = config.value_baseline

    score = _clamp01(sum(components.values()))

    if band_source != 'job':
        logger.debug("Scored against %s band %s-%s", band_source, band.min_amount, band.max_amount)

    return OfferScore(
        score=round(score, 4),
        is_estimator_generated=False,
        components={k: round(v, 4) for k, v in components.items()},
    )
