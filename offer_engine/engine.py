"""
Entry points used by the job-creation and offer-submission handlers.

Handlers should build one context at startup with
``AppContext.build(load_config(...))`` and pass it as ``context=``; the
services then see only the configuration they were given.

Calling without ``context`` falls back to a process-wide context built once
from ``config.yaml`` and the environment. That cache is a convenience for
ad-hoc scripts; ``reset_default_context()`` drops it.
"""
from datetime import datetime
from typing import Optional, Union
import logging
import threading

from offer_engine.app_context import AppContext
from offer_engine.config_loader import load_config
from offer_engine.models import JobCategory, OfferScore, OfferScoreInput, PriceBand

logger = logging.getLogger(__name__)

_default_context: Optional[AppContext] = None
_context_lock = threading.Lock()


def get_default_context() -> AppContext:
    """Lazily build the shared convenience context (see module docstring)."""
    global _default_context
    with _context_lock:
        if _default_context is None:
            _default_context = AppContext.build(load_config())
            logger.info(
                "Offer engine ready (estimator %s)",
                "active" if _default_context.estimator is not None else "inactive",
            )
        return _default_context


def reset_default_context() -> None:
    """Drop the cached context so the next call re-reads configuration."""
    global _default_context
    with _context_lock:
        _default_context = None


def generate_price_band(
    category: Union[JobCategory, str],
    city: str,
    description: str,
    distance_km: Optional[float] = None,
    passenger_count: Optional[int] = None,
    timestamp: Union[str, datetime, None] = None,
    context: Optional[AppContext] = None,
) -> PriceBand:
    context = context or get_default_context()
    return context.pricing_service.generate(
        category, city, description,
        distance_km=distance_km,
        passenger_count=passenger_count,
        timestamp=timestamp,
    )


def score_offer(score_input: OfferScoreInput, context: Optional[AppContext] = None) -> OfferScore:
    context = context or get_default_context()
    return context.scoring_service.score(score_input)
