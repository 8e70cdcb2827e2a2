#!/usr/bin/env python3
"""
Offer Engine Models - Value types flowing through pricing and scoring.

- JobCategory: closed set of marketplace job categories
- PriceBand: fair price range for a job, embedded in the job spec
- OfferScoreInput: everything the scorer needs about job, offer and provider
- OfferScore: 0-1 ranking value stored on the offer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union
import logging
import math

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class JobCategory(str, Enum):
    TRANSPORT = "transport"
    TOUR = "tour"
    SERVICE = "service"
    FINANCING = "financing"

    @classmethod
    def parse(cls, value: Union[str, "JobCategory"]) -> "JobCategory":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown job category {value!r} (expected one of: {allowed})")


@dataclass(frozen=True)
class PriceBand:
    """Fair (min, max, recommended) range for a job, computed once at creation."""
    min_amount: float
    max_amount: float
    recommended_amount: float
    is_estimator_generated: bool
    reasoning: Optional[str] = None
    currency: str = "MAD"
    factors: Dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> float:
        return self.max_amount - self.min_amount

    @property
    def is_degenerate(self) -> bool:
        amounts = (self.min_amount, self.max_amount, self.recommended_amount)
        if not all(math.isfinite(a) for a in amounts):
            return True
        return self.max_amount <= self.min_amount

    def to_spec_dict(self) -> Dict[str, Any]:
        """Serialize for embedding into a job spec blob."""
        data: Dict[str, Any] = {
            'minAmount': self.min_amount,
            'maxAmount': self.max_amount,
            'recommendedAmount': self.recommended_amount,
            'isEstimatorGenerated': self.is_estimator_generated,
            'currency': self.currency,
        }
        if self.reasoning:
            data['reasoning'] = self.reasoning
        return data

    @classmethod
    def from_spec_dict(cls, data: Dict[str, Any]) -> "PriceBand":
        """Rebuild a band from a job spec; accepts the legacy *MAD keys too."""
        def pick(*keys: str) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            raise KeyError(keys[0])

        return cls(
            min_amount=float(pick('minAmount', 'minMAD')),
            max_amount=float(pick('maxAmount', 'maxMAD')),
            recommended_amount=float(pick('recommendedAmount', 'recommendedMAD')),
            is_estimator_generated=bool(data.get('isEstimatorGenerated', data.get('aiGenerated', False))),
            reasoning=data.get('reasoning'),
            currency=data.get('currency', 'MAD'),
        )


def coerce_rating(raw: Any) -> float:
    """Provider ratings arrive as floats, Decimals or decimal strings; clamp to [0, 5]."""
    if isinstance(raw, bool) or raw is None:
        return 0.0
    try:
        value = float(Decimal(str(raw).strip())) if isinstance(raw, str) else float(raw)
    except Exception:
        logger.debug("Unparsable provider rating %r, treating as 0", raw)
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(5.0, value))


@dataclass
class OfferScoreInput:
    """Assembled by the caller from job, offer and provider at scoring time."""
    offer_price: float
    offer_eta_minutes: float
    job_category: JobCategory
    job_city: str
    price_band: PriceBand
    offer_notes: Optional[str] = None
    job_description: str = ""
    job_budget_hint: Optional[float] = None
    provider_rating: Union[float, str, Decimal] = 0.0
    provider_verified: bool = False

    def __post_init__(self):
        self.job_category = JobCategory.parse(self.job_category)
        self.provider_rating = coerce_rating(self.provider_rating)


@dataclass(frozen=True)
class OfferScore:
    """Result of scoring one offer; stored on the offer and never recomputed."""
    score: float
    is_estimator_generated: bool
    reasoning: Optional[str] = None
    components: Dict[str, float] = field(default_factory=dict)
