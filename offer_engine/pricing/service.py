#!/usr/bin/env python3
"""
Price Band Service - Estimator-first price bands with heuristic fallback.

Called once per job at creation time. The estimator is tried only when a
provider is wired in; any failure (network, timeout, auth, malformed or
out-of-range response) is logged and the deterministic heuristic band is
returned instead. Nothing is raised to the caller.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union
import logging

from pydantic import ValidationError

from offer_engine.config_loader import EstimatorConfig, PricingConfig
from offer_engine.llm.interfaces import EstimatorProvider
from offer_engine.llm.openai_service import extract_json_object
from offer_engine.llm.prompts import PRICING_SYSTEM_PROMPT, build_pricing_prompt
from offer_engine.llm.schema_models import EstimatedBand
from offer_engine.models import JobCategory, PriceBand
from offer_engine.pricing.heuristics import heuristic_price_band

logger = logging.getLogger(__name__)


def parse_estimated_band(data: Dict[str, Any], currency: str = "MAD") -> PriceBand:
    """Validate an estimator JSON payload into a PriceBand.

    Raises pydantic.ValidationError when fields are missing, non-numeric,
    negative or out of order.
    """
    estimate = EstimatedBand.model_validate(data)
    return PriceBand(
        min_amount=estimate.min_amount,
        max_amount=estimate.max_amount,
        recommended_amount=estimate.recommended_amount,
        is_estimator_generated=True,
        reasoning=estimate.reasoning,
        currency=currency,
    )


class PriceBandService:
    """
    Produces the fair price band for a job.

    Configuration and the estimator provider are injected at construction;
    pass ``provider=None`` to run heuristics only.
    """

    def __init__(
        self,
        config: Optional[PricingConfig] = None,
        estimator_config: Optional[EstimatorConfig] = None,
        provider: Optional[EstimatorProvider] = None,
    ):
        self.config = config or PricingConfig()
        self.estimator_config = estimator_config or EstimatorConfig()
        self.provider = provider

    @property
    def estimator_available(self) -> bool:
        return self.provider is not None and self.estimator_config.enabled

    def generate(
        self,
        category: Union[JobCategory, str],
        city: str,
        description: str,
        distance_km: Optional[float] = None,
        passenger_count: Optional[int] = None,
        timestamp: Union[str, datetime, None] = None,
    ) -> PriceBand:
        category = JobCategory.parse(category)

        if not self.estimator_available:
            logger.debug("Estimator inactive, using heuristic band for %s in %s", category.value, city)
            return self.heuristic(category, city, distance_km, passenger_count, timestamp)

        try:
            band = self._estimate(category, city, description, distance_km, passenger_count, timestamp)
            logger.info(
                "Estimator price band for %s in %s: %s-%s (recommended %s)",
                category.value, city, band.min_amount, band.max_amount, band.recommended_amount,
            )
            return band
        except ValidationError as e:
            logger.warning("Estimator returned an invalid price band, using fallback: %s", e)
            return self.heuristic(category, city, distance_km, passenger_count, timestamp)
        except Exception as e:
            logger.warning("Estimator pricing failed, using fallback: %s", e)
            return self.heuristic(category, city, distance_km, passenger_count, timestamp)

    def heuristic(
        self,
        category: Union[JobCategory, str],
        city: str,
        distance_km: Optional[float] = None,
        passenger_count: Optional[int] = None,
        timestamp: Union[str, datetime, None] = None,
    ) -> PriceBand:
        return heuristic_price_band(
            category, city, self.config,
            distance_km=distance_km,
            passenger_count=passenger_count,
            timestamp=timestamp,
        )

    def _estimate(
        self,
        category: JobCategory,
        city: str,
        description: str,
        distance_km: Optional[float],
        passenger_count: Optional[int],
        timestamp: Union[str, datetime, None],
    ) -> PriceBand:
        if isinstance(timestamp, datetime):
            timestamp = timestamp.isoformat()

        prompt = build_pricing_prompt(
            category.value, city, description,
            currency=self.config.currency,
            distance_km=distance_km,
            passenger_count=passenger_count,
            timestamp=timestamp,
        )
        text = self.provider.complete(
            prompt,
            max_tokens=self.estimator_config.pricing_max_tokens,
            temperature=self.estimator_config.pricing_temperature,
            system_prompt=PRICING_SYSTEM_PROMPT,
        )
        data = extract_json_object(text)
        return parse_estimated_band(data, currency=self.config.currency)
