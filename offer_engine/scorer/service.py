#!/usr/bin/env python3
"""
Offer Scoring Service - Estimator-first offer scores with heuristic fallback.

Called once per offer at submission time. The estimator weighs price
fairness, provider quality, response time and value/fit; its score is
clamped into [0, 1]. Any estimator failure is logged and the heuristic
score is returned. Nothing is raised to the caller.
"""

from typing import Optional
import logging

from pydantic import ValidationError

from offer_engine.config_loader import EstimatorConfig, PricingConfig, ScorerConfig
from offer_engine.llm.interfaces import EstimatorProvider
from offer_engine.llm.openai_service import extract_json_object
from offer_engine.llm.prompts import SCORING_SYSTEM_PROMPT, build_scoring_prompt
from offer_engine.llm.schema_models import EstimatedScore
from offer_engine.models import OfferScore, OfferScoreInput
from offer_engine.scorer.heuristics import heuristic_offer_score, resolve_band

logger = logging.getLogger(__name__)


def parse_estimated_score(data: dict) -> OfferScore:
    """Validate estimator JSON into an OfferScore, clamping the score into [0, 1]."""
    estimate = EstimatedScore.model_validate(data)
    if not 0.0 <= estimate.score <= 1.0:
        logger.info("Clamping out-of-range estimator score %s", estimate.score)

    return OfferScore(
        score=max(0.0, min(1.0, estimate.score)),
        is_estimator_generated=True,
        reasoning=estimate.reasoning,
    )


class OfferScoringService:
    """
    Scores competing offers on a job.

    Configuration and the estimator provider are injected at construction;
    pass ``provider=None`` to run heuristics only.
    """

    def __init__(
        self,
        config: Optional[ScorerConfig] = None,
        estimator_config: Optional[EstimatorConfig] = None,
        provider: Optional[EstimatorProvider] = None,
        pricing_config: Optional[PricingConfig] = None,
    ):
        self.config = config or ScorerConfig()
        self.estimator_config = estimator_config or EstimatorConfig()
        self.provider = provider
        self.pricing_config = pricing_config or PricingConfig()

    @property
    def estimator_available(self) -> bool:
        return self.provider is not None and self.estimator_config.enabled

    def score(self, score_input: OfferScoreInput) -> OfferScore:
        if not self.estimator_available:
            return self.heuristic(score_input)

        try:
            result = self._estimate(score_input)
            logger.info(
                "Estimator score %.3f for %s offer at %s",
                result.score, score_input.job_category.value, score_input.offer_price,
            )
            return result
        except ValidationError as e:
            logger.warning("Estimator returned an invalid offer score, using fallback: %s", e)
            return self.heuristic(score_input)
        except Exception as e:
            logger.warning("Estimator offer scoring failed, using fallback: %s", e)
            return self.heuristic(score_input)

    def heuristic(self, score_input: OfferScoreInput) -> OfferScore:
        return heuristic_offer_score(score_input, self.config, self.pricing_config)

    def _estimate(self, score_input: OfferScoreInput) -> OfferScore:
        band, _ = resolve_band(score_input, self.config, self.pricing_config)
        prompt = build_scoring_prompt(score_input, band, currency=self.pricing_config.currency)
        text = self.provider.complete(
            prompt,
            max_tokens=self.estimator_config.scoring_max_tokens,
            temperature=self.estimator_config.scoring_temperature,
            system_prompt=SCORING_SYSTEM_PROMPT,
        )
        return parse_estimated_score(extract_json_object(text))
