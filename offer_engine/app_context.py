from dataclasses import dataclass
from typing import Optional

from offer_engine.config_loader import AppConfig, EstimatorConfig
from offer_engine.llm.interfaces import EstimatorProvider
from offer_engine.llm.openai_service import OpenAIService
from offer_engine.pricing.service import PriceBandService
from offer_engine.scorer.service import OfferScoringService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Request handlers build this once from config and call
    ``pricing_service.generate`` on job creation and
    ``scoring_service.score`` on offer submission.
    """
    config: AppConfig
    pricing_service: PriceBandService
    scoring_service: OfferScoringService
    estimator: Optional[EstimatorProvider] = None

    @classmethod
    def build(cls, config: AppConfig, estimator: Optional[EstimatorProvider] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            estimator: Optional provider override (tests, alternative backends)

        Returns:
            Fully wired AppContext; the estimator is left out unless it is
            enabled and has a credential, so no outbound call is ever attempted
            in that case.
        """
        if estimator is None and config.estimator.is_active:
            estimator = cls._build_estimator(config.estimator)
        if not config.estimator.enabled:
            estimator = None

        pricing_service = PriceBandService(
            config=config.pricing,
            estimator_config=config.estimator,
            provider=estimator,
        )
        scoring_service = OfferScoringService(
            config=config.scorer,
            estimator_config=config.estimator,
            provider=estimator,
            pricing_config=config.pricing,
        )
        return cls(
            config=config,
            pricing_service=pricing_service,
            scoring_service=scoring_service,
            estimator=estimator,
        )

    @staticmethod
    def _build_estimator(estimator_config: EstimatorConfig) -> OpenAIService:
        """Build OpenAI service from estimator configuration."""
        return OpenAIService(
            api_key=estimator_config.api_key,
            base_url=estimator_config.base_url,
            model=estimator_config.model,
            timeout_seconds=estimator_config.timeout_seconds,
        )
