"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
"""

import os
import pytest

from offer_engine.config_loader import EstimatorConfig, PricingConfig, ScorerConfig
from offer_engine.models import JobCategory, OfferScoreInput, PriceBand

_ESTIMATOR_ENV_VARS = (
    "ENABLE_AI_PRICING",
    "ESTIMATOR_API_KEY",
    "OPENAI_API_KEY",
    "ESTIMATOR_BASE_URL",
    "ESTIMATOR_MODEL",
)


@pytest.fixture(autouse=True)
def isolated_estimator_env(monkeypatch):
    """Keep real credentials in the developer's shell away from the tests."""
    for name in _ESTIMATOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def pricing_config():
    return PricingConfig()


@pytest.fixture
def scorer_config():
    return ScorerConfig()


@pytest.fixture
def active_estimator_config():
    return EstimatorConfig(enabled=True, api_key="test-key")


@pytest.fixture
def transport_band():
    return PriceBand(
        min_amount=1394,
        max_amount=2546,
        recommended_amount=1970,
        is_estimator_generated=False,
    )


@pytest.fixture
def make_score_input(transport_band):
    """Factory for OfferScoreInput with sensible defaults."""
    def _make(**overrides):
        values = dict(
            offer_price=1970,
            offer_eta_minutes=10,
            job_category=JobCategory.TRANSPORT,
            job_city="Casablanca",
            job_description="Airport transfer to Marrakech",
            price_band=transport_band,
            provider_rating=5.0,
            provider_verified=True,
        )
        values.update(overrides)
        return OfferScoreInput(**values)
    return _make
