"""
Unit tests for AppContext wiring and the module-level entry points.
"""
import pytest

from offer_engine import engine
from offer_engine.app_context import AppContext
from offer_engine.config_loader import AppConfig, EstimatorConfig
from offer_engine.llm.openai_service import OpenAIService
from offer_engine.models import JobCategory, OfferScoreInput
from tests.mocks.estimator_mocks import MockEstimatorProvider


class TestAppContextBuild:

    def test_no_credential_no_estimator(self):
        context = AppContext.build(AppConfig())

        assert context.estimator is None
        assert context.pricing_service.provider is None
        assert context.scoring_service.provider is None

    def test_active_estimator_builds_openai_service(self):
        config = AppConfig(estimator=EstimatorConfig(api_key="sk-test", timeout_seconds=3))
        context = AppContext.build(config)

        assert isinstance(context.estimator, OpenAIService)
        assert context.estimator.timeout_seconds == 3
        assert context.pricing_service.provider is context.estimator
        assert context.scoring_service.provider is context.estimator

    def test_disabled_flag_drops_even_injected_estimator(self):
        config = AppConfig(estimator=EstimatorConfig(enabled=False, api_key="sk-test"))
        provider = MockEstimatorProvider(response='{"score": 0.1}')
        context = AppContext.build(config, estimator=provider)

        assert context.estimator is None
        band = context.pricing_service.generate("transport", "Oujda", "Trip", distance_km=240)
        assert band.is_estimator_generated is False
        assert provider.calls == []

    def test_services_share_config(self):
        config = AppConfig()
        context = AppContext.build(config)

        assert context.pricing_service.config is config.pricing
        assert context.scoring_service.config is config.scorer
        assert context.scoring_service.pricing_config is config.pricing


class TestEntryPoints:

    @pytest.fixture
    def context(self):
        provider = MockEstimatorProvider(response='{"minAmount": 900, "maxAmount": 1500, "recommendedAmount": 1200}')
        return AppContext.build(AppConfig(estimator=EstimatorConfig(api_key="sk-test")), estimator=provider)

    def test_generate_price_band_with_context(self, context):
        band = engine.generate_price_band("transport", "Casablanca", "Airport run", context=context)

        assert band.is_estimator_generated is True
        assert band.recommended_amount == 1200

    def test_score_offer_falls_back_on_pricing_shaped_reply(self, context):
        band = engine.generate_price_band("transport", "Casablanca", "Airport run", context=context)
        score_input = OfferScoreInput(
            offer_price=1200,
            offer_eta_minutes=25,
            job_category=JobCategory.TRANSPORT,
            job_city="Casablanca",
            price_band=band,
            provider_rating=4.0,
        )
        result = engine.score_offer(score_input, context=context)

        # The scripted reply has no "score" field
        assert result.is_estimator_generated is False
        assert result.score == pytest.approx(0.40 + 0.20 + 0.0 + 0.15 + 0.05)

    def test_default_context_is_built_once(self, monkeypatch):
        calls = []

        def fake_load_config():
            calls.append(1)
            return AppConfig()

        monkeypatch.setattr(engine, "load_config", fake_load_config)
        engine.reset_default_context()
        try:
            first = engine.generate_price_band("service", "Rabat", "Painting")
            second = engine.generate_price_band("service", "Rabat", "Painting")
            assert first == second
            assert first.recommended_amount == 760
            assert calls == [1]
        finally:
            engine.reset_default_context()

    def test_explicit_context_never_builds_the_shared_one(self, monkeypatch, context):
        def fail_load_config():
            raise AssertionError("shared context should not be built")

        monkeypatch.setattr(engine, "load_config", fail_load_config)
        engine.reset_default_context()
        try:
            engine.generate_price_band("service", "Rabat", "Painting", context=context)
            assert engine._default_context is None
        finally:
            engine.reset_default_context()
