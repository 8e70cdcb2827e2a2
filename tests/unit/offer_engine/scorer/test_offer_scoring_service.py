"""
Unit tests for OfferScoringService estimator/fallback behavior.
"""
import json

import pytest
from pydantic import ValidationError

from offer_engine.config_loader import EstimatorConfig
from offer_engine.models import PriceBand
from offer_engine.scorer.service import OfferScoringService, parse_estimated_score
from tests.mocks.estimator_mocks import MockEstimatorProvider


def _service(provider=None, enabled=True):
    return OfferScoringService(
        estimator_config=EstimatorConfig(enabled=enabled, api_key="test-key"),
        provider=provider,
    )


class TestHeuristicOnly:

    def test_no_provider_uses_heuristic(self, make_score_input):
        result = _service().score(make_score_input())

        assert result.is_estimator_generated is False
        assert result.score == pytest.approx(0.95)

    def test_disabled_estimator_makes_no_call(self, make_score_input):
        provider = MockEstimatorProvider(response='{"score": 0.1}')
        result = _service(provider, enabled=False).score(make_score_input())

        assert provider.calls == []
        assert result.is_estimator_generated is False


class TestEstimatorPath:

    def test_estimator_score_and_reasoning(self, make_score_input):
        provider = MockEstimatorProvider(
            response='Sure. {"score": 0.82, "reasoning": "Fair price, fast ETA"} Let me know.'
        )
        result = _service(provider).score(make_score_input(offer_notes="AC minivan, bottled water"))

        assert result.is_estimator_generated is True
        assert result.score == pytest.approx(0.82)
        assert result.reasoning == "Fair price, fast ETA"
        assert result.components == {}

    def test_prompt_contents(self, make_score_input):
        provider = MockEstimatorProvider(response='{"score": 0.5}')
        _service(provider).score(make_score_input(
            offer_notes="AC minivan", job_budget_hint=1800, provider_rating="4.5", provider_verified=False,
        ))

        call = provider.calls[0]
        assert call['temperature'] == 0.2
        assert call['max_tokens'] == 400
        prompt = call['prompt']
        assert "Fair Price Range: 1394-2546 MAD" in prompt
        assert "- Price: 1970 MAD" in prompt
        assert "- ETA: 10 minutes" in prompt
        assert "- Notes: AC minivan" in prompt
        assert "- Budget Hint: 1800 MAD" in prompt
        assert "- Rating: 4.5/5.0 stars" in prompt
        assert "- Verified: No" in prompt
        assert "Price Fairness (40%)" in prompt

    def test_prompt_uses_substituted_band_when_degenerate(self, make_score_input):
        provider = MockEstimatorProvider(response='{"score": 0.5}')
        degenerate = PriceBand(min_amount=500, max_amount=500, recommended_amount=500, is_estimator_generated=False)
        _service(provider).score(make_score_input(price_band=degenerate))

        assert "Fair Price Range: 106-154 MAD" in provider.calls[0]['prompt']

    @pytest.mark.parametrize("raw,expected", [(1.7, 1.0), (-0.2, 0.0), (0, 0.0), (1, 1.0), ("0.6", 0.6)])
    def test_out_of_range_scores_are_clamped(self, make_score_input, raw, expected):
        provider = MockEstimatorProvider(response=json.dumps({"score": raw}))
        result = _service(provider).score(make_score_input())

        assert result.is_estimator_generated is True
        assert result.score == pytest.approx(expected)


class TestEstimatorFallback:

    @pytest.mark.parametrize("response", [
        "",
        "Great offer!",
        '{"reasoning": "no score"}',
        '{"score": "excellent"}',
        '{"score": true}',
        '{"score": NaN}',
        '{"score": null}',
    ])
    def test_bad_responses_fall_back(self, make_score_input, response):
        provider = MockEstimatorProvider(response=response)
        result = _service(provider).score(make_score_input())

        assert result.is_estimator_generated is False
        assert result.score == pytest.approx(0.95)

    def test_provider_error_falls_back(self, make_score_input):
        provider = MockEstimatorProvider(error=TimeoutError("timed out"))
        result = _service(provider).score(make_score_input(provider_rating=2.0, provider_verified=False))

        assert len(provider.calls) == 1
        assert result.is_estimator_generated is False
        assert result.score == pytest.approx(0.75)


class TestParseEstimatedScore:

    def test_missing_score_raises(self):
        with pytest.raises(ValidationError):
            parse_estimated_score({"reasoning": "n/a"})

    def test_blank_reasoning_dropped(self):
        result = parse_estimated_score({"score": 0.4, "reasoning": ""})
        assert result.reasoning is None
