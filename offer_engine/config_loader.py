import yaml
import os
from typing import List, Optional, Dict, Tuple
from pydantic import BaseModel, Field


class EstimatorConfig(BaseModel):
    """
    Configuration for the language-model estimator.

    The estimator is only used when it is enabled AND a credential is present;
    otherwise every price band and offer score comes from the heuristics.
    """
    enabled: bool = True
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # Any OpenAI-compatible endpoint
    model: str = "gpt-4o-mini"

    # Low temperatures favour consistent pricing over creative variation
    pricing_temperature: float = 0.3
    pricing_max_tokens: int = 500
    scoring_temperature: float = 0.2
    scoring_max_tokens: int = 400

    # Single attempt, bounded by this timeout, then fall back
    timeout_seconds: float = 15.0

    @property
    def is_active(self) -> bool:
        return bool(self.enabled and self.api_key)


class RateRange(BaseModel):
    """Base (min, max) rate pair for a category, in local currency."""
    min: float = 0.0
    max: float = 0.0


def _default_base_rates() -> Dict[str, RateRange]:
    return {
        "transport": RateRange(min=50, max=500),
        "tour": RateRange(min=300, max=2000),
        "service": RateRange(min=100, max=1500),
        "financing": RateRange(min=0, max=0),  # APR-based, not price-based
    }


def _default_city_multipliers() -> Dict[str, float]:
    # Casablanca is the baseline
    return {
        "casablanca": 1.0,
        "rabat": 0.95,
        "marrakech": 1.1,
        "tangier": 0.9,
        "fes": 0.85,
        "agadir": 1.05,
    }


class PricingConfig(BaseModel):
    """
    Heuristic price band calibration.

    Defaults are the marketplace's Morocco calibration; every value can be
    overridden from config.yaml.
    """
    currency: str = "MAD"
    base_rates: Dict[str, RateRange] = Field(default_factory=_default_base_rates)

    per_km_rate: float = 8.0
    per_passenger_rate: float = 150.0
    default_distance_km: float = 10.0
    default_passenger_count: int = 2

    transport_min_factor: float = 0.7
    transport_max_factor: float = 1.3
    tour_min_factor: float = 0.8
    tour_max_factor: float = 1.5

    city_multipliers: Dict[str, float] = Field(default_factory=_default_city_multipliers)
    city_aliases: Dict[str, str] = Field(default_factory=lambda: {"tanger": "tangier"})

    # Time-of-day surge is recorded in band factors; only applied when enabled
    surge_enabled: bool = False
    peak_surge: float = 1.20
    weekend_surge: float = 1.15


class DefaultBand(BaseModel):
    """Conservative band used when a job carries no usable band."""
    min_amount: float = 0.0
    max_amount: float = 10000.0
    recommended_amount: float = 5000.0


class ScorerConfig(BaseModel):
    """
    Heuristic offer scoring weights.

    Each term is pre-scaled to its maximum contribution so the sum stays
    within [0, 1].
    """
    price_weight: float = 0.40
    underpriced_score: float = 0.20
    overprice_slope: float = 0.5

    rating_weight: float = 0.25
    verified_bonus: float = 0.05

    # (max_eta_minutes, contribution), checked in order
    eta_steps: List[Tuple[float, float]] = Field(
        default_factory=lambda: [(15, 0.20), (30, 0.15), (60, 0.10)]
    )
    eta_floor: float = 0.05

    value_baseline: float = 0.05

    default_band: DefaultBand = Field(default_factory=DefaultBand)


class AppConfig(BaseModel):
    estimator: EstimatorConfig = Field(default_factory=EstimatorConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)


_FALSE_VALUES = {"false", "0", "no", "off"}


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another dir), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    estimator = data.setdefault('estimator', {}) or {}
    data['estimator'] = estimator

    # Allow env var to switch the estimator off entirely
    env_enabled = os.environ.get("ENABLE_AI_PRICING")
    if env_enabled is not None and env_enabled.strip():
        estimator['enabled'] = env_enabled.strip().lower() not in _FALSE_VALUES

    # Allow env var override for the credential
    env_api_key = os.environ.get("ESTIMATOR_API_KEY") or os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        estimator['api_key'] = env_api_key

    env_base_url = os.environ.get("ESTIMATOR_BASE_URL")
    if env_base_url:
        estimator['base_url'] = env_base_url

    env_model = os.environ.get("ESTIMATOR_MODEL")
    if env_model:
        estimator['model'] = env_model

    return AppConfig(**data)
