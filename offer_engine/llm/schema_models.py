"""
Pydantic models for the JSON objects the estimator answers with.

- EstimatedBand: price band reply (``minAmount``/``maxAmount``/``recommendedAmount``,
  legacy ``*MAD`` keys accepted)
- EstimatedScore: offer score reply (``score`` plus optional ``reasoning``)

Amounts must be finite, non-negative numbers and are rounded half-up to whole
currency units before the ordering check. Booleans are rejected rather than
read as 0/1.
"""
from typing import Annotated, Any, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, model_validator

from offer_engine.models import round_half_up


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    return value


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


Amount = Annotated[float, BeforeValidator(_reject_bool), Field(ge=0, allow_inf_nan=False)]
Reasoning = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


class EstimatedBand(BaseModel):
    """Fair price range proposed by the estimator."""

    min_amount: Amount = Field(validation_alias=AliasChoices('minAmount', 'minMAD'))
    max_amount: Amount = Field(validation_alias=AliasChoices('maxAmount', 'maxMAD'))
    recommended_amount: Amount = Field(validation_alias=AliasChoices('recommendedAmount', 'recommendedMAD'))
    reasoning: Reasoning = None

    @model_validator(mode='after')
    def _round_and_order(self) -> 'EstimatedBand':
        self.min_amount = round_half_up(self.min_amount)
        self.max_amount = round_half_up(self.max_amount)
        self.recommended_amount = round_half_up(self.recommended_amount)
        if not self.min_amount <= self.recommended_amount <= self.max_amount:
            raise ValueError(
                f"band out of order: min={self.min_amount} "
                f"recommended={self.recommended_amount} max={self.max_amount}"
            )
        return self


class EstimatedScore(BaseModel):
    """Offer score proposed by the estimator; clamping happens in the scorer."""

    score: Annotated[float, BeforeValidator(_reject_bool), Field(allow_inf_nan=False)]
    reasoning: Reasoning = None
