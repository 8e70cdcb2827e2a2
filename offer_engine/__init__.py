"""Offer Engine - fair price bands for jobs and ranking scores for offers."""
from offer_engine.engine import generate_price_band, score_offer
from offer_engine.models import JobCategory, OfferScore, OfferScoreInput, PriceBand

__all__ = [
    'generate_price_band',
    'score_offer',
    'JobCategory',
    'PriceBand',
    'OfferScoreInput',
    'OfferScore',
]
