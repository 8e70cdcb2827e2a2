#!/usr/bin/env python3
"""
Scoring Module - 0-1 ranking scores for provider offers.

Public API:
- OfferScoringService: estimator-first scoring with heuristic fallback
- heuristic_offer_score: deterministic weighted score
- rank_offers / RankedOffer: display ordering
- score_offer_signals, calculate_fit, calculate_compliance: multi-signal blend

- heuristics.py: price fairness, provider quality, ETA and baseline terms
- ranking.py: ordering and truncation of scored offers
- signals.py: weighted blend of normalized fit/ETA/price/reliability/compliance signals
- service.py: OfferScoringService orchestrator
"""

from offer_engine.scorer.heuristics import heuristic_offer_score
from offer_engine.scorer.ranking import RankedOffer, rank_offers
from offer_engine.scorer.service import OfferScoringService
from offer_engine.scorer.signals import OfferSignals, calculate_compliance, calculate_fit, score_offer_signals

__all__ = [
    'OfferScoringService',
    'heuristic_offer_score',
    'rank_offers',
    'RankedOffer',
    'OfferSignals',
    'score_offer_signals',
    'calculate_fit',
    'calculate_compliance',
]
