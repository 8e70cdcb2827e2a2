#!/usr/bin/env python3
"""
Pricing Module - Fair price bands for new jobs.

Public API:
- PriceBandService: estimator-first band generation with heuristic fallback
- heuristic_price_band: deterministic category/city band
- structure_job_description, build_job_spec, price_band_from_job_spec: job spec helpers

- heuristics.py: category rules, city multipliers, surge
- job_spec.py: free-text hint extraction and band embedding
- service.py: PriceBandService orchestrator
"""

from offer_engine.pricing.heuristics import heuristic_price_band, surge_multiplier
from offer_engine.pricing.job_spec import (
    build_job_spec,
    hints_from_job_spec,
    price_band_from_job_spec,
    structure_job_description,
)
from offer_engine.pricing.service import PriceBandService

__all__ = [
    'PriceBandService',
    'heuristic_price_band',
    'surge_multiplier',
    'structure_job_description',
    'hints_from_job_spec',
    'build_job_spec',
    'price_band_from_job_spec',
]
