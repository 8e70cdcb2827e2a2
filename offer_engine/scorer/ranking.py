#!/usr/bin/env python3
"""
Offer Ranking - Order competing offers by stored score for display.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import logging

from offer_engine.models import OfferScore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedOffer:
    rank: int
    offer_id: str
    score: OfferScore


def rank_offers(
    scored_offers: Iterable[Tuple[str, OfferScore]],
    min_score: float = 0.0,
    top_k: Optional[int] = None,
) -> List[RankedOffer]:
    """Rank (offer_id, score) pairs, best first.

    Ties keep submission order. Offers below ``min_score`` are dropped and at
    most ``top_k`` are returned when given.
    """
    pairs = list(scored_offers)
    kept = [p for p in pairs if p[1].score >= min_score]
    ordered = sorted(kept, key=lambda p: -p[1].score)
    if top_k is not None:
        ordered = ordered[:max(0, top_k)]

    logger.debug("Ranked %d offers -> %d shown", len(pairs), len(ordered))
    return [
        RankedOffer(rank=i, offer_id=offer_id, score=score)
        for i, (offer_id, score) in enumerate(ordered, start=1)
    ]
