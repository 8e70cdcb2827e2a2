import argparse
import json
import logging
import sys
from dataclasses import asdict

from offer_engine.app_context import AppContext
from offer_engine.config_loader import load_config
from offer_engine.models import JobCategory, OfferScoreInput, PriceBand
from offer_engine.pricing import structure_job_description

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_price(args, context: AppContext) -> dict:
    """Price a job; missing distance/passenger hints are read from the description."""
    hints = structure_job_description(args.description, args.category)
    distance_km = args.km if args.km is not None else hints.get('km')
    passenger_count = args.pax if args.pax is not None else hints.get('pax')

    band = context.pricing_service.generate(
        args.category,
        args.city,
        args.description,
        distance_km=distance_km,
        passenger_count=passenger_count,
        timestamp=args.time,
    )
    result = band.to_spec_dict()
    result['factors'] = band.factors
    result['hints'] = {k: v for k, v in hints.items() if k != 'description'}
    return result


def run_score(args, context: AppContext) -> dict:
    band = PriceBand(
        min_amount=args.band_min,
        max_amount=args.band_max,
        recommended_amount=args.band_recommended,
        is_estimator_generated=False,
    )
    score_input = OfferScoreInput(
        offer_price=args.price,
        offer_eta_minutes=args.eta,
        offer_notes=args.notes,
        job_category=args.category,
        job_city=args.city,
        job_description=args.description,
        job_budget_hint=args.budget_hint,
        provider_rating=args.rating,
        provider_verified=args.verified,
        price_band=band,
    )
    return asdict(context.scoring_service.score(score_input))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Offer Engine - price bands and offer scores")
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config.yaml')
    parser.add_argument('--no-estimator', action='store_true',
                        help='Force heuristic pricing/scoring (no outbound calls)')
    parser.add_argument('--verbose', action='store_true')
    categories = [c.value for c in JobCategory]
    sub = parser.add_subparsers(dest='command', required=True)

    price = sub.add_parser('price', help='Generate a price band for a job')
    price.add_argument('category', choices=categories)
    price.add_argument('city')
    price.add_argument('description')
    price.add_argument('--km', type=float, default=None, help='Trip distance in km')
    price.add_argument('--pax', type=int, default=None, help='Passenger count')
    price.add_argument('--time', type=str, default=None, help='ISO-8601 job time')

    score = sub.add_parser('score', help='Score an offer against a price band')
    score.add_argument('category', choices=categories)
    score.add_argument('city')
    score.add_argument('--description', default='')
    score.add_argument('--price', type=float, required=True)
    score.add_argument('--eta', type=float, required=True, help='ETA in minutes')
    score.add_argument('--notes', default=None)
    score.add_argument('--budget-hint', type=float, default=None)
    score.add_argument('--rating', type=float, default=0.0)
    score.add_argument('--verified', action='store_true')
    score.add_argument('--band-min', type=float, required=True)
    score.add_argument('--band-max', type=float, required=True)
    score.add_argument('--band-recommended', type=float, required=True)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = load_config(args.config)
    if args.no_estimator:
        config.estimator.enabled = False
    context = AppContext.build(config)

    try:
        if args.command == 'price':
            result = run_price(args, context)
        else:
            result = run_score(args, context)
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 2

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
