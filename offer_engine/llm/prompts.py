from typing import Optional

PRICING_SYSTEM_PROMPT = "You are a Morocco marketplace pricing expert. You answer with a single JSON object."

SCORING_SYSTEM_PROMPT = "You are an expert at scoring service provider offers in Morocco's marketplace. You answer with a single JSON object."

PRICING_PROMPT_TEMPLATE = """Analyze this service request and provide a fair price range in {currency}.

**Request Details:**
- Category: {category}
- City: {city}
- Description: {description}
{hints}
**Context:**
- Casablanca is the economic center (higher prices)
- Tourism cities like Marrakech command premium rates
- Transport: typically 6-10 {currency}/km + base fee
- Tours: typically 100-300 {currency} per person depending on length
- Services: typically 50-500 {currency} per hour depending on skill

**Task:**
Provide a realistic price range for this service. Consider:
1. Local market rates
2. City cost of living
3. Service complexity
4. Current demand patterns

**Response Format (JSON only):**
{{
  "minAmount": <number>,
  "maxAmount": <number>,
  "recommendedAmount": <number>,
  "reasoning": "<brief explanation>"
}}"""

SCORING_PROMPT_TEMPLATE = """**Job Request:**
- Category: {category}
- City: {city}
- Description: {description}
- Budget Hint: {budget_hint}
- Fair Price Range: {band_min}-{band_max} {currency} (recommended {band_recommended})

**Provider Offer:**
- Price: {price} {currency}
- ETA: {eta} minutes
- Notes: {notes}

**Provider Profile:**
- Rating: {rating}/5.0 stars
- Verified: {verified}

**Scoring Criteria:**
1. **Price Fairness (40%)**: Is price within reasonable range?
2. **Provider Quality (30%)**: Rating and verification status
3. **Response Time (20%)**: ETA competitiveness
4. **Value Proposition (10%)**: Notes and overall fit

**Task:**
Score this offer from 0.0 (terrible) to 1.0 (excellent). Consider:
- Overpriced offers (above the range) should score lower
- Underpriced offers (below the range) might indicate quality concerns
- Verified providers with high ratings should score higher
- Fast ETA is valued but shouldn't dominate the score

**Response Format (JSON only):**
{{
  "score": <number between 0.0 and 1.0>,
  "reasoning": "<brief explanation>"
}}"""


def _fmt_amount(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def build_pricing_prompt(
    category: str,
    city: str,
    description: str,
    currency: str = "MAD",
    distance_km: Optional[float] = None,
    passenger_count: Optional[int] = None,
    timestamp: Optional[str] = None,
) -> str:
    hints = []
    if distance_km:
        hints.append(f"- Distance: {_fmt_amount(distance_km)} km")
    if passenger_count:
        hints.append(f"- Passengers: {passenger_count}")
    if timestamp:
        hints.append(f"- Time: {timestamp}")
    hint_block = "".join(h + "\n" for h in hints)

    return PRICING_PROMPT_TEMPLATE.format(
        currency=currency,
        category=category,
        city=city,
        description=description or "Not specified",
        hints=hint_block,
    )


def build_scoring_prompt(score_input, band, currency: str = "MAD") -> str:
    budget_hint = (
        f"{_fmt_amount(score_input.job_budget_hint)} {currency}"
        if score_input.job_budget_hint else "Not specified"
    )
    return SCORING_PROMPT_TEMPLATE.format(
        category=score_input.job_category.value,
        city=score_input.job_city,
        description=score_input.job_description or "Not specified",
        budget_hint=budget_hint,
        band_min=_fmt_amount(band.min_amount),
        band_max=_fmt_amount(band.max_amount),
        band_recommended=_fmt_amount(band.recommended_amount),
        currency=currency,
        price=_fmt_amount(score_input.offer_price),
        eta=_fmt_amount(score_input.offer_eta_minutes),
        notes=score_input.offer_notes or "None",
        rating=f"{score_input.provider_rating:.1f}",
        verified="Yes" if score_input.provider_verified else "No",
    )
