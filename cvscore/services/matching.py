from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

EXCELLENT_MIN = 80
GOOD_MIN = 60

EXCELLENT_MATCH = "Excellent Match"
GOOD_MATCH = "Good Match"
POOR_MATCH = "Poor Match"

COMPONENT_GOOD_MIN = 70
COMPONENT_FAIR_MIN = 50

_RECOMMENDATIONS = {
    EXCELLENT_MATCH: "This candidate is an excellent fit for the position and should be prioritized for interview.",
    GOOD_MATCH: "This candidate shows good potential and may be worth considering with additional evaluation.",
    POOR_MATCH: "This candidate may not be the best fit for this specific role, but could be suitable for other positions.",
}

_BADGE_VARIANTS = {
    EXCELLENT_MATCH: "default",
    GOOD_MATCH: "secondary",
    POOR_MATCH: "destructive",
}


def to_percent(score: Any) -> int:
    """Scale a 0.0-1.0 score to an integer percentage, rounding half up.

    Works on the decimal form of the value so 0.595 gives 60 even though
    0.595 * 100 is 59.49999... in binary floating point.
    """
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0
    try:
        scaled = Decimal(repr(score)) * 100
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        # nan / inf
        return 0


def categorize(percent: int) -> str:
    if percent >= EXCELLENT_MIN:
        return EXCELLENT_MATCH
    if percent >= GOOD_MIN:
        return GOOD_MATCH
    return POOR_MATCH


def rate_component(percent: int) -> str:
    if percent >= COMPONENT_GOOD_MIN:
        return "Good"
    if percent >= COMPONENT_FAIR_MIN:
        return "Fair"
    return "Poor"


def recommendation(label: str) -> str:
    return _RECOMMENDATIONS.get(label, _RECOMMENDATIONS[POOR_MATCH])


def badge_variant(label: str) -> str:
    return _BADGE_VARIANTS.get(label, _BADGE_VARIANTS[POOR_MATCH])
