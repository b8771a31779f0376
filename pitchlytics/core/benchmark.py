"""Benchmark analysis over a cached score's benchmark rows."""
from typing import Any, Dict, List, Optional

from ..models.schemas import Benchmark, dump
from .analyzers import round_half_up
from .errors import MissingRequiredField

RATING_BANDS = [
    (90, "Exceptional"),
    (75, "Strong"),
    (50, "Average"),
    (25, "Below Average"),
]
LOWEST_RATING = "Needs Improvement"


def competitive_rating(percentile: float) -> str:
    for floor, label in RATING_BANDS:
        if percentile >= floor:
            return label
    return LOWEST_RATING


def analyze_benchmarks(
    benchmarks: List[Benchmark],
    categories: Optional[List[str]],
    comparison_pool: Optional[str] = None,
) -> Dict[str, Any]:
    """Competitive position of a pitch for the requested categories.

    The overall percentile is averaged over every benchmark row of the
    pitch, not just the requested ones.

    Raises:
        MissingRequiredField: If ``categories`` is empty.
    """
    if not categories:
        raise MissingRequiredField("Pitch ID and categories are required")

    selected = [b for b in benchmarks if b.category in categories]
    mean_percentile = sum(b.percentile for b in benchmarks) / len(benchmarks) if benchmarks else 0

    top = bottom = None
    if selected:
        top = max(selected, key=lambda b: b.percentile)
        bottom = min(selected, key=lambda b: b.percentile)

    return {
        "benchmarks": [dump(b) for b in selected],
        "competitive_position": {
            "overall_percentile": round_half_up(mean_percentile),
            "rating": competitive_rating(mean_percentile),
            "comparison_pool": comparison_pool or "all",
            "strengths": [b.category for b in selected if b.your_score >= b.top_quartile],
            "improvements_needed": [b.category for b in selected if b.your_score < b.industry_average],
        },
        "market_insights": {
            "top_performing_category": dump(top) if top else None,
            "biggest_opportunity": dump(bottom) if bottom else None,
            "score_distribution": {
                "above_industry_average": sum(1 for b in selected if b.your_score >= b.industry_average),
                "in_top_quartile": sum(1 for b in selected if b.your_score >= b.top_quartile),
                "total_categories": len(selected),
            },
        },
    }
