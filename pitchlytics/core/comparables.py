"""Comparable-project filtering and aggregate insights."""
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..models.schemas import Comparable, dump
from .analyzers import round_half_up

DEFAULT_LIMIT = 10
DEFAULT_MIN_SIMILARITY = 70
# ROI (percent) above which a comparable counts as a success
SUCCESS_ROI = 150

COLUMNS = ["title", "genre", "year", "budget", "boxOffice", "roi", "relevance_score", "success_factors"]


def filter_comparables(
    comparables: List[Comparable],
    genre: Optional[str] = None,
    budget_range: Optional[Tuple[float, float]] = None,
    year_range: Optional[Tuple[int, int]] = None,
    min_similarity: Optional[int] = DEFAULT_MIN_SIMILARITY,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[Comparable]:
    """Genre, budget range, year range, similarity floor, then limit.

    Ranges are inclusive on both ends.
    """
    selected = list(comparables)
    if genre:
        selected = [c for c in selected if c.genre.lower() == genre.lower()]
    if budget_range:
        low, high = budget_range
        selected = [c for c in selected if low <= c.budget <= high]
    if year_range:
        low, high = year_range
        selected = [c for c in selected if low <= c.year <= high]
    if min_similarity:
        selected = [c for c in selected if c.relevance_score >= min_similarity]
    if limit:
        selected = selected[:limit]
    return selected


def comparables_insights(comparables: List[Comparable]) -> Dict[str, Any]:
    df = pd.DataFrame([dump(c) for c in comparables], columns=COLUMNS)
    total = len(df)
    if total == 0:
        return {
            "total_projects": 0,
            "average_roi": 0,
            "average_budget": 0,
            "average_box_office": 0,
            "success_rate": 0,
            "top_performer": None,
        }
    # first row wins on ties, matching a left-to-right max scan
    best = df["roi"].astype(float).idxmax()
    return {
        "total_projects": total,
        "average_roi": round_half_up(df["roi"].mean()),
        "average_budget": round_half_up(df["budget"].mean()),
        "average_box_office": round_half_up(df["boxOffice"].mean()),
        "success_rate": round_half_up((df["roi"] > SUCCESS_ROI).sum() / total * 100),
        "top_performer": dump(comparables[int(best)]),
    }
