"""Filtering of a cached score's recommendation list."""
from typing import List, Optional

from ..models.schemas import Recommendation


def filter_recommendations(
    recommendations: List[Recommendation],
    category: Optional[str] = None,
    priority: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Recommendation]:
    """Apply category, then priority, then limit. Order is preserved.

    A ``limit`` of 0 or None means no limit.
    """
    selected = list(recommendations)
    if category:
        selected = [r for r in selected if r.category == category]
    if priority:
        selected = [r for r in selected if r.priority == priority]
    if limit:
        selected = selected[:limit]
    return selected
