"""Validation progress and score trend for a cached score."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.schemas import TrendPoint, ValidationProgress, ValidationScore
from .analyzers import round_half_up
from .catalog import OPTIONAL_FIELDS, REQUIRED_FIELDS

# (days ago, fraction of the current score)
TREND_STEPS = [(7, 0.8), (3, 0.9), (0, 1.0)]


def _snapshot(score: ValidationScore, fraction: float) -> dict:
    return {name: round_half_up(cat.score * fraction) for name, cat in score.categories.items()}


def build_progress(score: ValidationScore, now: Optional[datetime] = None) -> ValidationProgress:
    """Derive completeness, field hints and a synthesized trend.

    No score history is stored, so the trend is three points ramping up to
    the current score.
    """
    now = now or datetime.now(timezone.utc)
    current = score.overall_score
    trend = [
        TrendPoint(
            date=(now - timedelta(days=days)).date().isoformat(),
            overallScore=round_half_up(current * fraction),
            categorySnapshot=_snapshot(score, fraction),
        )
        for days, fraction in TREND_STEPS
    ]
    return ValidationProgress(
        pitchId=score.pitch_id,
        completeness=min(100, current + 10),
        missingFields=REQUIRED_FIELDS[3:] if current < 60 else [],
        recommendedFields=OPTIONAL_FIELDS[:3] if current < 80 else [],
        scoreTrend=trend,
    )
