"""Dashboard view joining a cached score with its progress."""
from typing import Any, Dict

from ..models.schemas import Priority, ValidationProgress, ValidationScore, dump
from .analyzers import round_half_up

OVERALL_TARGET = 80
MARKET_TARGET = 85


def competitive_position(score: ValidationScore) -> Dict[str, Any]:
    story = score.categories["story"]
    return {
        "ranking": max(1, round_half_up(100 - score.overall_score)),
        "total_in_category": 100,
        "percentile": min(99, score.overall_score),
        "strengths_vs_competition": story.strengths[:2],
        "weaknesses_vs_competition": story.weaknesses[:2],
    }


def next_milestones(score: ValidationScore) -> list:
    return [
        {
            "title": f"Reach {OVERALL_TARGET}+ Overall Score",
            "description": "Improve weak categories to achieve strong validation score",
            "target_score": OVERALL_TARGET,
            "current_progress": round(score.overall_score / OVERALL_TARGET * 100, 1),
            "estimated_timeline": "2-3 weeks",
            "priority": Priority.HIGH.value,
        },
        {
            "title": "Complete Market Analysis",
            "description": "Finalize market research and competitive analysis",
            "target_score": MARKET_TARGET,
            "current_progress": round(score.categories["market"].score / MARKET_TARGET * 100, 1),
            "estimated_timeline": "1-2 weeks",
            "priority": Priority.MEDIUM.value,
        },
    ]


def build_dashboard(pitch_id: str, score: ValidationScore, progress: ValidationProgress) -> Dict[str, Any]:
    active = [r for r in score.recommendations if r.priority == Priority.HIGH.value][:3]
    return {
        "pitch": {"id": pitch_id},
        "currentScore": dump(score),
        "trends": [dump(point) for point in progress.score_trend],
        "activeRecommendations": [dump(r) for r in active],
        "competitivePosition": competitive_position(score),
        "nextMilestones": next_milestones(score),
    }
