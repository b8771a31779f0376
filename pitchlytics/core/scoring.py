# core/scoring.py
"""
Score computation engine.

``compute_validation_score`` is a pure transform: pitch attributes and
analysis options in, a complete ``ValidationScore`` out. It reads no cache
and performs no I/O; the service layer decides what to store.

Pipeline:
  1. Per-category factor heuristics (see ``analyzers``)
  2. Weighted category scores and the overall score
  3. Derived views: recommendations, benchmarks, comparables,
     risk assessment, insights and market timing
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Callable

from ..models.schemas import (
    AIInsights,
    AnalysisDepth,
    AnalysisOptions,
    Benchmark,
    CategoryScore,
    Comparable,
    Level,
    MarketTiming,
    PitchData,
    PredictionScenario,
    Priority,
    Recommendation,
    RiskAssessment,
    RiskFactor,
    ScoreFactor,
    SuccessPrediction,
    ValidationScore,
)
from . import analyzers, catalog
from .analyzers import clamp, round_half_up
from .catalog import genre_key
from .constraints import validate_pitch
from .errors import ComputationFailure, ValidationEngineError

logger = logging.getLogger(__name__)

CATEGORY_ANALYZERS: Dict[str, Callable[[PitchData], List[analyzers.Factor]]] = {
    "story": analyzers.story_factors,
    "market": analyzers.market_factors,
    "finance": analyzers.finance_factors,
    "team": analyzers.team_factors,
    "production": analyzers.production_factors,
}

CATEGORY_CONFIDENCE = {"story": 85, "market": 75, "finance": 80, "team": 70, "production": 65}

DEPTH_CONFIDENCE_ADJUSTMENT = {
    AnalysisDepth.BASIC.value: -10,
    AnalysisDepth.STANDARD.value: 0,
    AnalysisDepth.COMPREHENSIVE.value: 5,
}

FACTOR_DESCRIPTIONS = {
    "Title Quality": "Memorability, marketability, and genre appropriateness of the title",
    "Logline Strength": "Clarity, hook, and commercial appeal of the one-line summary",
    "Synopsis Clarity": "Structure, pacing, and narrative coherence in the story outline",
    "Character Development": "Depth, arc, and relatability of main characters",
    "Plot Structure": "Three-act structure, pacing, and story progression",
    "Dialogue Quality": "Script maturity estimated from page count",
    "Originality": "Uniqueness and fresh perspective compared to existing content",
    "Genre Trends": "Current market demand and performance trends for the genre",
    "Audience Demand": "Target demographic interest and engagement potential",
    "Market Timing": "Optimal release windows and seasonal considerations",
    "Competition Level": "Competitive landscape and market saturation",
    "Distribution Potential": "Theatrical, streaming, and international distribution viability",
    "Budget Reasonableness": "Appropriateness of budget relative to genre standards",
    "ROI Potential": "Expected return on investment for the genre and budget tier",
    "Revenue Forecast": "Confidence in projected earnings across revenue streams",
    "Financing Viability": "Attractiveness to investors and funding accessibility",
    "Risk Assessment": "Break-even sensitivity to box office performance",
    "Director Track Record": "Experience, past performance, and industry reputation",
    "Producer Experience": "Production expertise, industry connections, and success rate",
    "Cast Strength": "Star power, fan base, and audience appeal of attached talent",
    "Crew Quality": "Technical expertise implied by the attached team",
    "Team Synergy": "Collaborative potential of the attached team",
    "Location Readiness": "Availability and suitability of filming locations",
    "Permit Status": "Required documentation and regulatory readiness",
    "Crew Availability": "Access to qualified personnel for key positions",
    "Equipment Access": "Technical resources within the budget",
    "Schedule Feasibility": "Realistic timeline and production planning",
    "Contingency Planning": "Contingency reserve relative to best practice",
}

# Recommendations below this score are raised as high priority, provided the
# category is also under its industry average.
HIGH_PRIORITY_CUTOFF = 50
RECOMMENDATION_THRESHOLD = 70
PRIORITY_ORDER = {Priority.HIGH.value: 3, Priority.MEDIUM.value: 2, Priority.LOW.value: 1}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def _impact_for_weight(weight: int) -> Level:
    if weight >= 20:
        return Level.HIGH
    if weight >= 15:
        return Level.MEDIUM
    return Level.LOW


def build_category_score(factors: List[analyzers.Factor], weight: float, confidence: int) -> CategoryScore:
    """Weight a category's factors into a ``CategoryScore`` with feedback."""
    weighted = sum(score * share / 100 for _, score, share in factors)
    strengths, weaknesses, improvements = [], [], []
    for name, score, _ in factors:
        if score < 60:
            weaknesses.append(f"{name} needs improvement ({round_half_up(score)}/100)")
            improvements.append(f"Enhance {name.lower()}")
        elif score > 80:
            strengths.append(f"Strong {name.lower()} ({round_half_up(score)}/100)")
    return CategoryScore(
        score=int(clamp(round_half_up(weighted))),
        weight=weight,
        confidence=confidence,
        factors=[
            ScoreFactor(
                name=name,
                score=round(clamp(score), 1),
                weight=share,
                impact=_impact_for_weight(share),
                description=FACTOR_DESCRIPTIONS.get(name, f"Assessment of {name.lower()}"),
            )
            for name, score, share in factors
        ],
        strengths=strengths,
        weaknesses=weaknesses,
        improvements=improvements,
    )


def overall_score(categories: Dict[str, CategoryScore]) -> int:
    """sum(score * weight) rounded half up, clamped to [0, 100]. Weights sum to 1.0."""
    total = sum(c.score * c.weight for c in categories.values())
    return int(clamp(round_half_up(total)))


def confidence_score(categories: Dict[str, CategoryScore], depth: str) -> int:
    if not categories:
        return 0
    mean = sum(c.confidence for c in categories.values()) / len(categories)
    return int(clamp(round_half_up(mean + DEPTH_CONFIDENCE_ADJUSTMENT.get(depth, 0))))


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------

def percentile_for(score: float, average: float, top_quartile: float) -> int:
    """Map a score onto the industry distribution, 1-99.

    Piecewise linear through (0, 1), (average, 50), (top_quartile, 75) and
    (100, 99).
    """
    points = [(0, 1), (average, 50), (top_quartile, 75), (100, 99)]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if score <= x1:
            if x1 == x0:
                return int(y1)
            return int(clamp(round_half_up(y0 + (score - x0) * (y1 - y0) / (x1 - x0)), 1, 99))
    return 99


def generate_benchmarks(categories: Dict[str, CategoryScore], genre: str) -> List[Benchmark]:
    benchmarks = []
    for name, category in categories.items():
        reference = catalog.INDUSTRY_BENCHMARKS[name]
        benchmarks.append(Benchmark(
            category=name,
            your_score=category.score,
            industry_average=reference["industry_average"],
            top_quartile=reference["top_quartile"],
            percentile=percentile_for(category.score, reference["industry_average"], reference["top_quartile"]),
            comparison_pool=f"Similar {genre_key(genre)} projects in budget range",
        ))
    return benchmarks


def _is_high_priority(category: str, score: float, cutoff: float) -> bool:
    return score < cutoff and score < catalog.INDUSTRY_BENCHMARKS[category]["industry_average"]


def generate_recommendations(categories: Dict[str, CategoryScore], depth: str) -> List[Recommendation]:
    recommendations: List[Recommendation] = []

    for name, category in categories.items():
        if category.score >= RECOMMENDATION_THRESHOLD:
            continue
        severe = category.score < 40
        detail = f" {', '.join(category.improvements)}." if category.improvements else ""
        recommendations.append(Recommendation(
            id=f"rec_{name}",
            category=name,
            priority=Priority.HIGH if _is_high_priority(name, category.score, HIGH_PRIORITY_CUTOFF) else Priority.MEDIUM,
            title=f"Improve {name} score",
            description=f"Your {name} category scored {category.score}/100.{detail}",
            estimatedImpact=min(30, 100 - category.score),
            effort=Level.HIGH if severe else Level.MEDIUM,
            timeline="4-6 weeks" if severe else "2-3 weeks",
            cost=5000 if severe else 1000,
            actionItems=list(category.improvements),
        ))

    if depth != AnalysisDepth.BASIC.value:
        per_category = 2 if depth == AnalysisDepth.COMPREHENSIVE.value else 1
        for name, category in categories.items():
            weakest = sorted(category.factors, key=lambda f: f.score)[:per_category]
            for factor in weakest:
                if factor.score >= RECOMMENDATION_THRESHOLD:
                    continue
                impact = min(25, round_half_up((RECOMMENDATION_THRESHOLD - factor.score) / 2))
                if impact > 20 and _is_high_priority(name, category.score, 100):
                    priority = Priority.HIGH
                elif impact > 10:
                    priority = Priority.MEDIUM
                else:
                    priority = Priority.LOW
                effort = _impact_for_weight(int(factor.weight))
                slug = factor.name.lower().replace(" ", "_")
                recommendations.append(Recommendation(
                    id=f"rec_opt_{name}_{slug}",
                    category=name,
                    priority=priority,
                    title=f"Strengthen {factor.name.lower()}",
                    description=(
                        f"{factor.name} scored {round_half_up(factor.score)}/100. "
                        f"Addressing it could improve your score by {impact} points."
                    ),
                    estimatedImpact=impact,
                    effort=effort,
                    timeline={"high": "4-6 weeks", "medium": "2-4 weeks", "low": "1 week"}[effort.value],
                    cost={"high": 10000, "medium": 3000, "low": 500}[effort.value],
                    actionItems=[f"Revise {factor.name.lower()}"],
                ))

    # stable sort keeps category order within equal priority/impact
    recommendations.sort(key=lambda r: (-PRIORITY_ORDER[r.priority], -r.estimated_impact))
    return recommendations


def find_comparables(pitch: PitchData, now: datetime, limit: int = 8) -> List[Comparable]:
    """Rank reference projects by similarity to the pitch."""
    g = genre_key(pitch.genre)
    budget = float(pitch.budget or 0)
    ranked = []
    for project in catalog.REFERENCE_PROJECTS:
        genre_points = 45 if project["genre"] == g else 10
        ratio = min(budget, project["budget"]) / max(budget, project["budget"]) if budget > 0 else 0
        budget_points = 35 * ratio ** 0.5
        age = max(0, now.year - project["year"])
        recency_points = 20 * max(0.0, 1 - age / 15)
        relevance = int(clamp(round_half_up(genre_points + budget_points + recency_points)))
        ranked.append(Comparable(
            title=project["title"],
            genre=project["genre"],
            year=project["year"],
            budget=project["budget"],
            boxOffice=project["box_office"],
            roi=round(project["box_office"] / project["budget"] * 100, 1),
            relevance_score=relevance,
            success_factors=list(project["success_factors"]),
        ))
    ranked.sort(key=lambda c: -c.relevance_score)
    return ranked[:limit]


def assess_risks(categories: Dict[str, CategoryScore]) -> RiskAssessment:
    average = sum(c.score for c in categories.values()) / len(categories)
    risk_score = round_half_up(100 - average)
    if risk_score < 30:
        overall = Level.LOW
    elif risk_score < 60:
        overall = Level.MEDIUM
    else:
        overall = Level.HIGH

    mitigations = {
        "story": "Script doctor pass and table read before packaging",
        "market": "Audience testing and targeted market research",
        "finance": "Detailed budget planning and contingency funds",
        "team": "Attach experienced key creatives before financing",
        "production": "Early line producing and permit planning",
    }
    factors = [
        RiskFactor(
            type=name,
            description=f"Weak {name} fundamentals ({category.score}/100)",
            impact=Level.HIGH if category.score < 45 else Level.MEDIUM,
            probability=100 - category.score,
            mitigation=mitigations[name],
        )
        for name, category in categories.items()
        if category.score < 60
    ]
    if not factors:
        factors.append(RiskFactor(
            type="market",
            description="General market volatility",
            impact=Level.LOW,
            probability=20,
            mitigation=mitigations["market"],
        ))
    return RiskAssessment(
        overallRisk=overall,
        riskScore=risk_score,
        riskFactors=factors,
        contingencyBudget=10 if overall != Level.HIGH else 15,
    )


def generate_insights(pitch: PitchData, categories: Dict[str, CategoryScore], overall: int,
                      include_predictions: bool) -> AIInsights:
    story = {f.name: f.score for f in categories["story"].factors}
    market = {f.name: f.score for f in categories["market"].factors}
    prediction = None
    if include_predictions:
        prediction = SuccessPrediction(
            probability=int(clamp(overall, 20, 95)),
            confidence=int(clamp(overall + 10)),
            keyFactors=["Genre market conditions", "Team track record", "Budget appropriateness",
                        "Market timing", "Story quality"],
            scenarios=[
                PredictionScenario(scenario="pessimistic", probability=25, roi_range=[50, 120]),
                PredictionScenario(scenario="realistic", probability=50, roi_range=[120, 250]),
                PredictionScenario(scenario="optimistic", probability=25, roi_range=[250, 500]),
            ],
        )
    return AIInsights(
        successPrediction=prediction,
        themes=analyzers.extract_themes(pitch.synopsis),
        tone=analyzers.determine_tone(pitch.synopsis, pitch.genre),
        targetAudience=analyzers.target_audience(pitch.genre, pitch.synopsis),
        uniqueSellingPoints=analyzers.unique_selling_points(pitch),
        potentialIssues=analyzers.potential_issues(pitch.synopsis, pitch.genre),
        innovationScore=round_half_up(story["Originality"]),
        viralPotential=round_half_up((story["Originality"] + market["Audience Demand"]) / 2),
    )


def analyze_market_timing(pitch: PitchData) -> MarketTiming:
    g = genre_key(pitch.genre)
    timing = catalog.SEASONAL_TIMING.get(g, catalog.DEFAULT_SEASONAL_TIMING)
    trend = catalog.GENRE_TRENDS.get(g, catalog.DEFAULT_GENRE_TREND)
    return MarketTiming(
        optimalTimingScore=timing["score"],
        optimalReleaseWindow=list(timing["window"]),
        competingReleases=timing["competing"],
        holidayAlignment=timing["holiday"],
        currentTrends=[f"{g} revival"] + list(trend["emerging_subgenres"]),
        emergingThemes=["Authentic storytelling", "Diverse perspectives", "Streaming optimization"],
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def compute_validation_score(
    pitch: PitchData,
    options: Optional[AnalysisOptions] = None,
    pitch_id: str = "",
    now: Optional[datetime] = None,
) -> ValidationScore:
    """Score a pitch.

    Args:
        pitch: Raw pitch attributes.
        options: Analysis options; defaults apply when omitted.
        pitch_id: Identifier stamped on the result.
        now: Clock override for ``generatedAt`` and comparable recency.

    Returns:
        A complete ``ValidationScore``.

    Raises:
        MissingRequiredField: If title, genre or budget is absent.
        ComputationFailure: If any heuristic fails.
    """
    options = options or AnalysisOptions()
    validate_pitch(pitch)
    now = now or datetime.now(timezone.utc)

    try:
        categories = {
            name: build_category_score(
                analyze(pitch), catalog.CATEGORY_WEIGHTS[name], CATEGORY_CONFIDENCE[name]
            )
            for name, analyze in CATEGORY_ANALYZERS.items()
        }
        overall = overall_score(categories)
        return ValidationScore(
            pitchId=pitch_id,
            overallScore=overall,
            confidence=confidence_score(categories, options.depth),
            categories=categories,
            recommendations=generate_recommendations(categories, options.depth),
            comparables=find_comparables(pitch, now) if options.include_comparables else [],
            benchmarks=generate_benchmarks(categories, pitch.genre),
            aiInsights=generate_insights(pitch, categories, overall, options.include_predictions),
            marketTiming=analyze_market_timing(pitch) if options.include_market_data else None,
            riskAssessment=assess_risks(categories),
            generatedAt=now,
        )
    except ValidationEngineError:
        raise
    except Exception as exc:
        logger.error(f"Score computation failed for pitch '{pitch_id}': {exc}")
        raise ComputationFailure(f"Validation analysis failed: {exc}") from exc
