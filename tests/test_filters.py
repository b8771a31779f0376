import pytest

from pitchlytics.core.benchmark import analyze_benchmarks, competitive_rating
from pitchlytics.core.comparables import comparables_insights, filter_comparables
from pitchlytics.core.errors import MissingRequiredField
from pitchlytics.core.recommendations import filter_recommendations
from pitchlytics.models.schemas import Benchmark, Comparable, Recommendation


def _rec(id, category, priority):
    return Recommendation(
        id=id, category=category, priority=priority, title=id, description="",
        estimatedImpact=10, effort="low", timeline="1 week", cost=500,
    )


def _comp(title, genre, year, budget, box_office, relevance):
    return Comparable(
        title=title, genre=genre, year=year, budget=budget, boxOffice=box_office,
        roi=round(box_office / budget * 100, 1), relevance_score=relevance,
    )


RECS = [
    _rec("a", "story", "high"),
    _rec("b", "market", "medium"),
    _rec("c", "story", "medium"),
    _rec("d", "story", "low"),
]

COMPS = [
    _comp("One", "Horror", 2017, 10_000_000, 40_000_000, 90),   # roi 400
    _comp("Two", "horror", 2019, 20_000_000, 20_000_000, 80),   # roi 100
    _comp("Three", "drama", 2020, 5_000_000, 10_000_000, 75),   # roi 200
    _comp("Four", "horror", 2021, 30_000_000, 90_000_000, 60),  # roi 300
]


def test_recommendations_filtered_in_order():
    assert [r.id for r in filter_recommendations(RECS, category="story")] == ["a", "c", "d"]
    assert [r.id for r in filter_recommendations(RECS, category="story", priority="medium")] == ["c"]
    assert [r.id for r in filter_recommendations(RECS, limit=2)] == ["a", "b"]
    assert filter_recommendations(RECS) == RECS


def test_comparables_genre_is_case_insensitive():
    selected = filter_comparables(COMPS, genre="HORROR", min_similarity=0)
    assert [c.title for c in selected] == ["One", "Two", "Four"]


def test_comparables_ranges_are_inclusive():
    selected = filter_comparables(
        COMPS, budget_range=(10_000_000, 20_000_000), year_range=(2017, 2019), min_similarity=0
    )
    assert [c.title for c in selected] == ["One", "Two"]


def test_comparables_default_similarity_floor():
    assert [c.title for c in filter_comparables(COMPS)] == ["One", "Two", "Three"]
    assert [c.title for c in filter_comparables(COMPS, min_similarity=0, limit=1)] == ["One"]


def test_comparables_insights():
    insights = comparables_insights(COMPS)
    assert insights["total_projects"] == 4
    assert insights["average_roi"] == 250
    assert insights["average_budget"] == 16_250_000
    assert insights["average_box_office"] == 40_000_000
    assert insights["success_rate"] == 75
    assert insights["top_performer"]["title"] == "One"


def test_comparables_insights_empty():
    insights = comparables_insights([])
    assert insights == {
        "total_projects": 0,
        "average_roi": 0,
        "average_budget": 0,
        "average_box_office": 0,
        "success_rate": 0,
        "top_performer": None,
    }


def _bench(category, score, average, top, percentile):
    return Benchmark(
        category=category, your_score=score, industry_average=average,
        top_quartile=top, percentile=percentile,
    )


BENCHMARKS = [
    _bench("story", 85, 62, 80, 81),
    _bench("market", 50, 58, 78, 43),
    _bench("finance", 70, 60, 80, 64),
    _bench("team", 40, 55, 75, 36),
    _bench("production", 60, 60, 82, 50),
]


@pytest.mark.parametrize(
    "percentile,rating",
    [(95, "Exceptional"), (90, "Exceptional"), (75, "Strong"), (50, "Average"),
     (25, "Below Average"), (24.9, "Needs Improvement")],
)
def test_rating_bands(percentile, rating):
    assert competitive_rating(percentile) == rating


def test_benchmark_overall_percentile_uses_every_category():
    result = analyze_benchmarks(BENCHMARKS, ["story"])
    # mean of 81, 43, 64, 36, 50
    assert result["competitive_position"]["overall_percentile"] == 55
    assert result["competitive_position"]["rating"] == "Average"
    assert result["competitive_position"]["comparison_pool"] == "all"
    assert [b["category"] for b in result["benchmarks"]] == ["story"]


def test_benchmark_strengths_and_gaps():
    result = analyze_benchmarks(BENCHMARKS, ["story", "market", "team"], "indie")
    position = result["competitive_position"]
    assert position["strengths"] == ["story"]
    assert position["improvements_needed"] == ["market", "team"]
    assert position["comparison_pool"] == "indie"
    insights = result["market_insights"]
    assert insights["top_performing_category"]["category"] == "story"
    assert insights["biggest_opportunity"]["category"] == "team"
    assert insights["score_distribution"] == {
        "above_industry_average": 1,
        "in_top_quartile": 1,
        "total_categories": 3,
    }


def test_benchmark_without_matching_rows():
    result = analyze_benchmarks(BENCHMARKS, ["unknown"])
    assert result["benchmarks"] == []
    assert result["market_insights"]["top_performing_category"] is None
    assert result["market_insights"]["biggest_opportunity"] is None


def test_benchmark_requires_categories():
    with pytest.raises(MissingRequiredField):
        analyze_benchmarks(BENCHMARKS, [])


@pytest.mark.parametrize("category", ["story", "market"])
@pytest.mark.parametrize("priority", ["high", "medium", "low"])
def test_filtering_only_narrows(category, priority):
    by_priority = filter_recommendations(RECS, priority=priority)
    both = filter_recommendations(RECS, category=category, priority=priority)
    assert [r for r in by_priority if r in both] == both
    assert [r for r in RECS if r in by_priority] == by_priority
