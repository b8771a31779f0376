import pytest

from pitchlytics.core import catalog
from pitchlytics.core.analyzers import round_half_up
from pitchlytics.core.errors import MissingRequiredField
from pitchlytics.core.scoring import (
    PRIORITY_ORDER,
    compute_validation_score,
    overall_score,
    percentile_for,
)
from pitchlytics.models.schemas import AnalysisOptions, CategoryScore, PitchData, dump

from conftest import NOW


def _score(pitch, **options):
    return compute_validation_score(pitch, AnalysisOptions(**options), "pitch_test", now=NOW)


def test_category_weights_sum_to_one():
    assert sum(catalog.CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)


def test_overall_is_weighted_sum_of_categories(horror_pitch):
    score = _score(horror_pitch)
    expected = round(sum(c.score * c.weight for c in score.categories.values()))
    assert score.overall_score == expected
    assert set(score.categories) == {"story", "market", "finance", "team", "production"}


def test_all_scores_within_bounds(horror_pitch, minimal_pitch):
    for pitch in (horror_pitch, minimal_pitch):
        score = _score(pitch, depth="comprehensive")
        assert 0 <= score.overall_score <= 100
        for category in score.categories.values():
            assert 0 <= category.score <= 100
            for factor in category.factors:
                assert 0 <= factor.score <= 100


def test_factor_shares_sum_to_hundred(horror_pitch):
    score = _score(horror_pitch)
    for category in score.categories.values():
        assert sum(f.weight for f in category.factors) == pytest.approx(100)


def test_missing_budget_is_rejected():
    pitch = PitchData(title="Nova", genre="drama")
    with pytest.raises(MissingRequiredField) as exc:
        compute_validation_score(pitch, AnalysisOptions(), "p1", now=NOW)
    assert exc.value.status_code == 400
    assert "budget" in exc.value.fields


def test_same_input_gives_same_score(horror_pitch):
    assert dump(_score(horror_pitch)) == dump(_score(horror_pitch))


def test_option_flags_drop_sections(horror_pitch):
    score = _score(
        horror_pitch,
        include_comparables=False,
        include_market_data=False,
        include_predictions=False,
    )
    assert score.comparables == []
    assert score.market_timing is None
    assert score.ai_insights.success_prediction is None


def test_options_enabled_fill_sections(horror_pitch):
    score = _score(horror_pitch)
    assert score.comparables
    assert score.market_timing is not None
    assert score.market_timing.optimal_release_window == ["September", "October"]
    assert score.ai_insights.success_prediction is not None


def test_basic_depth_skips_optimization_suggestions(minimal_pitch):
    basic = _score(minimal_pitch, depth="basic")
    standard = _score(minimal_pitch, depth="standard")
    assert not [r for r in basic.recommendations if r.id.startswith("rec_opt_")]
    assert [r for r in standard.recommendations if r.id.startswith("rec_opt_")]


def test_confidence_follows_depth(horror_pitch):
    # category confidences average 75
    assert _score(horror_pitch, depth="standard").confidence == 75
    assert _score(horror_pitch, depth="basic").confidence == 65
    assert _score(horror_pitch, depth="comprehensive").confidence == 80


def test_high_priority_only_below_industry_average(minimal_pitch, horror_pitch):
    for pitch in (minimal_pitch, horror_pitch):
        score = _score(pitch, depth="comprehensive")
        for rec in score.recommendations:
            if rec.priority == "high":
                average = catalog.INDUSTRY_BENCHMARKS[rec.category]["industry_average"]
                assert score.categories[rec.category].score < average


def test_recommendations_sorted_by_priority_then_impact(minimal_pitch):
    recs = _score(minimal_pitch, depth="comprehensive").recommendations
    keys = [(-PRIORITY_ORDER[r.priority], -r.estimated_impact) for r in recs]
    assert keys == sorted(keys)


def test_weak_story_gets_category_recommendation(minimal_pitch):
    score = _score(minimal_pitch)
    assert score.categories["story"].score < 70
    assert "rec_story" in [r.id for r in score.recommendations]


@pytest.mark.parametrize("value,expected", [(0, 1), (62, 50), (80, 75), (100, 99), (90, 87), (71, 63)])
def test_percentile_interpolation(value, expected):
    assert percentile_for(value, 62, 80) == expected


def test_benchmarks_cover_every_category(horror_pitch):
    benchmarks = _score(horror_pitch).benchmarks
    assert [b.category for b in benchmarks] == list(catalog.CATEGORY_WEIGHTS)
    for b in benchmarks:
        assert 1 <= b.percentile <= 99
        assert b.comparison_pool == "Similar horror projects in budget range"


def test_comparables_ranked_by_relevance(horror_pitch):
    comparables = _score(horror_pitch).comparables
    assert len(comparables) == 8
    relevance = [c.relevance_score for c in comparables]
    assert relevance == sorted(relevance, reverse=True)
    # same-genre projects rank first for a horror pitch
    assert comparables[0].genre == "horror"


def test_risk_assessment_tracks_average(horror_pitch):
    score = _score(horror_pitch)
    average = sum(c.score for c in score.categories.values()) / 5
    assert score.risk_assessment.risk_score == round_half_up(100 - average)
    assert score.risk_assessment.risk_factors


def test_serialized_score_uses_wire_names(horror_pitch):
    data = dump(_score(horror_pitch))
    assert {"pitchId", "overallScore", "aiInsights", "generatedAt", "version"} <= set(data)
    assert data["version"] == 1
    assert "estimatedImpact" in data["recommendations"][0] or data["recommendations"] == []
    assert "boxOffice" in data["comparables"][0]


@pytest.mark.parametrize("value,expected", [(54.5, 55), (2.5, 3), (0.5, 1), (54.49, 54), (99.5, 100)])
def test_halves_round_up(value, expected):
    assert round_half_up(value) == expected


def test_overall_score_rounds_half_point_up():
    scores = {"story": 62, "market": 50, "finance": 50, "team": 50, "production": 60}
    categories = {
        name: CategoryScore(score=value, weight=catalog.CATEGORY_WEIGHTS[name], confidence=75)
        for name, value in scores.items()
    }
    # weighted sum is exactly 54.5
    assert overall_score(categories) == 55
