import pytest

from pitchlytics.core.batch import COMMON_WEAKNESSES, batch_insights, run_batch
from pitchlytics.core.constraints import validate_batch
from pitchlytics.core.errors import MissingRequiredField

from conftest import HORROR_PITCH, MINIMAL_PITCH


@pytest.mark.parametrize("pitches", [None, [], "not a list"])
def test_empty_batch_is_rejected(pitches):
    with pytest.raises(MissingRequiredField) as exc:
        validate_batch(pitches)
    assert exc.value.message == "Pitches array is required"


def test_oversized_batch_is_rejected():
    with pytest.raises(MissingRequiredField) as exc:
        validate_batch([MINIMAL_PITCH] * 11)
    assert exc.value.message == "Maximum 10 pitches per batch"


@pytest.mark.asyncio
async def test_failures_do_not_fail_the_batch():
    outcome = await run_batch([
        HORROR_PITCH,
        {"title": "No Budget", "genre": "drama"},
        MINIMAL_PITCH,
        "not a pitch",
        {"title": "Bad Budget", "genre": "drama", "budget": "a lot"},
    ])
    assert len(outcome["results"]) == 2
    assert outcome["failed_count"] == 3
    assert outcome["failed_reasons"][0] == "Missing required fields: title, genre, and budget are required"
    insights = outcome["batch_insights"]
    assert insights["total_analyzed"] == 2
    assert insights["common_weaknesses"] == COMMON_WEAKNESSES


@pytest.mark.asyncio
async def test_batch_uses_basic_options():
    outcome = await run_batch([HORROR_PITCH])
    result = outcome["results"][0]
    assert result["comparables"] == []
    assert result["marketTiming"] is None
    assert result["aiInsights"]["successPrediction"] is None
    assert not [r for r in result["recommendations"] if r["id"].startswith("rec_opt_")]


class _Score:
    def __init__(self, overall):
        self.overall_score = overall


def test_batch_insights_distribution(monkeypatch):
    monkeypatch.setattr("pitchlytics.core.batch.dump", lambda s: {"overallScore": s.overall_score})
    insights = batch_insights([_Score(85), _Score(60), _Score(79), _Score(40), _Score(85)])
    assert insights["total_analyzed"] == 5
    assert insights["average_score"] == 70
    assert insights["score_distribution"] == {"excellent": 2, "good": 2, "needs_improvement": 1}
    assert insights["top_performer"] == {"overallScore": 85}


def test_batch_insights_empty():
    insights = batch_insights([])
    assert insights["total_analyzed"] == 0
    assert insights["average_score"] == 0
    assert insights["top_performer"] is None
