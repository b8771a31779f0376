import pytest

from pitchlytics.core.realtime import parse_budget, quick_score


def test_short_title_scores_without_warnings():
    result = quick_score("p1", "title", "Nova")
    assert result.quick_score == 80
    assert result.warnings == []
    assert result.suggestions == ["Keep titles 1-3 words for maximum impact"]


def test_long_title_warns():
    result = quick_score("p1", "title", "The Last Light Of A Dying Star")
    assert result.quick_score == 60
    assert result.warnings == ["Title may be too long"]


def test_tiny_title_warns():
    assert quick_score("p1", "title", "It").warnings == ["Title may be too short"]


def test_brief_logline():
    result = quick_score("p1", "logline", "A hero must fight.")
    assert result.quick_score == 75
    assert result.warnings == ["Logline may be too brief"]


def test_synopsis_bands():
    text = " ".join(["The character begins a journey, however the protagonist finally wins."] * 20)
    result = quick_score("p1", "synopsis", text)
    # 200 words, transition words, repeated character terms
    assert result.quick_score == 95
    assert result.warnings == []


@pytest.mark.parametrize(
    "content,score,warnings",
    [
        ("$1,500,000", 80, []),
        ("50000", 60, ["Budget may be too low for production quality"]),
        ("250,000,000", 60, ["Budget may be too high for ROI"]),
        ("lots", 50, ["Budget could not be parsed as a number"]),
    ],
)
def test_budget_field(content, score, warnings):
    result = quick_score("p1", "budget", content)
    assert result.quick_score == score
    assert result.warnings == warnings


def test_numeric_budget_content_is_echoed_as_text():
    result = quick_score("p1", "budget", 1500000.0)
    assert result.content == "1500000"
    assert result.quick_score == 80


def test_other_fields_get_fixed_score():
    result = quick_score("p1", "genre", "horror")
    assert result.quick_score == 60
    assert result.suggestions == ["Continue developing this section"]


@pytest.mark.parametrize("field", ["title", "logline", "synopsis", "budget", "cast"])
@pytest.mark.parametrize("content", ["", None, "!!!", "x " * 700, -5, 1e12, "$$$"])
def test_quick_score_always_in_range(field, content):
    result = quick_score("p1", field, content)
    assert 0 <= result.quick_score <= 100
    assert result.suggestions


def test_thirty_word_logline_with_conflict_and_protagonist():
    logline = " ".join(["The protagonist must"] + ["word"] * 27)
    result = quick_score("p1", "logline", logline)
    assert result.quick_score == 100
    assert result.warnings == []
    assert result.suggestions


def test_parse_budget():
    assert parse_budget("$2,000,000") == 2_000_000
    assert parse_budget("two million") is None
