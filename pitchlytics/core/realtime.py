"""Per-keystroke quick scoring of a single pitch field.

Cheap pattern checks only; nothing here touches the cache.
"""
import re
from datetime import datetime, timezone
from typing import Optional, Union, List, Tuple

from ..models.schemas import RealTimeValidation
from .analyzers import clamp, word_count

BASELINE = 50
OTHER_FIELD_SCORE = 60

TIPS = {
    "title": "Keep titles 1-3 words for maximum impact",
    "logline": "Include protagonist, conflict, and stakes",
    "synopsis": "Follow three-act structure clearly",
    "budget": "Research industry standards for your genre",
}
DEFAULT_TIP = "Continue developing this section"

CONFLICT_PATTERN = re.compile(r"must|fights|struggles|battles")
PROTAGONIST_PATTERN = re.compile(r"protagonist|hero|heroine|character")
TRANSITION_PATTERN = re.compile(r"begins|however|finally")
CHARACTER_TERMS = re.compile(r"character|protagonist")
SYMBOLS = re.compile(r"[0-9!@#$%^&*]")


def _score_title(text: str) -> Tuple[int, List[str]]:
    score, warnings = BASELINE, []
    words = word_count(text)
    if words <= 3:
        score += 20
    if 8 <= len(text) <= 15:
        score += 15
    if not SYMBOLS.search(text):
        score += 10
    if words > 5:
        warnings.append("Title may be too long")
    if len(text) < 4:
        warnings.append("Title may be too short")
    return score, warnings


def _score_logline(text: str) -> Tuple[int, List[str]]:
    score, warnings = BASELINE, []
    words = word_count(text)
    lowered = text.lower()
    if 25 <= words <= 50:
        score += 25
    if CONFLICT_PATTERN.search(lowered):
        score += 15
    if PROTAGONIST_PATTERN.search(lowered):
        score += 10
    if words < 15:
        warnings.append("Logline may be too brief")
    if words > 60:
        warnings.append("Logline may be too verbose")
    return score, warnings


def _score_synopsis(text: str) -> Tuple[int, List[str]]:
    score, warnings = BASELINE, []
    words = word_count(text)
    lowered = text.lower()
    if 150 <= words <= 500:
        score += 20
    if TRANSITION_PATTERN.search(lowered):
        score += 15
    if len(CHARACTER_TERMS.findall(lowered)) >= 2:
        score += 10
    if words < 100:
        warnings.append("Synopsis may need more detail")
    if words > 600:
        warnings.append("Synopsis may be too detailed")
    return score, warnings


def parse_budget(text: str) -> Optional[float]:
    """Parse a typed budget such as ``$1,500,000``; None if not a number."""
    try:
        return float(text.replace("$", "").replace(",", "").strip())
    except ValueError:
        return None


def _score_budget(text: str) -> Tuple[int, List[str]]:
    score, warnings = BASELINE, []
    value = parse_budget(text)
    if value is None:
        warnings.append("Budget could not be parsed as a number")
        return score, warnings
    if 1_000_000 <= value <= 50_000_000:
        score += 20
    if value > 0:
        score += 10
    if value < 100_000:
        warnings.append("Budget may be too low for production quality")
    if value > 200_000_000:
        warnings.append("Budget may be too high for ROI")
    return score, warnings


SCORERS = {
    "title": _score_title,
    "logline": _score_logline,
    "synopsis": _score_synopsis,
    "budget": _score_budget,
}


def quick_score(
    pitch_id: str,
    field: str,
    content: Optional[Union[str, float]],
    now: Optional[datetime] = None,
) -> RealTimeValidation:
    """Score one field as the user types. Any content, even empty, scores in [0, 100]."""
    if content is None:
        text = ""
    elif isinstance(content, str):
        text = content
    else:
        text = str(int(content)) if float(content).is_integer() else str(content)
    scorer = SCORERS.get(field)
    if scorer is None:
        score, warnings = OTHER_FIELD_SCORE, []
    else:
        score, warnings = scorer(text)

    return RealTimeValidation(
        pitchId=pitch_id,
        field=field,
        content=text,
        quickScore=int(clamp(score)),
        suggestions=[TIPS.get(field, DEFAULT_TIP)],
        warnings=warnings,
        timestamp=now or datetime.now(timezone.utc),
    )
