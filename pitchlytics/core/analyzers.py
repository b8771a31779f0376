# core/analyzers.py
"""
Per-category heuristics for the score computation engine.

Each ``*_factors`` function inspects only the pitch attributes it needs and
returns ``(name, score, weight)`` tuples, where ``weight`` is the factor's
percentage share of its category (the shares of one category sum to 100).

Categories:
  1. Story       - text length bands and narrative keyword presence
  2. Market      - genre-level demand, timing and competition priors
  3. Finance     - budget fit and ROI priors for the genre
  4. Team        - attachments (director, producer, cast)
  5. Production  - readiness signals derived from the pitch
"""
import math
import re
import zlib
from typing import List, Tuple, Optional

from ..models.schemas import PitchData
from . import catalog
from .catalog import genre_key

Factor = Tuple[str, float, int]


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, so 54.5 becomes 55."""
    # the 9-digit pre-round absorbs float noise such as 54.49999999999999
    return int(math.floor(round(value, 9) + 0.5))


def word_count(text: Optional[str]) -> int:
    return len((text or "").split())


def _stable_hash(text: str) -> int:
    # Must not vary between interpreter runs, so no builtin hash().
    return zlib.crc32(text.encode("utf-8"))


# ---------------------------------------------------------------------------
# Story
# ---------------------------------------------------------------------------

POWER_WORDS = ["dark", "blood", "love", "war", "last", "first", "final", "secret"]
CLICHES = [
    "chosen one", "save the world", "dark past", "mysterious stranger",
    "love triangle", "evil corporation", "zombie apocalypse", "time travel",
]
NOVELTY_WORDS = [
    "unprecedented", "never before", "first time", "revolutionary",
    "groundbreaking", "innovative", "original", "unique",
]
THEME_KEYWORDS = {
    "redemption": ["redeem", "forgive", "second chance", "atone"],
    "friendship": ["friend", "loyalty", "trust", "bond"],
    "family": ["family", "father", "mother", "brother", "sister"],
    "love": ["love", "romance", "heart", "passion"],
    "sacrifice": ["sacrifice", "give up", "pay the price"],
    "justice": ["justice", "fair", "moral"],
    "survival": ["survive", "death", "escape"],
    "power": ["power", "control", "dominate", "rule"],
    "identity": ["who am i", "identity", "become"],
    "freedom": ["freedom", "prison", "trapped"],
}


def title_quality(title: Optional[str]) -> float:
    if not title:
        return 0
    score = 50
    length = len(title)
    if 8 <= length <= 15:
        score += 20
    elif 6 <= length <= 20:
        score += 10
    if 1 <= word_count(title) <= 3:
        score += 15
    if not re.search(r"[\d!@#$%^&*(),.?\":{}|<>]", title):
        score += 10
    if any(word in title.lower() for word in POWER_WORDS):
        score += 5
    return clamp(score)


def logline_strength(logline: Optional[str]) -> float:
    if not logline:
        return 0
    text = logline.lower()
    score = 30
    words = word_count(logline)
    if 25 <= words <= 50:
        score += 25
    elif 15 <= words <= 60:
        score += 15
    if re.search(r"\b(a|an|the)\s+\w+", text):
        score += 15
    if re.search(r"\b(must|fights|struggles|battles|faces|confronts)\b", text):
        score += 15
    if re.search(r"\b(or|before|to save|to stop|to prevent)\b", text):
        score += 15
    return clamp(score)


def has_three_act_structure(synopsis: str) -> bool:
    indicators = [
        r"\b(begins|starts|opens|introduces)\b",
        r"\b(however|but|when|then|suddenly)\b",
        r"\b(finally|ultimately|in the end|climax)\b",
    ]
    return all(re.search(p, synopsis, re.IGNORECASE) for p in indicators)


def synopsis_clarity(synopsis: Optional[str]) -> float:
    if not synopsis:
        return 0
    score = 40
    words = word_count(synopsis)
    if 150 <= words <= 500:
        score += 20
    elif 100 <= words <= 600:
        score += 10
    sentences = [s for s in re.split(r"[.!?]+", synopsis) if s.strip()]
    if sentences and 10 <= words / len(sentences) <= 25:
        score += 15
    if has_three_act_structure(synopsis):
        score += 25
    return clamp(score)


def character_development(synopsis: Optional[str], script_pages: Optional[int]) -> float:
    if not synopsis:
        return 0
    score = 30
    if len(re.findall(r"\b(protagonist|hero|heroine|character|person)", synopsis, re.IGNORECASE)) >= 2:
        score += 20
    if re.search(r"\b(learns|grows|changes|discovers|realizes|transforms)\b", synopsis, re.IGNORECASE):
        score += 25
    if re.search(r"\b(friend|enemy|love|family|mentor|ally)", synopsis, re.IGNORECASE):
        score += 15
    if script_pages and script_pages >= 90:
        score += 10
    return clamp(score)


def plot_structure(synopsis: Optional[str], logline: Optional[str]) -> float:
    if not synopsis:
        return 0
    score = 35
    checks = [
        (r"\b(when|after|until|suddenly|then)\b", 15),        # inciting incident
        (r"\b(struggles|fights|pursues|investigates|searches)\b", 15),
        (r"\b(confronts|faces|battles|showdown|final)\b", 15),  # climax
        (r"\b(ultimately|finally|in the end|resolves)\b", 10),
    ]
    for pattern, bonus in checks:
        if re.search(pattern, synopsis, re.IGNORECASE):
            score += bonus
    synopsis_words = set(synopsis.lower().split())
    overlap = [w for w in (logline or "").lower().split() if len(w) > 3 and w in synopsis_words]
    if len(overlap) >= 3:
        score += 10
    return clamp(score)


def dialogue_quality(script_pages: Optional[int]) -> float:
    if not script_pages:
        return 50
    return clamp(script_pages / 120 * 100)


def originality(title: Optional[str], logline: Optional[str], synopsis: Optional[str]) -> float:
    text = " ".join([title or "", logline or "", synopsis or ""]).lower()
    score = 70
    score -= 10 * sum(1 for c in CLICHES if c in text)
    score += 5 * sum(1 for w in NOVELTY_WORDS if w in text)
    return clamp(score, 20, 100)


def story_factors(pitch: PitchData) -> List[Factor]:
    return [
        ("Title Quality", title_quality(pitch.title), 10),
        ("Logline Strength", logline_strength(pitch.logline), 20),
        ("Synopsis Clarity", synopsis_clarity(pitch.synopsis), 15),
        ("Character Development", character_development(pitch.synopsis, pitch.script_pages), 20),
        ("Plot Structure", plot_structure(pitch.synopsis, pitch.logline), 15),
        ("Dialogue Quality", dialogue_quality(pitch.script_pages), 10),
        ("Originality", originality(pitch.title, pitch.logline, pitch.synopsis), 10),
    ]


def extract_themes(synopsis: str) -> List[str]:
    text = (synopsis or "").lower()
    return [theme for theme, words in THEME_KEYWORDS.items() if any(w in text for w in words)]


def determine_tone(synopsis: str, genre: str) -> str:
    text = (synopsis or "").lower()
    if any(w in text for w in ("dark", "death", "blood")):
        return "dark"
    if "funny" in text or "comedy" in text or genre_key(genre) == "comedy":
        return "light"
    if any(w in text for w in ("struggle", "drama", "serious")):
        return "serious"
    if any(w in text for w in ("action", "fight", "battle")):
        return "action-packed"
    return "balanced"


def target_audience(genre: str, synopsis: str) -> List[str]:
    audience = list(catalog.AUDIENCE_SEGMENTS.get(genre_key(genre), ["18-54", "general audience"]))
    text = (synopsis or "").lower()
    if "family" in text or "children" in text:
        audience.append("families")
    if "violence" in text or "mature" in text:
        audience.append("mature audiences")
    return list(dict.fromkeys(audience))


def unique_selling_points(pitch: PitchData) -> List[str]:
    text = " ".join([pitch.title or "", pitch.logline or "", pitch.synopsis or ""]).lower()
    markers = [
        (("space", "alien"), "Unique sci-fi setting"),
        (("medieval", "kingdom"), "Period setting"),
        (("future", "dystopia"), "Futuristic world"),
        (("detective", "investigator"), "Detective protagonist"),
        (("superhero", "powers"), "Superhero elements"),
        (("robot", "android"), "AI/Robot characters"),
        (("time travel",), "Time travel concept"),
        (("parallel universe",), "Multiverse elements"),
        (("found footage",), "Found footage style"),
    ]
    usps = [label for words, label in markers if any(w in text for w in words)]
    return usps or ["Original concept"]


def potential_issues(synopsis: str, genre: str) -> List[str]:
    text = (synopsis or "").lower()
    g = genre_key(genre)
    issues = []
    if "violence" in text and g not in ("action", "horror", "thriller"):
        issues.append("Violence may not fit genre expectations")
    if "romance" in text and g in ("horror", "thriller"):
        issues.append("Romance subplot may conflict with genre tension")
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    if sentences and word_count(text) / len(sentences) > 30:
        issues.append("Synopsis may be too complex or dense")
    if not any(w in text for w in ("protagonist", "character", "hero")):
        issues.append("Unclear protagonist identification")
    if not any(w in text for w in ("conflict", "problem", "challenge")):
        issues.append("Central conflict may not be clear")
    return issues


# ---------------------------------------------------------------------------
# Market
# ---------------------------------------------------------------------------

def competitive_intensity(genre: str, budget: float) -> float:
    intensity = catalog.COMPETITION_LEVELS.get(genre_key(genre), 50)
    if budget > 50_000_000:
        intensity += 15
    elif budget < 5_000_000:
        intensity -= 10
    return clamp(intensity)


def theatrical_potential(genre: str, budget: float) -> float:
    g = genre_key(genre)
    potential = 50
    if g == "action":
        potential += 25
    elif g == "horror":
        potential += 15
    elif g == "drama":
        potential -= 10
    if budget > 20_000_000:
        potential += 20
    elif budget < 2_000_000:
        potential -= 15
    return clamp(potential)


def market_factors(pitch: PitchData) -> List[Factor]:
    g = genre_key(pitch.genre)
    budget = pitch.budget or 0
    trend = catalog.GENRE_TRENDS.get(g, catalog.DEFAULT_GENRE_TREND)
    timing = catalog.SEASONAL_TIMING.get(g, catalog.DEFAULT_SEASONAL_TIMING)
    return [
        ("Genre Trends", trend["trend_score"], 25),
        ("Audience Demand", catalog.AUDIENCE_DEMAND.get(g, 50), 25),
        ("Market Timing", timing["score"], 20),
        ("Competition Level", 100 - competitive_intensity(pitch.genre, budget), 15),
        ("Distribution Potential", theatrical_potential(pitch.genre, budget), 15),
    ]


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------

def budget_reasonableness(budget: float, genre: str) -> float:
    band = catalog.BUDGET_RANGES.get(genre_key(genre))
    if not band:
        return 50
    if budget < band["min"]:
        return 30
    if budget > band["max"]:
        return 40
    if band["typical"] * 0.5 <= budget <= band["typical"] * 2:
        return 90
    return 70


def roi_potential(budget: float, genre: str) -> float:
    roi = catalog.GENRE_ROI.get(genre_key(genre), 150)
    if budget < 5_000_000:
        roi *= 1.5
    elif budget > 100_000_000:
        roi *= 0.7
    return clamp(roi / 5)


def financing_viability(budget: float, genre: str) -> float:
    appeal = catalog.INVESTOR_APPEAL.get(genre_key(genre), 50)
    if budget < 5_000_000:
        appeal += 15
    elif budget > 50_000_000:
        appeal -= 10
    return clamp(appeal)


def finance_factors(pitch: PitchData) -> List[Factor]:
    g = genre_key(pitch.genre)
    budget = pitch.budget or 0
    band = catalog.BUDGET_RANGES.get(g)
    forecast_confidence = 75 if g in catalog.GENRE_ROI else 60
    breakeven_risk = 80 if band is None or budget <= band["max"] else 60
    return [
        ("Budget Reasonableness", budget_reasonableness(budget, pitch.genre), 20),
        ("ROI Potential", roi_potential(budget, pitch.genre), 30),
        ("Revenue Forecast", forecast_confidence, 20),
        ("Financing Viability", financing_viability(budget, pitch.genre), 15),
        ("Risk Assessment", breakeven_risk, 15),
    ]


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

def track_record(name: Optional[str], role: str) -> dict:
    """Deterministic experience/reputation for a named attachment."""
    if not name:
        return {"experience": 0, "reputation": 30}
    h = _stable_hash(name + role)
    return {"experience": 5 + h % 20, "reputation": 50 + h % 40}


def cast_strength(cast: Optional[List[str]]) -> float:
    if not cast:
        return 20
    return min(80, 30 + len(cast) * 8)


def team_factors(pitch: PitchData) -> List[Factor]:
    director = track_record(pitch.director, "director")
    producer = track_record(pitch.producer, "producer")
    star_power = cast_strength(pitch.cast)
    attached = sum([bool(pitch.director), bool(pitch.producer), bool(pitch.cast)])
    crew = min(80, 40 + attached * 12 + 10)
    avg_experience = (director["experience"] + producer["experience"]) / 2
    avg_reputation = (director["reputation"] + producer["reputation"] + star_power) / 3
    synergy = clamp((avg_experience * 2 + avg_reputation) / 3)
    return [
        ("Director Track Record", director["reputation"], 25),
        ("Producer Experience", producer["reputation"], 25),
        ("Cast Strength", star_power, 20),
        ("Crew Quality", crew, 15),
        ("Team Synergy", round(synergy, 1), 15),
    ]


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------

def production_factors(pitch: PitchData) -> List[Factor]:
    budget = pitch.budget or 0
    permits = 30 + (30 if pitch.script_pages else 0) + (20 if pitch.producer else 0)
    crew = 40 + (15 if pitch.director else 0) + (15 if pitch.producer else 0)
    equipment = 85 if budget >= 1_000_000 else 60
    schedule = 75 - (15 if budget > 100_000_000 else 0) - (0 if pitch.script_pages else 10)
    # 10% contingency measured against a 15% best practice
    contingency = round(0.10 / 0.15 * 100, 1)
    return [
        ("Location Readiness", 80, 15),
        ("Permit Status", clamp(permits), 20),
        ("Crew Availability", clamp(crew), 25),
        ("Equipment Access", equipment, 15),
        ("Schedule Feasibility", clamp(schedule), 15),
        ("Contingency Planning", contingency, 10),
    ]
