"""Industry reference tables used by the scoring heuristics.

The figures are illustrative genre-level priors, not a tuned market model.
Lookups are keyed by lower-cased genre; unknown genres fall back to the
``DEFAULT_*`` entries.
"""
from typing import Dict, Any, List

from ..models.schemas import Category


# ---------- Category weights ----------
CATEGORY_WEIGHTS: Dict[str, float] = {
    Category.STORY.value: 0.25,
    Category.MARKET.value: 0.20,
    Category.FINANCE.value: 0.20,
    Category.TEAM.value: 0.20,
    Category.PRODUCTION.value: 0.15,
}

# Industry distribution per category: (average, top quartile)
INDUSTRY_BENCHMARKS: Dict[str, Dict[str, int]] = {
    Category.STORY.value: {"industry_average": 62, "top_quartile": 80},
    Category.MARKET.value: {"industry_average": 58, "top_quartile": 78},
    Category.FINANCE.value: {"industry_average": 60, "top_quartile": 80},
    Category.TEAM.value: {"industry_average": 55, "top_quartile": 75},
    Category.PRODUCTION.value: {"industry_average": 60, "top_quartile": 82},
}

REQUIRED_FIELDS: List[str] = ["title", "logline", "synopsis", "genre", "budget"]
OPTIONAL_FIELDS: List[str] = ["director", "producer", "cast", "target_audience", "release_strategy"]


# ---------- Market ----------
GENRE_TRENDS: Dict[str, Dict[str, Any]] = {
    "horror": {"trend_score": 85, "yoy_growth": 15, "average_roi": 320,
               "emerging_subgenres": ["elevated horror", "folk horror", "techno-horror"]},
    "action": {"trend_score": 75, "yoy_growth": 8, "average_roi": 280,
               "emerging_subgenres": ["female-led action", "eco-action", "cyberpunk action"]},
    "comedy": {"trend_score": 60, "yoy_growth": -5, "average_roi": 180,
               "emerging_subgenres": ["dark comedy", "workplace comedy", "meta-comedy"]},
    "drama": {"trend_score": 70, "yoy_growth": 3, "average_roi": 150,
              "emerging_subgenres": ["social drama", "climate drama", "tech drama"]},
}
DEFAULT_GENRE_TREND = {"trend_score": 50, "yoy_growth": 0, "average_roi": 120, "emerging_subgenres": []}

AUDIENCE_DEMAND: Dict[str, int] = {
    "horror": 80, "action": 85, "comedy": 65, "drama": 70,
    "thriller": 75, "romance": 60, "scifi": 70, "fantasy": 75,
}

SEASONAL_TIMING: Dict[str, Dict[str, Any]] = {
    "horror": {"window": ["September", "October"], "score": 90, "competing": 15, "holiday": True},
    "action": {"window": ["May-July", "November-December"], "score": 75, "competing": 25, "holiday": True},
    "comedy": {"window": ["March-May", "August-September"], "score": 60, "competing": 20, "holiday": False},
    "drama": {"window": ["October-December", "January-February"], "score": 80, "competing": 18, "holiday": False},
}
DEFAULT_SEASONAL_TIMING = {"window": ["Year-round"], "score": 50, "competing": 20, "holiday": False}

COMPETITION_LEVELS: Dict[str, int] = {
    "horror": 40, "action": 80, "comedy": 70, "drama": 60,
    "thriller": 50, "romance": 65, "scifi": 55, "fantasy": 60,
}

AUDIENCE_SEGMENTS: Dict[str, List[str]] = {
    "horror": ["18-34", "horror fans", "thrill seekers"],
    "comedy": ["18-54", "general audience", "date night"],
    "action": ["18-44", "male-skewing", "international"],
    "drama": ["25-64", "prestige audience", "awards-conscious"],
    "romance": ["18-54", "female-skewing", "date night"],
    "family": ["all ages", "families", "children 6-12"],
    "thriller": ["18-54", "suspense fans", "general audience"],
    "scifi": ["18-44", "genre fans", "tech-savvy"],
    "fantasy": ["12-34", "genre fans", "international"],
}


# ---------- Finance ----------
BUDGET_RANGES: Dict[str, Dict[str, float]] = {
    "horror": {"min": 500_000, "typical": 3_000_000, "max": 15_000_000},
    "comedy": {"min": 2_000_000, "typical": 15_000_000, "max": 50_000_000},
    "action": {"min": 10_000_000, "typical": 80_000_000, "max": 300_000_000},
    "drama": {"min": 1_000_000, "typical": 8_000_000, "max": 40_000_000},
    "thriller": {"min": 2_000_000, "typical": 12_000_000, "max": 60_000_000},
    "romance": {"min": 3_000_000, "typical": 20_000_000, "max": 80_000_000},
    "scifi": {"min": 5_000_000, "typical": 50_000_000, "max": 250_000_000},
    "fantasy": {"min": 8_000_000, "typical": 100_000_000, "max": 400_000_000},
}

GENRE_ROI: Dict[str, int] = {
    "horror": 320, "comedy": 180, "action": 280, "drama": 150,
    "thriller": 220, "romance": 190, "scifi": 250, "fantasy": 300,
}

INVESTOR_APPEAL: Dict[str, int] = {
    "horror": 80, "action": 70, "thriller": 75, "comedy": 60,
    "drama": 55, "romance": 50, "scifi": 65, "fantasy": 60,
}


# ---------- Comparables ----------
# Historical reference projects. Budgets and grosses in USD.
REFERENCE_PROJECTS: List[Dict[str, Any]] = [
    {"title": "It", "genre": "horror", "year": 2017, "budget": 35_000_000, "box_office": 701_800_000,
     "success_factors": ["Nostalgic source material", "Ensemble of young leads"]},
    {"title": "A Quiet Place", "genre": "horror", "year": 2018, "budget": 17_000_000, "box_office": 340_900_000,
     "success_factors": ["High-concept hook", "Contained production"]},
    {"title": "Hereditary", "genre": "horror", "year": 2018, "budget": 10_000_000, "box_office": 82_800_000,
     "success_factors": ["Festival buzz", "Elevated horror positioning"]},
    {"title": "Get Out", "genre": "horror", "year": 2017, "budget": 4_500_000, "box_office": 255_400_000,
     "success_factors": ["Social commentary", "Low-budget efficiency"]},
    {"title": "John Wick", "genre": "action", "year": 2014, "budget": 20_000_000, "box_office": 86_000_000,
     "success_factors": ["Distinct world-building", "Practical stunt work"]},
    {"title": "Mission: Impossible - Fallout", "genre": "action", "year": 2018, "budget": 178_000_000,
     "box_office": 791_700_000, "success_factors": ["Franchise loyalty", "Star-driven set pieces"]},
    {"title": "Nobody", "genre": "action", "year": 2021, "budget": 16_000_000, "box_office": 57_500_000,
     "success_factors": ["Against-type casting", "Tight runtime"]},
    {"title": "Knives Out", "genre": "comedy", "year": 2019, "budget": 40_000_000, "box_office": 311_900_000,
     "success_factors": ["Ensemble cast", "Genre blend"]},
    {"title": "Game Night", "genre": "comedy", "year": 2018, "budget": 37_000_000, "box_office": 117_700_000,
     "success_factors": ["Strong word of mouth", "Date-night appeal"]},
    {"title": "The Nice Guys", "genre": "comedy", "year": 2016, "budget": 50_000_000, "box_office": 62_800_000,
     "success_factors": ["Star chemistry", "Period styling"]},
    {"title": "Parasite", "genre": "drama", "year": 2019, "budget": 11_400_000, "box_office": 262_600_000,
     "success_factors": ["Awards campaign", "International crossover"]},
    {"title": "Nomadland", "genre": "drama", "year": 2020, "budget": 5_000_000, "box_office": 39_500_000,
     "success_factors": ["Festival premiere", "Authentic casting"]},
    {"title": "Minari", "genre": "drama", "year": 2020, "budget": 2_000_000, "box_office": 15_400_000,
     "success_factors": ["Personal storytelling", "Critical acclaim"]},
    {"title": "Gone Girl", "genre": "thriller", "year": 2014, "budget": 61_000_000, "box_office": 369_300_000,
     "success_factors": ["Bestselling source", "Twist-driven marketing"]},
    {"title": "Searching", "genre": "thriller", "year": 2018, "budget": 880_000, "box_office": 75_500_000,
     "success_factors": ["Screen-life format", "Micro budget"]},
    {"title": "Arrival", "genre": "scifi", "year": 2016, "budget": 47_000_000, "box_office": 203_400_000,
     "success_factors": ["Cerebral premise", "Awards recognition"]},
    {"title": "Ex Machina", "genre": "scifi", "year": 2014, "budget": 15_000_000, "box_office": 36_900_000,
     "success_factors": ["Contained cast", "Timely AI theme"]},
    {"title": "Crazy Rich Asians", "genre": "romance", "year": 2018, "budget": 30_000_000,
     "box_office": 238_500_000, "success_factors": ["Representation", "Glossy escapism"]},
]


def genre_key(genre) -> str:
    return (genre or "").strip().lower()
