# models/schemas.py - Pitch validation Pydantic models
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any, Union
from datetime import datetime
from enum import Enum


class Category(str, Enum):
    STORY = "story"
    MARKET = "market"
    FINANCE = "finance"
    TEAM = "team"
    PRODUCTION = "production"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Level(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisDepth(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)


# Input Schemas
class PitchData(_Model):
    title: Optional[str] = None
    logline: Optional[str] = ""
    synopsis: Optional[str] = ""
    genre: Optional[str] = None
    budget: Optional[float] = None
    director: Optional[str] = None
    producer: Optional[str] = None
    cast: Optional[List[str]] = None
    script_pages: Optional[int] = None
    target_audience: Optional[str] = None
    release_strategy: Optional[str] = None

    @field_validator("logline", "synopsis", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class AnalysisOptions(_Model):
    depth: AnalysisDepth = AnalysisDepth.STANDARD
    include_market_data: bool = True
    include_comparables: bool = True
    include_predictions: bool = True


# Score Schemas
class ScoreFactor(_Model):
    name: str
    score: float
    weight: float
    impact: Level
    description: str = ""


class CategoryScore(_Model):
    score: int = Field(..., ge=0, le=100)
    weight: float
    confidence: int = Field(..., ge=0, le=100)
    factors: List[ScoreFactor] = []
    strengths: List[str] = []
    weaknesses: List[str] = []
    improvements: List[str] = []


class Recommendation(_Model):
    id: str
    category: Category
    priority: Priority
    title: str
    description: str
    estimated_impact: int = Field(..., alias="estimatedImpact")
    effort: Level
    timeline: str
    cost: int
    action_items: List[str] = Field(default_factory=list, alias="actionItems")


class Comparable(_Model):
    title: str
    genre: str
    year: int
    budget: float
    box_office: float = Field(..., alias="boxOffice")
    roi: float
    relevance_score: int = Field(..., ge=0, le=100)
    success_factors: List[str] = []


class Benchmark(_Model):
    category: Category
    your_score: int
    industry_average: int
    top_quartile: int
    percentile: int = Field(..., ge=1, le=99)
    comparison_pool: str = "all"
    data_freshness: str = "Last 30 days"


class PredictionScenario(_Model):
    scenario: str
    probability: int
    roi_range: List[int]


class SuccessPrediction(_Model):
    probability: int
    confidence: int
    key_factors: List[str] = Field(default_factory=list, alias="keyFactors")
    scenarios: List[PredictionScenario] = []
    time_horizon: str = Field("24 months", alias="timeHorizon")


class AIInsights(_Model):
    success_prediction: Optional[SuccessPrediction] = Field(None, alias="successPrediction")
    themes: List[str] = []
    tone: str = "balanced"
    target_audience: List[str] = Field(default_factory=list, alias="targetAudience")
    unique_selling_points: List[str] = Field(default_factory=list, alias="uniqueSellingPoints")
    potential_issues: List[str] = Field(default_factory=list, alias="potentialIssues")
    innovation_score: int = Field(0, alias="innovationScore")
    viral_potential: int = Field(0, alias="viralPotential")


class RiskFactor(_Model):
    type: str
    description: str
    impact: Level
    probability: int
    mitigation: str


class RiskAssessment(_Model):
    overall_risk: Level = Field(..., alias="overallRisk")
    risk_score: int = Field(..., alias="riskScore")
    risk_factors: List[RiskFactor] = Field(default_factory=list, alias="riskFactors")
    contingency_budget: int = Field(10, alias="contingencyBudget")


class MarketTiming(_Model):
    optimal_timing_score: int = Field(..., alias="optimalTimingScore")
    optimal_release_window: List[str] = Field(default_factory=list, alias="optimalReleaseWindow")
    competing_releases: int = Field(0, alias="competingReleases")
    holiday_alignment: bool = Field(False, alias="holidayAlignment")
    current_trends: List[str] = Field(default_factory=list, alias="currentTrends")
    emerging_themes: List[str] = Field(default_factory=list, alias="emergingThemes")


class ValidationScore(_Model):
    pitch_id: str = Field(..., alias="pitchId")
    overall_score: int = Field(..., ge=0, le=100, alias="overallScore")
    confidence: int = Field(..., ge=0, le=100)
    categories: Dict[str, CategoryScore]
    recommendations: List[Recommendation] = []
    comparables: List[Comparable] = []
    benchmarks: List[Benchmark] = []
    ai_insights: AIInsights = Field(default_factory=AIInsights, alias="aiInsights")
    market_timing: Optional[MarketTiming] = Field(None, alias="marketTiming")
    risk_assessment: Optional[RiskAssessment] = Field(None, alias="riskAssessment")
    generated_at: datetime = Field(..., alias="generatedAt")
    version: int = 1


# Progress Schemas
class TrendPoint(_Model):
    date: str
    overall_score: int = Field(..., alias="overallScore")
    category_snapshot: Dict[str, int] = Field(default_factory=dict, alias="categorySnapshot")


class ValidationProgress(_Model):
    pitch_id: str = Field(..., alias="pitchId")
    completeness: int = Field(..., ge=0, le=100)
    missing_fields: List[str] = Field(default_factory=list, alias="missingFields")
    recommended_fields: List[str] = Field(default_factory=list, alias="recommendedFields")
    score_trend: List[TrendPoint] = Field(default_factory=list, alias="scoreTrend")


class RealTimeValidation(_Model):
    pitch_id: str = Field(..., alias="pitchId")
    field: str
    content: str
    quick_score: int = Field(..., ge=0, le=100, alias="quickScore")
    suggestions: List[str] = []
    warnings: List[str] = []
    timestamp: datetime


# API Request Schemas
# Fields the engine requires are optional here so the handlers can answer
# with a 400 and a readable message instead of a generic 422.
class AnalyzeRequest(_Model):
    pitch_id: Optional[str] = Field(None, alias="pitchId")
    pitch_data: PitchData = Field(default_factory=PitchData, alias="pitchData")
    options: AnalysisOptions = Field(default_factory=AnalysisOptions)


class BenchmarkRequest(_Model):
    pitch_id: Optional[str] = Field(None, alias="pitchId")
    categories: Optional[List[str]] = None
    comparison_pool: Optional[str] = None


class RealTimeRequest(_Model):
    pitch_id: Optional[str] = Field(None, alias="pitchId")
    field: Optional[str] = None
    content: Optional[Union[str, float]] = None


class BatchAnalyzeRequest(_Model):
    pitches: Optional[List[Any]] = None


def dump(model: BaseModel) -> Dict[str, Any]:
    """Serialize a model with its wire (alias) field names."""
    return model.model_dump(mode="json", by_alias=True)
