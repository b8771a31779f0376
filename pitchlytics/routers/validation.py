"""FastAPI router for pitch validation operations."""
import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from ..core.errors import MissingRequiredField
from ..core.service import ValidationService
from ..models.schemas import AnalyzeRequest, BatchAnalyzeRequest, BenchmarkRequest, RealTimeRequest, dump

router = APIRouter(prefix="/api/validation", tags=["validation"])


def get_service(request: Request) -> ValidationService:
    return request.app.state.service


def _int_param(name: str, value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        raise MissingRequiredField(f"Query parameter '{name}' must be a number")
    return int(number)


def _range(low_name: str, low: Optional[str], high_name: str, high: Optional[str]):
    low_value, high_value = _int_param(low_name, low), _int_param(high_name, high)
    if low_value is None or high_value is None:
        return None
    return low_value, high_value


def _score_envelope(score, analysis_time: int, freshness: str) -> Dict[str, Any]:
    return {
        "success": True,
        "data": dump(score),
        "analysisTime": analysis_time,
        "dataFreshness": freshness,
        "recommendationsCount": len(score.recommendations),
    }


@router.post("/analyze", responses={400: {"description": "Missing required fields"}})
async def analyze(payload: AnalyzeRequest, service: ValidationService = Depends(get_service)):
    """Run the full analysis and cache the result."""
    score, elapsed = await service.analyze(payload.pitch_data, payload.options, payload.pitch_id)
    return _score_envelope(score, elapsed, "Real-time")


@router.get("/score/{pitch_id}", responses={404: {"description": "No cached score"}})
async def get_score(pitch_id: str, service: ValidationService = Depends(get_service)):
    score = await service.get_score(pitch_id)
    return _score_envelope(score, 0, "Cached")


@router.put("/update/{pitch_id}")
async def update_score(
    pitch_id: str,
    changes: Optional[Dict[str, Any]] = Body(None),
    service: ValidationService = Depends(get_service),
):
    """Re-score a pitch from partial data, replacing the cached score."""
    score = await service.update(pitch_id, changes or {})
    return _score_envelope(score, 0, "Updated")


@router.get("/recommendations/{pitch_id}")
async def get_recommendations(
    pitch_id: str,
    category: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: ValidationService = Depends(get_service),
):
    data = await service.recommendations(pitch_id, category, priority, _int_param("limit", limit))
    return {"success": True, "data": data}


@router.get("/comparables/{pitch_id}")
async def get_comparables(
    pitch_id: str,
    genre: Optional[str] = Query(None),
    budget_min: Optional[str] = Query(None),
    budget_max: Optional[str] = Query(None),
    year_min: Optional[str] = Query(None),
    year_max: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    min_similarity: Optional[str] = Query(None),
    service: ValidationService = Depends(get_service),
):
    limit_value = _int_param("limit", limit)
    similarity = _int_param("min_similarity", min_similarity)
    data = await service.comparables(
        pitch_id,
        genre=genre,
        budget_range=_range("budget_min", budget_min, "budget_max", budget_max),
        year_range=_range("year_min", year_min, "year_max", year_max),
        limit=10 if limit_value is None else limit_value,
        min_similarity=70 if similarity is None else similarity,
    )
    return {"success": True, "data": data}


@router.post("/benchmark", responses={400: {"description": "Missing pitch id or categories"}})
async def benchmark(payload: BenchmarkRequest, service: ValidationService = Depends(get_service)):
    data = await service.benchmark(payload.pitch_id, payload.categories, payload.comparison_pool)
    return {"success": True, "data": data}


@router.post("/realtime")
async def realtime(payload: RealTimeRequest, service: ValidationService = Depends(get_service)):
    """Quick-score one field while the user types. Nothing is cached."""
    result = service.realtime(payload.pitch_id, payload.field, payload.content)
    return {"success": True, "data": dump(result)}


@router.get("/progress/{pitch_id}")
async def get_progress(pitch_id: str, service: ValidationService = Depends(get_service)):
    progress = await service.progress(pitch_id)
    return {"success": True, "data": dump(progress)}


@router.get("/dashboard/{pitch_id}")
async def get_dashboard(pitch_id: str, service: ValidationService = Depends(get_service)):
    data = await service.dashboard(pitch_id)
    return {"success": True, "data": data}


@router.post("/batch-analyze", responses={400: {"description": "Empty or oversized batch"}})
async def batch_analyze(
    payload: Optional[BatchAnalyzeRequest] = None,
    service: ValidationService = Depends(get_service),
):
    data = await service.batch_analyze(payload.pitches if payload else None)
    return {"success": True, "data": data}
