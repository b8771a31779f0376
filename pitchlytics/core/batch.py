"""Bounded concurrent scoring of several pitches."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError

from ..models.schemas import AnalysisDepth, AnalysisOptions, PitchData, ValidationScore, dump
from .analyzers import round_half_up
from .errors import BatchPartialFailure, ValidationEngineError
from .scoring import compute_validation_score

logger = logging.getLogger(__name__)

BATCH_OPTIONS = AnalysisOptions(
    depth=AnalysisDepth.BASIC,
    include_market_data=False,
    include_comparables=False,
    include_predictions=False,
)

COMMON_WEAKNESSES = [
    "Story development needs attention",
    "Market positioning could be improved",
    "Financial projections need refinement",
]


def _score_entry(index: int, payload: Any) -> ValidationScore:
    if not isinstance(payload, dict):
        raise ValueError(f"Pitch at index {index} must be an object")
    pitch = PitchData.model_validate(payload)
    pitch_id = str(payload.get("pitchId") or payload.get("id") or f"batch_{index}")
    return compute_validation_score(pitch, BATCH_OPTIONS, pitch_id)


def _reason(exc: BaseException) -> str:
    if isinstance(exc, ValidationEngineError):
        return exc.message
    if isinstance(exc, ValidationError):
        return f"Invalid pitch payload: {exc.error_count()} validation error(s)"
    return str(exc) or type(exc).__name__


async def run_batch(pitches: List[Any]) -> Dict[str, Any]:
    """Score every entry concurrently; failures are reported, not raised."""
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(_score_entry, i, payload) for i, payload in enumerate(pitches)),
        return_exceptions=True,
    )

    results: List[ValidationScore] = []
    failures: List[BatchPartialFailure] = []
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, BaseException):
            failures.append(BatchPartialFailure(index=index, reason=_reason(outcome)))
        else:
            results.append(outcome)

    if failures:
        logger.warning(f"Batch finished with {len(failures)} failed entries out of {len(pitches)}")

    return {
        "results": [dump(s) for s in results],
        "failed_count": len(failures),
        "failed_reasons": [f.reason for f in failures],
        "batch_insights": batch_insights(results),
    }


def batch_insights(results: List[ValidationScore]) -> Dict[str, Any]:
    df = pd.DataFrame({"overall": [s.overall_score for s in results]}, dtype="int64")
    top: Optional[Dict[str, Any]] = None
    if not df.empty:
        # first highest scorer wins
        top = dump(results[int(df["overall"].idxmax())])
    return {
        "total_analyzed": len(df),
        "average_score": round_half_up(df["overall"].mean()) if not df.empty else 0,
        "score_distribution": {
            "excellent": int((df["overall"] >= 80).sum()),
            "good": int(((df["overall"] >= 60) & (df["overall"] < 80)).sum()),
            "needs_improvement": int((df["overall"] < 60).sum()),
        },
        "top_performer": top,
        "common_weaknesses": list(COMMON_WEAKNESSES),
    }
