# core/service.py
"""
Validation service: the single entry point the HTTP layer talks to.

Owns the injected ``ScoreCache``. Compute paths (analyze, update, batch)
run the engine; read paths only ever read the cache and raise
``ScoreNotFound`` on a miss.
"""
import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from ..models.schemas import (
    AnalysisOptions,
    PitchData,
    RealTimeValidation,
    ValidationProgress,
    ValidationScore,
    dump,
)
from ..utils.logging_utils import ContextAdapter
from .batch import run_batch
from .benchmark import analyze_benchmarks
from .cache import ScoreCache
from .comparables import DEFAULT_LIMIT, DEFAULT_MIN_SIMILARITY, comparables_insights, filter_comparables
from .constraints import validate_batch, validate_pitch
from .dashboard import build_dashboard
from .errors import MissingRequiredField, NotFound, ScoreNotFound, ValidationEngineError
from .progress import build_progress
from .realtime import quick_score
from .recommendations import filter_recommendations
from .scoring import compute_validation_score

log = ContextAdapter(logging.getLogger(__name__))

UPDATE_DEFAULTS = {"title": "Updated Pitch", "genre": "drama", "budget": 1_000_000}


def new_pitch_id() -> str:
    return f"pitch_{uuid.uuid4().hex[:12]}"


class ValidationService:
    def __init__(self, cache: ScoreCache, ttl_seconds: int = 3600, max_batch: int = 10):
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.max_batch = max_batch
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    # ---------- helpers ----------

    @asynccontextmanager
    async def _pitch_lock(self, pitch_id: str):
        """Hold the pitch's lock. The entry is dropped once no task holds or awaits it."""
        lock = self._locks.setdefault(pitch_id, asyncio.Lock())
        self._lock_users[pitch_id] = self._lock_users.get(pitch_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[pitch_id] -= 1
            if not self._lock_users[pitch_id]:
                del self._lock_users[pitch_id]
                del self._locks[pitch_id]

    async def _compute(self, pitch: PitchData, options: AnalysisOptions, pitch_id: str) -> ValidationScore:
        return await asyncio.to_thread(compute_validation_score, pitch, options, pitch_id)

    async def _require_score(self, pitch_id: str) -> ValidationScore:
        score = await self.cache.get(pitch_id)
        if score is None:
            raise ScoreNotFound(pitch_id)
        return score

    # ---------- compute paths ----------

    async def analyze(
        self,
        pitch: PitchData,
        options: Optional[AnalysisOptions] = None,
        pitch_id: Optional[str] = None,
    ) -> Tuple[ValidationScore, int]:
        """Score a pitch and cache it. Returns the score and elapsed ms."""
        options = options or AnalysisOptions()
        validate_pitch(pitch)
        pitch_id = pitch_id or new_pitch_id()
        ctx = log.bind(pitchId=pitch_id, operation="analyze")
        ctx.info(f"Starting analysis of '{pitch.title}' ({pitch.genre}, depth={options.depth})")

        started = time.perf_counter()
        try:
            score = await self._compute(pitch, options, pitch_id)
        except ValidationEngineError as exc:
            ctx.error(f"Analysis failed: {exc.message}", extra={"elapsed_ms": _elapsed(started)})
            raise
        await self.cache.set(pitch_id, score, self.ttl_seconds)
        elapsed = _elapsed(started)
        ctx.info(
            f"Analysis complete: overall={score.overall_score}, "
            f"recommendations={len(score.recommendations)}",
            extra={"elapsed_ms": elapsed},
        )
        return score, elapsed

    async def update(self, pitch_id: str, changes: Dict[str, Any]) -> ValidationScore:
        """Re-score a pitch from partial data and replace its cache entry.

        Missing title, genre and budget fall back to defaults. Concurrent
        updates of the same pitch run one at a time and each bumps
        ``version``.
        """
        merged = {key: value for key, value in (changes or {}).items() if value not in (None, "")}
        for key, default in UPDATE_DEFAULTS.items():
            merged.setdefault(key, default)
        pitch = PitchData.model_validate(merged)
        ctx = log.bind(pitchId=pitch_id, operation="update")

        async with self._pitch_lock(pitch_id):
            started = time.perf_counter()
            previous = await self.cache.get(pitch_id)
            try:
                score = await self._compute(pitch, AnalysisOptions(), pitch_id)
            except ValidationEngineError as exc:
                ctx.error(f"Update failed: {exc.message}", extra={"elapsed_ms": _elapsed(started)})
                raise
            score.version = previous.version + 1 if previous else 1
            await self.cache.set(pitch_id, score, self.ttl_seconds)
            ctx.info(f"Score updated to version {score.version}", extra={"elapsed_ms": _elapsed(started)})
        return score

    async def batch_analyze(self, pitches: Any) -> Dict[str, Any]:
        validate_batch(pitches, self.max_batch)
        ctx = log.bind(operation="batch_analyze")
        started = time.perf_counter()
        outcome = await run_batch(pitches)
        ctx.info(
            f"Batch of {len(pitches)} analyzed, {outcome['failed_count']} failed",
            extra={"elapsed_ms": _elapsed(started)},
        )
        return outcome

    # ---------- read paths ----------

    async def get_score(self, pitch_id: str) -> ValidationScore:
        return await self._require_score(pitch_id)

    async def recommendations(
        self,
        pitch_id: str,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        score = await self._require_score(pitch_id)
        selected = filter_recommendations(score.recommendations, category, priority, limit)
        return {
            "recommendations": [dump(r) for r in selected],
            "total": len(selected),
            "filtered": len(selected) < len(score.recommendations),
            "pitchScore": score.overall_score,
        }

    async def comparables(
        self,
        pitch_id: str,
        genre: Optional[str] = None,
        budget_range: Optional[Tuple[float, float]] = None,
        year_range: Optional[Tuple[int, int]] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        min_similarity: Optional[int] = DEFAULT_MIN_SIMILARITY,
    ) -> Dict[str, Any]:
        score = await self._require_score(pitch_id)
        selected = filter_comparables(
            score.comparables,
            genre=genre,
            budget_range=budget_range,
            year_range=year_range,
            min_similarity=min_similarity,
            limit=limit,
        )
        return {
            "comparables": [dump(c) for c in selected],
            "insights": comparables_insights(selected),
        }

    async def benchmark(
        self,
        pitch_id: Optional[str],
        categories: Optional[List[str]],
        comparison_pool: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not pitch_id or not categories:
            raise MissingRequiredField("Pitch ID and categories are required")
        score = await self._require_score(pitch_id)
        return analyze_benchmarks(score.benchmarks, categories, comparison_pool)

    async def progress(self, pitch_id: str) -> ValidationProgress:
        return build_progress(await self._require_score(pitch_id))

    async def dashboard(self, pitch_id: str) -> Dict[str, Any]:
        score, progress = await asyncio.gather(
            self.get_score(pitch_id),
            self.progress(pitch_id),
            return_exceptions=True,
        )
        for outcome in (score, progress):
            if isinstance(outcome, NotFound):
                raise outcome
            if isinstance(outcome, BaseException):
                log.bind(pitchId=pitch_id, operation="dashboard").error(f"Dashboard load failed: {outcome}")
                raise outcome
        return build_dashboard(pitch_id, score, progress)

    def realtime(self, pitch_id: Optional[str], field: Optional[str], content: Any) -> RealTimeValidation:
        if not pitch_id or not field or content is None or content == "":
            raise MissingRequiredField("Pitch ID, field, and content are required")
        return quick_score(pitch_id, field, content)


def _elapsed(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000))
