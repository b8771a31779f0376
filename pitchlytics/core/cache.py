"""Score cache: the only shared mutable state of the service.

A miss (``get`` returning ``None``) is a normal outcome; callers decide how
to report it. Nothing here recomputes a score.
"""
import json
import logging
import time
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis

from ..models.schemas import ValidationScore, dump

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "validation_score:"


class ScoreCache:
    """Async key-value store for ValidationScore entries with expiry."""

    backend = "abstract"

    async def get(self, pitch_id: str) -> Optional[ValidationScore]:
        raise NotImplementedError

    async def set(self, pitch_id: str, score: ValidationScore, ttl_seconds: int) -> None:
        raise NotImplementedError

    async def ttl(self, pitch_id: str) -> Optional[int]:
        """Seconds left before expiry, or None if the entry is absent."""
        raise NotImplementedError

    async def close(self) -> None:
        return None


class RedisScoreCache(ScoreCache):
    """Stores scores as JSON strings with ``SET ... EX``."""

    backend = "redis"

    def __init__(self, client, key_prefix: str = DEFAULT_KEY_PREFIX):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = DEFAULT_KEY_PREFIX) -> "RedisScoreCache":
        return cls(redis.from_url(url, decode_responses=True), key_prefix=key_prefix)

    def _key(self, pitch_id: str) -> str:
        return f"{self.key_prefix}{pitch_id}"

    async def get(self, pitch_id: str) -> Optional[ValidationScore]:
        raw = await self.client.get(self._key(pitch_id))
        if raw is None:
            return None
        return ValidationScore.model_validate(json.loads(raw))

    async def set(self, pitch_id: str, score: ValidationScore, ttl_seconds: int) -> None:
        await self.client.set(self._key(pitch_id), json.dumps(dump(score)), ex=ttl_seconds)
        logger.debug(f"Cached score under {self._key(pitch_id)} (ttl={ttl_seconds}s)")

    async def ttl(self, pitch_id: str) -> Optional[int]:
        # -2: no key, -1: key without expiry
        remaining = await self.client.ttl(self._key(pitch_id))
        if remaining is None or remaining == -2:
            return None
        return int(remaining)

    async def close(self) -> None:
        await self.client.aclose()


class InMemoryScoreCache(ScoreCache):
    """Process-local cache for development and tests.

    Expiry is measured on ``clock`` (``time.monotonic`` by default); tests
    pass a fake clock to step past the TTL.
    """

    backend = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def _live(self, pitch_id: str) -> Optional[Tuple[float, str]]:
        entry = self._entries.get(pitch_id)
        if entry is None:
            return None
        if entry[0] <= self._clock():
            del self._entries[pitch_id]
            return None
        return entry

    async def get(self, pitch_id: str) -> Optional[ValidationScore]:
        entry = self._live(pitch_id)
        if entry is None:
            return None
        # stored as JSON so callers never share a mutable model instance
        return ValidationScore.model_validate(json.loads(entry[1]))

    async def set(self, pitch_id: str, score: ValidationScore, ttl_seconds: int) -> None:
        now = self._clock()
        for key in [key for key, (expiry, _) in self._entries.items() if expiry <= now]:
            del self._entries[key]
        self._entries[pitch_id] = (now + ttl_seconds, json.dumps(dump(score)))

    async def ttl(self, pitch_id: str) -> Optional[int]:
        entry = self._live(pitch_id)
        if entry is None:
            return None
        return max(0, int(round(entry[0] - self._clock())))

    def __len__(self) -> int:
        return len(self._entries)


def build_cache(backend: str, redis_url: str, key_prefix: str = DEFAULT_KEY_PREFIX) -> ScoreCache:
    """Create the cache named by configuration."""
    if backend == "memory":
        return InMemoryScoreCache()
    if backend == "redis":
        return RedisScoreCache.from_url(redis_url, key_prefix=key_prefix)
    raise ValueError(f"Unknown cache backend: {backend}")
