from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from typing import Any

from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
# guards _cache and the counters; locations may be scored from worker threads
_lock = threading.Lock()


def make_key(*parts: Any) -> str:
    """sha256 over the JSON form of each part; pydantic models are dumped first."""
    payload = [p.model_dump(mode="json") if hasattr(p, "model_dump") else p for p in parts]
    normalized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:32]


def cache_get(key: str, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> Any | None:
    global _hits, _misses
    if not config.cache_enabled:
        return None
    with _lock:
        entry = _cache.get(key)
        if entry and time.time() - entry["created_at"] < config.cache_ttl:
            _hits += 1
            return entry["value"]
        if entry:
            _cache.pop(key, None)
        _misses += 1
    return None


def cache_set(key: str, value: Any, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
    if not config.cache_enabled or config.cache_max_entries <= 0:
        return
    with _lock:
        while key not in _cache and len(_cache) >= config.cache_max_entries:
            # dicts keep insertion order, so the first key is the oldest entry
            oldest = next(iter(_cache))
            _cache.pop(oldest, None)
            logger.debug("Evicted cache entry %s", oldest)
        _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    with _lock:
        total = _hits + _misses
        return {
            "size": len(_cache),
            "hits": _hits,
            "misses": _misses,
            "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
        }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
