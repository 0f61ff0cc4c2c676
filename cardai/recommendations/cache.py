from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any

from .config import DEFAULT_CATALOG_CONFIG

logger = logging.getLogger(__name__)

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
_evictions: int = 0


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(
    request_dict: dict, ttl: float = DEFAULT_CATALOG_CONFIG.cache_ttl
) -> Any | None:
    global _hits, _misses
    key = _make_key(request_dict)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(
    request_dict: dict,
    value: Any,
    max_entries: int = DEFAULT_CATALOG_CONFIG.cache_max_entries,
) -> None:
    global _evictions
    key = _make_key(request_dict)
    _cache.pop(key, None)
    # Oldest entries first (insertion order)
    while len(_cache) >= max_entries > 0:
        oldest = next(iter(_cache))
        del _cache[oldest]
        _evictions += 1
        logger.debug("Evicted cache entry %s", oldest)
    _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "evictions": _evictions,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses, _evictions
    _cache.clear()
    _hits = 0
    _misses = 0
    _evictions = 0
