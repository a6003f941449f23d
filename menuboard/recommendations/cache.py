from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from ..config import DEFAULT_SETTINGS

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0


def _make_key(options_dict: dict) -> str:
    # Option lists are sets on the wire, so ordering must not split the key
    normalized = json.dumps(
        {k: sorted(v) if isinstance(v, list) else v for k, v in options_dict.items()},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(options_dict: dict, ttl: float = DEFAULT_SETTINGS.guest_cache_ttl) -> Any | None:
    global _hits, _misses
    key = _make_key(options_dict)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(options_dict: dict, value: Any) -> None:
    key = _make_key(options_dict)
    _cache[key] = {"value": value, "created_at": time.time()}


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
