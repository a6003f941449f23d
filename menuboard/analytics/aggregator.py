from __future__ import annotations

from collections import Counter
from typing import Any

from ..recommendations.models import ALL

DIMENSIONS = ("taste", "carb", "weather", "category")


def _top_labels(searches: list[dict[str, Any]], dimension: str) -> list[dict[str, Any]]:
    counter: Counter[str] = Counter()
    for s in searches:
        for label in s.get(dimension, []) or []:
            if label != ALL:
                counter[label] += 1
    return [{"name": n, "count": c} for n, c in counter.most_common(10)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "recommend"]
    votes = [e for e in events if e["type"] == "vote"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    by_source = Counter(s.get("source", "unknown") for s in searches)
    empty_results = sum(1 for s in searches if s.get("results_returned", 0) == 0)

    # Share of searches that constrained each dimension
    constrained = {
        d: sum(1 for s in searches if ALL not in (s.get(d) or [ALL]))
        for d in DIMENSIONS
    }
    filter_usage = {
        d: round(n / total * 100, 1) if total else 0.0
        for d, n in constrained.items()
    }

    cache_hits = sum(1 for s in searches if s.get("cache_hit"))

    vote_actions: Counter[str] = Counter()
    for v in votes:
        vote_actions[v.get("action", "unknown")] += v.get("count", 0)

    return {
        "total_recommendations": total,
        "board_recommendations": by_source.get("board", 0),
        "guest_recommendations": by_source.get("guest", 0),
        "empty_results": empty_results,
        "avg_response_time_ms": avg_time,
        "top_labels": {d: _top_labels(searches, d) for d in DIMENSIONS},
        "filter_usage": filter_usage,
        "cache_stats": {
            "hits": cache_hits,
            "misses": by_source.get("guest", 0) - cache_hits,
        },
        "vote_activity": {
            "votes_cast": vote_actions.get("cast", 0),
            "votes_replaced": vote_actions.get("replace", 0),
            "votes_deleted": vote_actions.get("delete", 0),
        },
    }
