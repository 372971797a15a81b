from __future__ import annotations

from collections import Counter
from typing import Any


def _mean(values: list[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommendation"]
    total = len(requests)

    # Average response time
    avg_time = _mean([r["response_time_ms"] for r in requests if "response_time_ms" in r])

    # Confidence distribution
    confidence_counter: Counter[str] = Counter(
        r.get("confidence", "unknown") for r in requests
    )
    confidence = {
        level: confidence_counter.get(level, 0) for level in ("high", "medium", "low")
    }

    # Result sizes and what the filters removed
    returned = [r.get("results_returned", 0) for r in requests]
    empty = sum(1 for n in returned if n == 0)
    dropped = [r["dropped_stalls"] for r in requests if "dropped_stalls" in r]
    unknown_distance = sum(r.get("unknown_distance", 0) for r in requests)

    # Walking distance and best score, only where known
    distances = [r["avg_distance_m"] for r in requests if r.get("avg_distance_m") is not None]
    top_scores = [r["top_score"] for r in requests if r.get("top_score") is not None]

    # Stalls ranked first most often
    top_counter: Counter[str] = Counter()
    for r in requests:
        if r.get("top_stall_id"):
            top_counter[r["top_stall_id"]] += 1
    top_stalls = [{"stall_id": s, "count": c} for s, c in top_counter.most_common(10)]

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "confidence_distribution": confidence,
        "avg_results_returned": _mean(returned),
        "avg_dropped_stalls": _mean(dropped),
        "unknown_distance_results": unknown_distance,
        "avg_distance_m": _mean(distances),
        "avg_top_score": round(sum(top_scores) / len(top_scores), 4) if top_scores else 0.0,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "top_recommended_stalls": top_stalls,
    }
