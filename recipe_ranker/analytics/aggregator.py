from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    rankings = [e for e in events if e["type"] == "rank"]
    total = len(rankings)

    # Average response time
    times = [r["response_time_ms"] for r in rankings if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    status_counter: Counter[str] = Counter(str(r.get("status_code")) for r in rankings)
    outcome_counter: Counter[str] = Counter(r.get("outcome", "unknown") for r in rankings)

    # Most frequent primary picks
    primary_counter: Counter[str] = Counter()
    for r in rankings:
        if r.get("primary"):
            primary_counter[r["primary"]] += 1
    top_primary = [{"id": rid, "count": c} for rid, c in primary_counter.most_common(10)]

    successes = outcome_counter.get("ok", 0)

    return {
        "total_rankings": total,
        "avg_response_time_ms": avg_time,
        "by_status": dict(status_counter),
        "by_outcome": dict(outcome_counter),
        "success_rate": round(successes / total * 100, 1) if total else 0.0,
        "top_primary": top_primary,
    }
