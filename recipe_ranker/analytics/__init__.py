"""
Ranking analytics.

Responsibilities:
- Record one event per ranking request outcome (in memory).
- Aggregate outcomes, latencies and popular picks for the analytics endpoint.
"""
