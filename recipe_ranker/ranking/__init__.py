"""
Ranking pipeline.

Responsibilities:
- Gate requests by origin and per-client rate limit.
- Validate the user query.
- Call the LLM and strictly validate its ranking before relaying it.
- Map every failure onto a JSON error reply.
"""
