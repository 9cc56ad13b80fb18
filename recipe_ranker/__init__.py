"""
Recipe ranking service.

Responsibilities:
- Guard the ranking endpoint (CORS origin allow-list, per-client rate limit).
- Normalize requests and replies across ASGI, Lambda-style and http.server transports.
- Ask an LLM to rank the recipe catalog against a free-text query.
- Validate the untrusted LLM output before relaying it.
"""
