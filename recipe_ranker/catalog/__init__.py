"""
Recipe catalog.

Responsibilities:
- Load the read-only recipe list once per process.
- Expose it as typed items for prompt rendering and id checks.
"""
