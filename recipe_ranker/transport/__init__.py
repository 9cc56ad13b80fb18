"""
Transport adapters.

Responsibilities:
- Adapt ASGI, Lambda-style and http.server requests into one InboundRequest.
- Normalize pre-parsed, string and streamed bodies into a JSON object.
- Emit a Reply through Starlette, Lambda-style or http.server responses.
"""
