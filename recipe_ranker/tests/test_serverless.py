from __future__ import annotations

import io
import json
from unittest.mock import AsyncMock, patch

import pytest

from recipe_ranker import serverless
from recipe_ranker.catalog.models import CatalogItem
from recipe_ranker.llm.config import LLMConfig
from recipe_ranker.ranking.config import OriginConfig, RateLimitConfig
from recipe_ranker.ranking.service import RankingService

ALLOWED = "https://recipes.example"
RANKING = {"primary": "R01", "secondary": ["R02", "R03"]}


@pytest.fixture(autouse=True)
def service(monkeypatch):
    svc = RankingService(
        catalog=[CatalogItem(id="R01", title="Chicken Soup", details="classic broth")],
        rate_limit=RateLimitConfig(window_ms=60_000, max_requests=5, max_clients=100),
        origins=OriginConfig(allowed_origins=(ALLOWED,)),
        llm=LLMConfig(api_key="test-key", model="test-model", base_url=None, timeout=5.0),
        strict_ids=False,
    )
    monkeypatch.setattr(serverless, "_service", svc)
    with patch("recipe_ranker.ranking.service.request_ranking", new_callable=AsyncMock) as mock:
        mock.return_value = json.dumps(RANKING)
        yield svc


def _fake_handler(method, body=b"", headers=None):
    h = serverless.handler.__new__(serverless.handler)
    h.command = method
    h.path = "/api/rank"
    h.request_version = "HTTP/1.1"
    h.requestline = f"{method} /api/rank HTTP/1.1"
    h.client_address = ("192.0.2.20", 40000)
    h.headers = {"Content-Length": str(len(body)), **(headers or {})}
    h.rfile = io.BytesIO(body)
    h.wfile = io.BytesIO()
    h.log_message = lambda *args: None
    return h


def _parse_raw_response(raw: bytes):
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode().split("\r\n")
    status = int(lines[0].split()[1])
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return status, headers, body


# ── Lambda-style events ──────────────────────────────────────────────────


def test_lambda_handler_success():
    result = serverless.lambda_handler({
        "httpMethod": "POST",
        "headers": {"Origin": ALLOWED},
        "body": json.dumps({"query": "chicken soup"}),
    })
    assert result["statusCode"] == 200
    assert result["headers"]["Content-Type"] == "application/json"
    assert result["headers"]["Access-Control-Allow-Origin"] == ALLOWED
    assert json.loads(result["body"]) == RANKING


def test_lambda_handler_preflight():
    result = serverless.lambda_handler({"httpMethod": "OPTIONS", "headers": {"Origin": ALLOWED}})
    assert result["statusCode"] == 204
    assert result["body"] == ""
    assert "Content-Type" not in result["headers"]


def test_lambda_handler_invalid_body():
    result = serverless.lambda_handler({"httpMethod": "POST", "body": "{broken"})
    assert result["statusCode"] == 400
    assert json.loads(result["body"]) == {"error": "Invalid JSON body."}


def test_lambda_handler_shares_rate_limit_between_invocations():
    event = {"httpMethod": "POST", "headers": {"X-Real-IP": "198.51.100.8"}, "body": '{"query": "soup"}'}
    statuses = [serverless.lambda_handler(event)["statusCode"] for _ in range(6)]
    assert statuses == [200] * 5 + [429]


# ── http.server handler ──────────────────────────────────────────────────


def test_http_handler_post():
    h = _fake_handler("POST", json.dumps({"query": "soup"}).encode(), {"Origin": ALLOWED})
    h.do_POST()

    status, headers, body = _parse_raw_response(h.wfile.getvalue())
    assert status == 200
    assert headers["Content-Type"] == "application/json"
    assert headers["Access-Control-Allow-Origin"] == ALLOWED
    assert json.loads(body) == RANKING


def test_http_handler_rejects_get():
    h = _fake_handler("GET")
    h.do_GET()

    status, _, body = _parse_raw_response(h.wfile.getvalue())
    assert status == 405
    assert json.loads(body) == {"error": "Method not allowed. Use POST."}


def test_http_handler_empty_post_requires_query():
    h = _fake_handler("POST")
    h.do_POST()

    status, _, body = _parse_raw_response(h.wfile.getvalue())
    assert status == 400
    assert json.loads(body) == {"error": "Query is required."}


def test_lambda_handler_nan_output_is_valid_json_502():
    with patch("recipe_ranker.ranking.service.request_ranking", new_callable=AsyncMock) as mock:
        mock.return_value = '{"primary":"R01","secondary":[NaN,"R02"]}'
        result = serverless.lambda_handler({"httpMethod": "POST", "body": '{"query": "soup"}'})
    assert result["statusCode"] == 502
    assert json.loads(result["body"]) == {"error": "Unable to parse LLM ranking response."}


def test_lambda_handler_bad_base64_body_is_400():
    result = serverless.lambda_handler({"httpMethod": "POST", "isBase64Encoded": True, "body": "%%%not-base64"})
    assert result["statusCode"] == 400
    assert json.loads(result["body"]) == {"error": "Invalid JSON body."}


def test_http_handler_head_goes_through_pipeline():
    h = _fake_handler("HEAD")
    h.do_HEAD()

    status, headers, body = _parse_raw_response(h.wfile.getvalue())
    assert status == 405
    assert headers["Content-Type"] == "application/json"
    assert json.loads(body) == {"error": "Method not allowed. Use POST."}
