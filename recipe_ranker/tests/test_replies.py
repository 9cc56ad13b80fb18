from __future__ import annotations

import json
from unittest.mock import MagicMock, call

from recipe_ranker.transport.replies import Reply, to_lambda_result, to_response, write_to_handler

CORS = {"Access-Control-Allow-Origin": "https://a.example", "Vary": "Origin"}
RANKING = {"primary": "R01", "secondary": ["R02", "R03"]}


def test_to_response_sets_status_json_and_headers():
    response = to_response(Reply(200, RANKING, CORS))
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.headers["access-control-allow-origin"] == "https://a.example"
    assert json.loads(response.body) == RANKING


def test_to_response_no_content():
    response = to_response(Reply.no_content(CORS))
    assert response.status_code == 204
    assert response.body == b""
    assert "content-type" not in response.headers
    assert response.headers["vary"] == "Origin"


def test_to_lambda_result_shape():
    result = to_lambda_result(Reply(429, {"error": "slow down"}, {"Retry-After": "12"}))
    assert result["statusCode"] == 429
    assert result["headers"] == {"Retry-After": "12", "Content-Type": "application/json"}
    assert json.loads(result["body"]) == {"error": "slow down"}


def test_to_lambda_result_no_content():
    result = to_lambda_result(Reply.no_content())
    assert result == {"statusCode": 204, "headers": {}, "body": ""}


def test_write_to_handler_writes_body_once():
    handler = MagicMock()
    write_to_handler(Reply(200, RANKING, CORS), handler)

    body = json.dumps(RANKING, ensure_ascii=False).encode()
    handler.send_response.assert_called_once_with(200)
    handler.send_header.assert_has_calls([
        call("Access-Control-Allow-Origin", "https://a.example"),
        call("Vary", "Origin"),
        call("Content-Type", "application/json"),
        call("Content-Length", str(len(body))),
    ])
    handler.end_headers.assert_called_once()
    handler.wfile.write.assert_called_once_with(body)


def test_write_to_handler_no_content_skips_body():
    handler = MagicMock()
    write_to_handler(Reply.no_content(), handler)
    handler.send_response.assert_called_once_with(204)
    handler.send_header.assert_called_once_with("Content-Length", "0")
    handler.wfile.write.assert_not_called()
