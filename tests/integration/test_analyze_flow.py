r"""End-to-end tests of ``POST /analyze`` with the real LLM client.

The LLM backend is simulated with ``httpx.MockTransport``; everything
between the HTTP route and the transport is the production code path.
"""

from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from legacylens.analysis.client import AsyncAnalysisClient
from legacylens.retry import RetryConfig
from legacylens.settings import Settings
from legacylens.web import create_app
from tests.helpers import VALID_RESULT, completion_body

FILES_PAYLOAD = {
    "files": [
        {"name": "OrderService.cs", "type": "cs", "content": "class OrderService {}"},
        {"name": "manual.txt", "type": "doc", "content": "Orders are placed by users."},
    ],
    "maxChars": 5000,
}


def make_app(transport: httpx.MockTransport, retries: int = 2) -> TestClient:
    analyzer = AsyncAnalysisClient(
        api_key="sk-test",
        model="gpt-test",
        base_url="https://llm.example.com/v1",
        retry_config=RetryConfig(retries=retries, base_delay_ms=0, max_delay_ms=0, jitter_ms=0, timeout_ms=2000),
        transport=transport,
    )
    return TestClient(create_app(Settings(_env_file=None), analyzer=analyzer))


def test_analyze_recovers_from_transient_backend_errors() -> None:
    statuses = iter([503, 429, 200])
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        status = next(statuses)
        if status != 200:
            return httpx.Response(status)
        return httpx.Response(200, json=completion_body(VALID_RESULT))

    with make_app(httpx.MockTransport(handler)) as client:
        assert client.get("/health").json() == {"ok": True, "model": "gpt-test"}
        response = client.post("/analyze", json=FILES_PAYLOAD)

    assert response.status_code == 200
    assert response.json()["tables"][0]["name"] == "Orders"
    assert len(seen) == 3
    assert all(body == seen[0] for body in seen)
    assert "# manual.txt" in seen[0]["messages"][1]["content"]


def test_analyze_reports_internal_error_after_retries() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(502)

    with make_app(httpx.MockTransport(handler), retries=1) as client:
        response = client.post("/analyze", json=FILES_PAYLOAD)

    assert response.status_code == 500
    assert response.json()["error"] == "INTERNAL"
    assert calls == 2


def test_analyze_reports_invalid_llm_answer() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body({"tables": [{"name": "t"}]}))

    with make_app(httpx.MockTransport(handler)) as client:
        response = client.post("/analyze", json=FILES_PAYLOAD)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "BAD_JSON"
    assert isinstance(body["detail"], list)


def test_analyze_reports_non_json_llm_answer() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=completion_body("Sure! Here is the analysis."))

    with make_app(httpx.MockTransport(handler)) as client:
        response = client.post("/analyze", json=FILES_PAYLOAD)

    assert response.status_code == 502
    assert response.json() == {"error": "BAD_UPSTREAM", "message": "LLM returned non-JSON."}
