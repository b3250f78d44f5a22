from __future__ import annotations

import json
from typing import Any, List

from fastapi.testclient import TestClient

from ai_gateway.base.factory import ProviderRegistry
from ai_gateway.base.models import ModelConfiguration, ProviderTag
from ai_gateway.service.app import create_app, get_app
from ai_gateway.service.gateway import GatewayService
from ai_gateway.tests.helpers import FakeHandle, FakeTextStream, MemoryCatalog, MemoryConversationStore

OWNER = "user-1"
HEADERS = {"X-User-Id": OWNER}


def _service(handle: FakeHandle) -> GatewayService:
    class _Registry(ProviderRegistry):
        @classmethod
        def resolve(cls, config, api_key):
            return handle

    catalog = MemoryCatalog({("model-1", OWNER): ModelConfiguration(provider=ProviderTag.OLLAMA, model_id="llama3")})
    return GatewayService(catalog, MemoryConversationStore(), registry=_Registry)


def _client(handle: FakeHandle) -> TestClient:
    return TestClient(create_app(_service(handle)))


def _body(**extra: Any):
    body = {"modelId": "model-1", "messages": [{"role": "user", "content": "Hi"}]}
    body.update(extra)
    return body


def test_health():
    response = TestClient(get_app()).get("/api/health")
    assert response.status_code == 200  # nosec B101 - assert is appropriate in unit tests
    assert response.json() == {"ok": True}  # nosec B101 - assert is appropriate in unit tests


def test_caller_identity_is_required():
    response = _client(FakeHandle()).post("/api/complete", json=_body())
    assert response.status_code == 401  # nosec B101 - assert is appropriate in unit tests


def test_invalid_body_is_400():
    client = _client(FakeHandle())
    response = client.post("/api/complete", json=_body(settings={"temperature": 5}), headers=HEADERS)
    assert response.status_code == 400  # nosec B101 - assert is appropriate in unit tests
    assert response.json()["detail"]["kind"] == "validation"  # nosec B101 - assert is appropriate in unit tests
    response = client.post("/api/stream", json=_body(messages=[]), headers=HEADERS)
    assert response.status_code == 400  # nosec B101 - assert is appropriate in unit tests


def test_complete_returns_result():
    response = _client(FakeHandle()).post("/api/complete", json=_body(), headers=HEADERS)
    assert response.status_code == 200  # nosec B101 - assert is appropriate in unit tests
    result = response.json()["result"]
    assert result["text"] == "hello"  # nosec B101 - assert is appropriate in unit tests
    assert result["finishReason"] == "stop"  # nosec B101 - assert is appropriate in unit tests
    assert result["usage"]["totalTokens"] == 5  # nosec B101 - assert is appropriate in unit tests


def test_complete_maps_errors_to_status_codes():
    client = _client(FakeHandle(error=RuntimeError("Rate limit reached")))
    response = client.post("/api/complete", json=_body(), headers=HEADERS)
    assert response.status_code == 429  # nosec B101 - assert is appropriate in unit tests
    assert response.json()["detail"]["kind"] == "rate-limit"  # nosec B101 - assert is appropriate in unit tests

    response = client.post("/api/complete", json=_body(modelId="nope"), headers=HEADERS)
    assert response.status_code == 404  # nosec B101 - assert is appropriate in unit tests
    assert response.json()["detail"] == {  # nosec B101 - assert is appropriate in unit tests
        "kind": "not-found",
        "message": "Model not found or you do not have permission to use it",
    }


def _ndjson(text: str) -> List[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_stream_emits_ndjson_events():
    client = _client(FakeHandle(stream=FakeTextStream(["Hel", "lo"])))
    response = client.post("/api/stream", json=_body(), headers=HEADERS)
    assert response.status_code == 200  # nosec B101 - assert is appropriate in unit tests
    assert response.headers["content-type"].startswith("application/x-ndjson")  # nosec B101 - assert is appropriate in unit tests
    events = _ndjson(response.text)
    assert [e["type"] for e in events] == ["text-delta", "text-delta", "finish"]  # nosec B101 - assert is appropriate in unit tests
    assert events[-1]["finishReason"] == "stop"  # nosec B101 - assert is appropriate in unit tests


def test_stream_failure_is_a_final_error_line():
    client = _client(FakeHandle(stream=FakeTextStream(["Hel"], error=RuntimeError("connection reset"))))
    events = _ndjson(client.post("/api/stream", json=_body(), headers=HEADERS).text)
    assert events[-1] == {  # nosec B101 - assert is appropriate in unit tests
        "type": "error",
        "error": {"kind": "network", "message": "Network error. Please check your connection and try again."},
    }


def test_validate_model_endpoint():
    response = _client(FakeHandle()).post("/api/models/model-1/validate", headers=HEADERS)
    assert response.json() == {"valid": True, "message": "Model is properly configured"}  # nosec B101 - assert is appropriate in unit tests


def test_default_service_is_built_over_sqlite(db_path):
    client = TestClient(create_app(db_path=db_path))
    report = client.post("/api/models/unknown/validate", headers=HEADERS).json()
    assert report["valid"] is False  # nosec B101 - assert is appropriate in unit tests
    assert report["kind"] == "not-found"  # nosec B101 - assert is appropriate in unit tests
