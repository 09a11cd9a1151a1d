"""Tests for structured logging and request_id propagation."""

import logging

SESSION = {"X-Session-Id": "logging-0001"}


def test_request_id_in_response_and_logs(client, caplog):
    with caplog.at_level(logging.INFO, logger="codeprompt"):
        response = client.get("/healthz")
    rid = response.headers.get("x-request-id")
    assert rid
    records = [r for r in caplog.records if getattr(r, "request_id", None) == rid]
    assert records, "Expected logs to contain request_id from response"
    assert len({r.request_id for r in records}) == 1


def test_provided_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-Id": "test-rid-123"})
    assert resp.headers.get("x-request-id") == "test-rid-123"


def test_request_id_in_error_response(client):
    response = client.post("/v1/studio/analysis/action-plan", headers=SESSION)
    rid = response.headers.get("x-request-id")
    assert response.status_code == 409
    assert rid
    assert response.json()["error"]["request_id"] == rid


def test_generation_failure_is_logged_with_feature(client, fake_client, caplog):
    client.post(
        "/v1/studio/register",
        json={"name": "Ana", "whatsapp": "11999990000", "email": "ana@example.com"},
        headers=SESSION,
    )
    fake_client.fail_with(RuntimeError("upstream down"))

    with caplog.at_level(logging.INFO, logger="codeprompt"):
        client.post("/v1/studio/text", json={"topic": "x"}, headers=SESSION)

    failures = [r for r in caplog.records if r.getMessage() == "generation.downstream_failed"]
    assert failures
    assert failures[0].feature == "text"
    assert failures[0].error_code == "upstream_error"
