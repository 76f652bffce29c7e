"""
Integration tests for the demo API using FastAPI TestClient.

Every request runs in its own scope, so all lines written while serving it
carry the same ``traceId``.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ctxlog.api.app import create_app
from ctxlog.api.middleware import TRACE_HEADER
from ctxlog.api.settings import DemoSettings


@pytest.fixture()
def client(singleton):
    app = create_app(settings=DemoSettings(timeout_scalar=5))
    with TestClient(app) as c:
        yield c


class TestContextEndpoint:
    def test_context_includes_request_scope(self, client):
        resp = client.get("/context", headers={TRACE_HEADER: "trace-123"})
        assert resp.status_code == 200
        assert resp.headers[TRACE_HEADER] == "trace-123"

        body = resp.json()
        assert body["traceId"] == "trace-123"
        assert body["entryPoint"] == "GET: /context"
        assert body["requestNumber"] == 1
        assert body["requestsServed"] == 1
        assert isinstance(body["assignedFromAnotherMiddleware"], int)

    def test_generates_trace_id(self, client):
        resp = client.get("/context")
        assert resp.json()["traceId"] == resp.headers[TRACE_HEADER]

    def test_requests_are_isolated(self, client):
        first = client.get("/context").json()
        second = client.get("/context").json()
        assert first["traceId"] != second["traceId"]
        assert second["requestNumber"] == 2

    def test_scope_does_not_outlive_request(self, client, singleton):
        client.get("/context")
        assert "traceId" not in singleton.current_context()


class TestWorkloadEndpoint:
    def test_failure_becomes_500(self, client):
        resp = client.get("/", headers={TRACE_HEADER: "trace-err"})
        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Internal Server Error",
            "message": "Random error from callback layer 5!",
        }

    def test_error_line_carries_request_scope(self, client, lines):
        client.get("/", headers={TRACE_HEADER: "trace-err"})

        errors = [
            context
            for level, message, context in lines()
            if level == "ERROR" and message.startswith("Uncaught Error at error catcher")
        ]
        assert len(errors) == 1
        assert errors[0]["traceId"] == "trace-err"
        assert errors[0]["entryPoint"] == "GET: /"
        assert "assignedAfterDelay" in errors[0]
        assert "Traceback" in errors[0]["stack"]


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}
