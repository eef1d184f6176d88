"""Unit tests for request middleware."""

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from weather_widget.api.middleware import CorrelationIdMiddleware, widget_action


def _request(method: str, path: str) -> Request:
    return Request({"type": "http", "method": method, "path": path, "headers": [], "query_string": b""})


class TestWidgetAction:
    """Tests for naming widget actions."""

    @pytest.mark.parametrize(
        "method,path,expected",
        [
            ("POST", "/widget/search", "POST search"),
            ("POST", "/widget/days/3", "POST days/{index}"),
            ("DELETE", "/widget/days/selection", "DELETE days/selection"),
            ("POST", "/widget/recent-searches/focus", "POST recent-searches/focus"),
            ("GET", "/health", "GET /health"),
        ],
    )
    def test_action_names(self, method, path, expected):
        assert widget_action(_request(method, path)) == expected


class TestCorrelationIdMiddleware:
    """Tests for correlation id propagation."""

    @pytest.fixture
    def client(self):
        app = FastAPI()
        app.add_middleware(CorrelationIdMiddleware)

        @app.post("/widget/days/{index}")
        async def select(index: int) -> dict:
            return dict(structlog.contextvars.get_contextvars())

        return TestClient(app)

    def test_binds_correlation_id_and_action(self, client):
        response = client.post("/widget/days/2", headers={"X-Correlation-Id": "abc-123"})

        assert response.headers["X-Correlation-Id"] == "abc-123"
        assert response.json() == {
            "correlation_id": "abc-123",
            "widget_action": "POST days/{index}",
        }

    def test_generates_correlation_id(self, client):
        response = client.post("/widget/days/0")

        correlation_id = response.headers["X-Correlation-Id"]
        assert correlation_id
        assert response.json()["correlation_id"] == correlation_id
