"""Integration tests for request logging through the full middleware stack."""

from typing import Any

import pytest
from httpx import AsyncClient
from loguru import logger


@pytest.fixture
def log_records() -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    logger.add(lambda message: records.append(message.record), level="DEBUG")
    return records


@pytest.mark.integration
class TestRequestLogging:
    async def test_request_is_logged_with_context(
        self, seeded_client: AsyncClient, log_records: list[dict[str, Any]]
    ) -> None:
        response = await seeded_client.get(
            "/api/products", params={"category": "kitchen"}
        )

        completed = [r for r in log_records if r["message"] == "Request completed"]
        assert len(completed) == 1
        extra = completed[0]["extra"]
        assert extra["status_code"] == 200
        assert extra["method"] == "GET"
        assert extra["path"] == "/api/products"
        assert extra["correlation_id"] == response.headers["X-Correlation-ID"]

        started = next(r for r in log_records if r["message"] == "Request started")
        assert started["extra"]["query_params"] == {"category": "kitchen"}

    async def test_health_is_not_logged(
        self, client_with_db: AsyncClient, log_records: list[dict[str, Any]]
    ) -> None:
        await client_with_db.get("/health")

        assert not any(r["message"] == "Request started" for r in log_records)

    async def test_api_key_is_redacted_from_error_logs(
        self, client_with_db: AsyncClient, log_records: list[dict[str, Any]]
    ) -> None:
        await client_with_db.post(
            "/api/products", json={}, headers={"api-key": "wrong-secret"}
        )

        rendered = " ".join(str(r["extra"]) for r in log_records)
        assert "wrong-secret" not in rendered
