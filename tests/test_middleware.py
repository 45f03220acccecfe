"""Tests for middleware components."""
import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport
from conftest import make_client
from ldesview.config import Settings
from ldesview.main import create_app


@pytest.mark.asyncio
async def test_correlation_id_generated(storage):
    """Test that correlation ID is auto-generated if not provided."""
    transport = ASGITransport(app=create_app(Settings(), storage=storage))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/data/temps")
        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_correlation_id_preserved(storage):
    """Test that provided correlation ID is preserved."""
    transport = ASGITransport(app=create_app(Settings(), storage=storage))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        correlation_id = "test-correlation-123"
        response = await client.get("/data/temps", headers={"X-Correlation-ID": correlation_id})
        assert response.headers["X-Correlation-ID"] == correlation_id


def test_error_body_carries_correlation_id(client):
    """Test that typed errors return structured responses."""
    response = client.get("/data/nope", headers={"X-Correlation-ID": "abc"})

    assert response.status_code == 404
    assert response.json() == {
        "error": "InvalidStreamName",
        "message": "Stream 'nope' does not exist",
        "status_code": 404,
        "correlation_id": "abc",
        "path": "/data/nope",
    }


def test_unhandled_error_is_structured(storage):
    """Test that unexpected failures become structured 500s."""
    storage.resolve_stream_by_name = AsyncMock(side_effect=RuntimeError("disk on fire"))
    client = make_client(storage)

    response = client.get("/data/temps", headers={"X-Correlation-ID": "xyz"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "InternalServerError"
    assert body["correlation_id"] == "xyz"
    assert "disk on fire" not in response.text
