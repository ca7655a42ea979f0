import pytest

from rate_cache.main import app, lifespan


def test_routes_are_registered():
    paths = {route.path for route in app.routes}
    assert "/api/tokens/{token_hash}/exchange-rate" in paths
    assert "/api/tokens/cache/status" in paths
    assert "/health" in paths


@pytest.mark.asyncio
async def test_lifespan_creates_store_and_service():
    async with lifespan(app):
        service = app.state.exchange_rate_service
        assert service.store.exists() is True
        assert service.enable_consolidation is False
        assert service.pending_refreshes == 0
