"""Tests for the FastAPI endpoints."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from swingswap.api.app import create_app
from swingswap.api.routes.swaps import get_orchestrator
from swingswap.models import SettlementResult

SWAP_BODY = {
    "fromChain": "ethereum",
    "fromTokenAddress": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
    "fromUserAddress": "0xf022c6EC5be6F4A6dD19C196BA50F4be2786E7b8",
    "tokenSymbol": "USDC",
    "toTokenAddress": "0x0000000000000000000000000000000000000000",
    "toChain": "polygon",
    "tokenAmount": "1000000",
    "toTokenSymbol": "MATIC",
    "toUserAddress": "0xf022c6EC5be6F4A6dD19C196BA50F4be2786E7b8",
    "projectId": "replug",
}


class StubOrchestrator:
    """Returns a fixed result and records requests."""

    def __init__(self, result: SettlementResult):
        self.result = result
        self.calls = []

    async def execute_swap(self, params):
        self.calls.append(params)
        return self.result


@pytest.fixture
def orchestrator() -> StubOrchestrator:
    return StubOrchestrator(SettlementResult.settled("0xabc"))


@pytest_asyncio.fixture
async def client(orchestrator):
    """Create async test client with the orchestrator overridden."""
    app = create_app()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "swingswap"}

    @pytest.mark.asyncio
    async def test_detailed_health_redacts_keys(self, client, monkeypatch):
        """Test key material never appears in the detailed health output."""
        from swingswap.config import get_settings

        monkeypatch.setenv("EVM_PRIVATE_KEY", "0x" + "11" * 32)
        get_settings.cache_clear()

        response = await client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["config"]["keys"] == {"evm": "***", "solana": "(not set)"}
        assert "11" * 32 not in response.text


class TestSwapEndpoint:
    """Tests for POST /uniswap."""

    @pytest.mark.asyncio
    async def test_settled(self, client, orchestrator):
        response = await client.post("/uniswap", json=SWAP_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True, "txHash": "0xabc"}
        params = orchestrator.calls[0]
        assert params.from_chain == "ethereum"
        assert params.token_amount == "1000000"
        assert params.project_id == "replug"

    @pytest.mark.asyncio
    async def test_no_quotes(self, client, orchestrator):
        orchestrator.result = SettlementResult.no_quotes()

        response = await client.post("/uniswap", json=SWAP_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "No Quotes Available"}

    @pytest.mark.asyncio
    async def test_failure_is_500(self, client, orchestrator):
        orchestrator.result = SettlementResult.failed("Insufficient balance to cover transaction fees")

        response = await client.post("/uniswap", json=SWAP_BODY)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Insufficient balance to cover transaction fees",
        }

    @pytest.mark.asyncio
    async def test_versioned_path(self, client, orchestrator):
        response = await client.post("/api/v1/swap", json=SWAP_BODY)

        assert response.status_code == 200
        assert len(orchestrator.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_field(self, client, orchestrator):
        body = {k: v for k, v in SWAP_BODY.items() if k != "fromChain"}

        response = await client.post("/uniswap", json=body)

        assert response.status_code == 422
        assert orchestrator.calls == []

    @pytest.mark.asyncio
    async def test_non_numeric_amount(self, client, orchestrator):
        response = await client.post("/uniswap", json={**SWAP_BODY, "tokenAmount": "1.5e6"})

        assert response.status_code == 422
        assert orchestrator.calls == []
