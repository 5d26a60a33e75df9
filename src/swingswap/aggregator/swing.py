"""Swing cross-chain aggregator client.

Wraps the four transfer endpoints used to execute a swap:
quote, allowance, approve and send.
"""

import logging
from typing import Any, Optional

import httpx

from swingswap.config import get_settings
from swingswap.errors import AggregatorError

logger = logging.getLogger(__name__)

SWING_API_URL = "https://swap.prod.swing.xyz/v0/transfer"


class SwingClient:
    """Thin async client for the Swing transfer API."""

    def __init__(
        self,
        base_url: str = SWING_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"Swing {method} {endpoint}")

        try:
            async with self._client() as client:
                if method == "GET":
                    response = await client.get(url, params=params, headers={"Accept": "application/json"})
                else:
                    response = await client.post(
                        url,
                        json=json,
                        headers={"Content-Type": "application/json"},
                    )
        except httpx.HTTPError as e:
            raise AggregatorError(f"Swing {endpoint} request failed: {type(e).__name__}: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Swing API error: {response.status_code} - {response.text}")
            raise AggregatorError(
                f"Swing {endpoint} error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AggregatorError(f"Swing {endpoint} returned invalid JSON") from e

    async def get_quote(self, params: dict) -> list:
        """Get available routes.

        Returns:
            List of routes (possibly empty)
        """
        data = await self._request("GET", "quote", params=params)
        routes = data.get("routes") if isinstance(data, dict) else None
        if routes is None:
            raise AggregatorError("Swing quote response has no routes")
        logger.info(f"Swing returned {len(routes)} route(s)")
        return routes

    async def get_allowance(self, params: dict) -> Any:
        """Get current allowance of the source token for a bridge."""
        data = await self._request("GET", "allowance", params=params)
        if not isinstance(data, dict) or "allowance" not in data:
            raise AggregatorError("Swing allowance response has no allowance")
        return data["allowance"]

    async def get_approval(self, params: dict) -> dict:
        """Get the approval transaction for a bridge."""
        data = await self._request("GET", "approve", params=params)
        txs = data.get("tx") if isinstance(data, dict) else None
        if not txs:
            raise AggregatorError("Swing approve response has no transaction")
        return txs[0] if isinstance(txs, list) else txs

    async def send(self, body: dict) -> dict:
        """Submit a route for execution and get the transaction to sign."""
        data = await self._request("POST", "send", json=body)
        tx = data.get("tx") if isinstance(data, dict) else None
        if not tx:
            raise AggregatorError("Swing send response has no transaction")
        return tx


def create_swing_client() -> SwingClient:
    """Create a Swing client from settings."""
    settings = get_settings()
    return SwingClient(base_url=settings.swing_api_url, timeout=settings.aggregator_timeout)
