"""End-to-end swap/bridge execution.

Steps, strictly in order:
1. Quote: get routes from the aggregator (no routes -> "No Quotes Available")
2. Allowance: check the source token allowance (EVM sources only)
3. Approval: if allowance < amount, sign the approval and wait for it
4. Send: submit the first route for execution
5. Settle: sign and broadcast the returned transaction on the source chain

Any failure aborts the whole flow. A granted approval is left in place.
"""

import logging
from typing import Optional

from swingswap.aggregator.swing import SwingClient, create_swing_client
from swingswap.chains import ChainFamily
from swingswap.errors import AggregatorError, SwingswapError
from swingswap.models import (
    SettlementResult,
    SwapParams,
    TransactionDescriptor,
    parse_amount,
)
from swingswap.signing.dispatcher import TransactionDispatcher, get_dispatcher

logger = logging.getLogger(__name__)


class SwapOrchestrator:
    """Drives quote -> allowance -> approval -> send -> settle."""

    def __init__(
        self,
        aggregator: Optional[SwingClient] = None,
        dispatcher: Optional[TransactionDispatcher] = None,
    ):
        self.aggregator = aggregator or create_swing_client()
        self.dispatcher = dispatcher or get_dispatcher()

    async def execute_swap(self, params: SwapParams) -> SettlementResult:
        """Execute one swap request.

        Never raises: failures are returned as a failed SettlementResult.
        """
        logger.info(
            f"Swap requested: {params.token_amount} {params.token_symbol} "
            f"{params.from_chain} -> {params.to_token_symbol} {params.to_chain}"
        )

        try:
            return await self._run(params)
        except SwingswapError as e:
            logger.error(f"Swap failed: {type(e).__name__}: {e}")
            return SettlementResult.failed(str(e))
        except Exception as e:
            logger.exception(f"Swap failed with unexpected error: {e}")
            return SettlementResult.failed(str(e))

    async def _run(self, params: SwapParams) -> SettlementResult:
        source_family = self.dispatcher.family_for(params.from_chain)

        # Step 1: quote
        routes = await self.aggregator.get_quote(params.quote_params())
        if len(routes) < 1:
            logger.info("No quotes available")
            return SettlementResult.no_quotes()

        selected = routes[0]
        try:
            integration = selected["quote"]["integration"]
        except (KeyError, TypeError) as e:
            raise AggregatorError("Swing route has no quote integration") from e
        logger.info(f"Selected route via {integration}")

        # Steps 2-3: allowance and approval (EVM sources only)
        if source_family is ChainFamily.ACCOUNT_BASED:
            await self._ensure_allowance(params, integration)

        # Step 4: send
        tx = await self.aggregator.send(params.send_params(selected.get("route")))

        # Step 5: sign and settle on the source chain
        tx_hash = await self.dispatcher.dispatch(params.from_chain, tx)
        logger.info(f"Swap settled: {tx_hash}")
        return SettlementResult.settled(tx_hash)

    async def _ensure_allowance(self, params: SwapParams, integration: str) -> Optional[str]:
        """Approve the bridge if the current allowance is too low.

        Returns:
            Approval tx hash if an approval was sent, None otherwise
        """
        allowance = parse_amount(
            await self.aggregator.get_allowance(params.allowance_params(integration))
        )
        amount = params.amount

        if allowance >= amount:
            logger.info(f"Allowance sufficient: {allowance} >= {amount}")
            return None

        logger.info(f"Allowance {allowance} < {amount}, approving {integration}")
        approval = await self.aggregator.get_approval(params.approval_params(integration))
        descriptor = TransactionDescriptor.from_aggregator(approval, ChainFamily.ACCOUNT_BASED)

        # Returns only once the approval is mined
        approval_hash = await self.dispatcher.evm_signer.sign_and_send(descriptor)
        logger.info(f"Token approval tx: {approval_hash}")
        return approval_hash
