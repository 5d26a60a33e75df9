"""Routes aggregator transactions to the signer of their chain family."""

import logging
from typing import Optional

from swingswap.chains import ChainFamily, resolve_chain_family
from swingswap.config import get_settings
from swingswap.models import TransactionDescriptor
from swingswap.signing.evm import EVMSigner
from swingswap.signing.solana import SolanaSigner

logger = logging.getLogger(__name__)


class TransactionDispatcher:
    """Selects the chain signer for a transaction and hands it over.

    Stateless per call: no retries and no caching.
    """

    def __init__(
        self,
        evm_signer: EVMSigner,
        solana_signer: SolanaSigner,
        strict_chain_routing: bool = False,
    ):
        self.evm_signer = evm_signer
        self.solana_signer = solana_signer
        self.strict_chain_routing = strict_chain_routing

    def family_for(self, chain: str) -> ChainFamily:
        return resolve_chain_family(chain, strict=self.strict_chain_routing)

    async def dispatch(self, chain: str, payload: dict) -> str:
        """Sign and settle an aggregator transaction on ``chain``.

        Args:
            chain: Source chain identifier (e.g. "ethereum", "solana")
            payload: Aggregator ``tx`` object

        Returns:
            Settlement transaction id
        """
        family = self.family_for(chain)
        descriptor = TransactionDescriptor.from_aggregator(payload, family)
        return await self.dispatch_descriptor(descriptor)

    async def dispatch_descriptor(self, descriptor: TransactionDescriptor) -> str:
        """Send a descriptor to the signer of its family."""
        if descriptor.chain is ChainFamily.INSTRUCTION_BASED:
            signer = self.solana_signer
        elif descriptor.chain is ChainFamily.ACCOUNT_BASED:
            signer = self.evm_signer
        else:
            raise ValueError(f"Unhandled chain family: {descriptor.chain}")

        logger.info(f"Dispatching {descriptor.chain.value} transaction to {signer!r}")
        return await signer.sign_and_send(descriptor)


_dispatcher: Optional[TransactionDispatcher] = None


def get_dispatcher() -> TransactionDispatcher:
    """Get or create the process-wide dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        settings = get_settings()
        _dispatcher = TransactionDispatcher(
            evm_signer=EVMSigner(
                settings.evm_private_key,
                settings.evm_rpc_url,
                confirmation_timeout=settings.evm_confirmation_timeout,
            ),
            solana_signer=SolanaSigner(
                settings.sol_private_key,
                settings.sol_rpc_url,
                commitment=settings.sol_commitment,
            ),
            strict_chain_routing=settings.strict_chain_routing,
        )
    return _dispatcher


def reset_dispatcher():
    """Reset the dispatcher instance (for testing)."""
    global _dispatcher
    _dispatcher = None
