"""Signer for EVM-compatible (account-based) chains.

Turns an aggregator transaction descriptor into a signed, broadcast and
mined transaction using the held private key.
"""

import asyncio
import logging
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import TimeExhausted, Web3Exception

from swingswap.chains import ChainFamily
from swingswap.errors import (
    InvalidKeyConfiguration,
    NetworkError,
    SubmissionError,
    SwingswapError,
)
from swingswap.models import TransactionDescriptor, parse_amount
from swingswap.signing.base import ChainSigner

logger = logging.getLogger(__name__)


class EVMSigner(ChainSigner):
    """Signer for EVM chains (Ethereum, Polygon, BSC, ...)."""

    family = ChainFamily.ACCOUNT_BASED

    def __init__(
        self,
        private_key: Optional[str],
        rpc_url: str,
        confirmation_timeout: int = 120,
        web3: Optional[AsyncWeb3] = None,
    ):
        super().__init__(rpc_url)
        self._private_key = private_key
        self.confirmation_timeout = confirmation_timeout
        self._web3 = web3
        self._account: Optional[LocalAccount] = None

    @property
    def web3(self) -> AsyncWeb3:
        """Lazy load web3 instance."""
        if self._web3 is None:
            self._web3 = AsyncWeb3(AsyncHTTPProvider(self.rpc_url))
        return self._web3

    @property
    def account(self) -> LocalAccount:
        """Account bound to the held key."""
        if self._account is None:
            if not self._private_key:
                raise InvalidKeyConfiguration("EVM_PRIVATE_KEY not configured")
            try:
                self._account = Account.from_key(self._private_key)
            except Exception as e:
                raise InvalidKeyConfiguration(f"Invalid EVM private key: {type(e).__name__}") from e
        return self._account

    @property
    def address(self) -> str:
        return self.account.address

    def _build_params(self, descriptor: TransactionDescriptor) -> dict:
        """Map descriptor fields onto web3 transaction params."""
        account = self.account

        if descriptor.from_address and descriptor.from_address.lower() != account.address.lower():
            raise SubmissionError(
                f"Transaction sender {descriptor.from_address} does not match "
                f"signer {account.address}"
            )

        data = descriptor.data if descriptor.data.startswith("0x") else f"0x{descriptor.data}"
        tx_params = {
            "from": account.address,
            "data": data,
            "value": parse_amount(descriptor.value),
        }
        if descriptor.to_address:
            tx_params["to"] = Web3.to_checksum_address(descriptor.to_address)

        if descriptor.gas_limit is not None:
            gas_limit = parse_amount(descriptor.gas_limit)
            if gas_limit <= 0:
                raise SubmissionError(f"Invalid gas limit: {descriptor.gas_limit!r}")
            tx_params["gas"] = gas_limit

        return tx_params

    async def sign_and_send(self, descriptor: TransactionDescriptor) -> str:
        """Sign and send an EVM transaction, waiting for one confirmation.

        Args:
            descriptor: Descriptor with data, from, to, value and gas limit

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            InvalidKeyConfiguration: Key missing or malformed
            NetworkError: Endpoint unreachable or receipt not found in time
            SubmissionError: Node rejected the transaction or it reverted
        """
        tx_params = self._build_params(descriptor)
        w3 = self.web3

        try:
            tx_params["nonce"] = await w3.eth.get_transaction_count(tx_params["from"], "pending")
            tx_params["chainId"] = await w3.eth.chain_id

            # Gas limit comes from the aggregator; only estimate when it is absent
            if "gas" not in tx_params:
                logger.warning("Descriptor has no gas limit, estimating")
                tx_params["gas"] = await w3.eth.estimate_gas(tx_params)

            if "gasPrice" not in tx_params and "maxFeePerGas" not in tx_params:
                tx_params["gasPrice"] = await w3.eth.gas_price

            signed_tx = self.account.sign_transaction(tx_params)
            tx_hash = await w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            tx_hash_hex = Web3.to_hex(tx_hash)
            logger.info(f"EVM transaction submitted: {tx_hash_hex} (nonce={tx_params['nonce']})")

            receipt = await w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.confirmation_timeout
            )

        except SwingswapError:
            raise
        except TimeExhausted as e:
            raise NetworkError(f"Transaction not mined after {self.confirmation_timeout}s: {e}") from e
        except (ConnectionError, OSError, asyncio.TimeoutError) as e:
            raise NetworkError(f"EVM RPC unreachable ({self.rpc_url}): {e}") from e
        except (Web3Exception, ValueError) as e:
            raise SubmissionError(f"EVM transaction rejected: {e}") from e

        logger.info(
            f"Transaction receipt: hash={tx_hash_hex} block={receipt.get('blockNumber')} "
            f"status={receipt.get('status')} gas_used={receipt.get('gasUsed')}"
        )

        if receipt.get("status") == 0:
            raise SubmissionError(f"Transaction {tx_hash_hex} failed (reverted)")

        return tx_hash_hex
