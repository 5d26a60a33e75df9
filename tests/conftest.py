"""Pytest configuration and fixtures."""

import os
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import base58
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction, VersionedTransaction

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ.pop("EVM_PRIVATE_KEY", None)
os.environ.pop("SOL_PRIVATE_KEY", None)

from swingswap.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Re-read settings for each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sol_keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def sol_secret(sol_keypair: Keypair) -> str:
    """Base58 64-byte secret for the test keypair."""
    return base58.b58encode(bytes(sol_keypair)).decode()


def _transfer_ix(payer: Pubkey):
    return transfer(TransferParams(from_pubkey=payer, to_pubkey=Pubkey.new_unique(), lamports=1_000))


@pytest.fixture
def legacy_tx_hex(sol_keypair: Keypair) -> str:
    """Unsigned legacy transaction paid by the test keypair."""
    payer = sol_keypair.pubkey()
    message = Message.new_with_blockhash([_transfer_ix(payer)], payer, Hash.default())
    return bytes(Transaction.new_unsigned(message)).hex()


@pytest.fixture
def versioned_tx_hex(sol_keypair: Keypair) -> str:
    """Unsigned v0 transaction paid by the test keypair."""
    payer = sol_keypair.pubkey()
    message = MessageV0.try_compile(payer, [_transfer_ix(payer)], [], Hash.default())
    return bytes(VersionedTransaction.populate(message, [Signature.default()])).hex()


@pytest.fixture
def solana_rpc() -> Callable:
    """Build a mocked Solana AsyncClient context manager.

    Returns a factory: (balance, fee, err) -> (context_manager, client).
    """

    def factory(balance: int = 1_000_000_000, fee: int = 5_000, err=None):
        client = MagicMock()
        client.get_balance = AsyncMock(return_value=MagicMock(value=balance))
        client.get_latest_blockhash = AsyncMock(
            return_value=MagicMock(value=MagicMock(blockhash=Hash.new_unique()))
        )
        client.get_fee_for_message = AsyncMock(return_value=MagicMock(value=fee))
        client.send_raw_transaction = AsyncMock(return_value=MagicMock(value=Signature.default()))
        client.confirm_transaction = AsyncMock(return_value=MagicMock(value=[MagicMock(err=err)]))

        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=client)
        context.__aexit__ = AsyncMock(return_value=False)
        return context, client

    return factory


class FakeEth:
    """Async web3 ``eth`` namespace stub."""

    def __init__(self, status: int = 1, chain_id: int = 1, tx_hash: bytes = b"\xab" * 32):
        self._chain_id = chain_id
        self._gas_price = 30_000_000_000
        self.get_transaction_count = AsyncMock(return_value=7)
        self.estimate_gas = AsyncMock(return_value=21_000)
        self.send_raw_transaction = AsyncMock(return_value=tx_hash)
        self.wait_for_transaction_receipt = AsyncMock(
            return_value={"status": status, "blockNumber": 100, "gasUsed": 21_000}
        )

    @staticmethod
    async def _resolve(value):
        return value

    @property
    def chain_id(self):
        return self._resolve(self._chain_id)

    @property
    def gas_price(self):
        return self._resolve(self._gas_price)


@pytest.fixture
def fake_web3() -> MagicMock:
    web3 = MagicMock()
    web3.eth = FakeEth()
    return web3
