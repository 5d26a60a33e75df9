"""Chain signers and the transaction dispatcher.

Provides:
- EVMSigner: account-based chains (web3 / eth-account)
- SolanaSigner: instruction-based chains (solders / solana-py)
- TransactionDispatcher: picks the signer for a chain identifier
"""

from swingswap.signing.base import ChainSigner
from swingswap.signing.dispatcher import TransactionDispatcher, get_dispatcher
from swingswap.signing.evm import EVMSigner
from swingswap.signing.solana import SolanaSigner, decode_transaction

__all__ = [
    "ChainSigner",
    "EVMSigner",
    "SolanaSigner",
    "TransactionDispatcher",
    "decode_transaction",
    "get_dispatcher",
]
