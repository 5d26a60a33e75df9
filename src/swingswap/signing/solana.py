"""Signer for Solana (instruction-based) transactions.

The aggregator returns a hex-encoded serialized transaction that may be
either a legacy transaction or a versioned (v0) transaction. The payload
is decoded as legacy first and as versioned on failure; the result is a
closed set of variants (LegacyTx, VersionedTx) and every later step
(blockhash stamping, fee estimation, signing) is a method on the variant.

Before signing, the blockhash embedded by the aggregator is replaced with
a fresh one and the fee for the stamped message is checked against the
held balance.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

import base58
import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import (
    RPCException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.pubkey import Pubkey
from solders.transaction import Transaction, VersionedTransaction

from swingswap.chains import ChainFamily
from swingswap.errors import (
    DecodeError,
    ExecutionError,
    InsufficientFundsError,
    InvalidKeyConfiguration,
    NetworkError,
    SubmissionError,
)
from swingswap.models import TransactionDescriptor
from swingswap.signing.base import ChainSigner

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
KEYPAIR_LENGTH = 64
SIGNATURE_LENGTH = 64
VERSION_PREFIX_MASK = 0x80


def _message_offset(raw: bytes) -> int:
    """Return the offset of the message after the signature array."""
    count = 0
    shift = 0
    index = 0
    while True:
        if index >= len(raw):
            raise ValueError("Truncated signature count")
        byte = raw[index]
        count |= (byte & 0x7F) << shift
        index += 1
        if not byte & 0x80:
            break
        shift += 7
    offset = index + count * SIGNATURE_LENGTH
    if offset >= len(raw):
        raise ValueError("Transaction has no message")
    return offset


def _restamp_legacy_message(message: Message, blockhash: Hash, fee_payer: Pubkey) -> Message:
    """Copy a legacy message with a new blockhash.

    The account list is kept as built. The message must already be paid by
    ``fee_payer``; instructions reference accounts by index, so the key list
    cannot be rewritten.
    """
    account_keys = list(message.account_keys)
    if not account_keys or account_keys[0] != fee_payer:
        payer = account_keys[0] if account_keys else None
        raise SubmissionError(
            f"Transaction fee payer {payer} is not the signer {fee_payer}"
        )

    header = message.header
    return Message.new_with_compiled_instructions(
        header.num_required_signatures,
        header.num_readonly_signed_accounts,
        header.num_readonly_unsigned_accounts,
        account_keys,
        blockhash,
        list(message.instructions),
    )


@dataclass(frozen=True)
class LegacyTx:
    """Legacy (pre-versioning) Solana transaction."""
    transaction: Transaction

    kind = "legacy"

    @property
    def message(self) -> Message:
        return self.transaction.message

    def stamp(self, blockhash: Hash, fee_payer: Pubkey) -> "LegacyTx":
        """Set recent blockhash. The fee payer must already be the signer."""
        message = _restamp_legacy_message(self.message, blockhash, fee_payer)
        return LegacyTx(Transaction.new_unsigned(message))

    def sign(self, keypair: Keypair) -> bytes:
        signed = Transaction([keypair], self.message, self.message.recent_blockhash)
        return bytes(signed)


@dataclass(frozen=True)
class VersionedTx:
    """Versioned Solana transaction (v0 or legacy message inside)."""
    transaction: VersionedTransaction

    kind = "versioned"

    @property
    def message(self) -> Union[Message, MessageV0]:
        return self.transaction.message

    def stamp(self, blockhash: Hash, fee_payer: Pubkey) -> "VersionedTx":
        """Set the recent blockhash inside the message."""
        message = self.message
        if isinstance(message, MessageV0):
            stamped = MessageV0(
                message.header,
                list(message.account_keys),
                blockhash,
                list(message.instructions),
                list(message.address_table_lookups),
            )
        else:
            stamped = _restamp_legacy_message(message, blockhash, message.account_keys[0])
        return VersionedTx(VersionedTransaction.populate(stamped, list(self.transaction.signatures)))

    def sign(self, keypair: Keypair) -> bytes:
        signed = VersionedTransaction(self.message, [keypair])
        return bytes(signed)


DecodedTransaction = Union[LegacyTx, VersionedTx]


def decode_legacy(raw: bytes) -> LegacyTx:
    """Decode a legacy transaction, rejecting versioned messages."""
    offset = _message_offset(raw)
    if raw[offset] & VERSION_PREFIX_MASK:
        raise ValueError("Message carries a version prefix")
    return LegacyTx(Transaction.from_bytes(raw))


def decode_versioned(raw: bytes) -> VersionedTx:
    """Decode a versioned transaction."""
    return VersionedTx(VersionedTransaction.from_bytes(raw))


def decode_transaction(raw: bytes) -> DecodedTransaction:
    """Decode a serialized transaction of unknown format.

    Tries the legacy layout first and falls back to the versioned layout.

    Raises:
        DecodeError: If the payload is neither
    """
    try:
        return decode_legacy(raw)
    except Exception as legacy_error:
        logger.debug(f"Legacy decode failed ({legacy_error}), trying versioned")
        try:
            return decode_versioned(raw)
        except Exception as versioned_error:
            raise DecodeError(
                f"Transaction is neither legacy ({legacy_error}) "
                f"nor versioned ({versioned_error})"
            ) from versioned_error


def load_keypair(secret: Optional[str]) -> Keypair:
    """Decode a base58 64-byte keypair secret.

    Raises:
        InvalidKeyConfiguration: If the secret is missing, not base58,
            or not 64 bytes long
    """
    if not secret:
        raise InvalidKeyConfiguration("SOL_PRIVATE_KEY not configured")

    try:
        key_bytes = base58.b58decode(secret.strip())
    except ValueError as e:
        raise InvalidKeyConfiguration("SOL_PRIVATE_KEY is not valid base58") from e

    if len(key_bytes) != KEYPAIR_LENGTH:
        raise InvalidKeyConfiguration(
            "Invalid private key length. Solana private keys must be 64 bytes."
        )

    try:
        return Keypair.from_bytes(key_bytes)
    except Exception as e:
        raise InvalidKeyConfiguration("SOL_PRIVATE_KEY is not a valid keypair") from e


class SolanaSigner(ChainSigner):
    """Signer for Solana transactions produced by the aggregator."""

    family = ChainFamily.INSTRUCTION_BASED

    def __init__(
        self,
        private_key: Optional[str],
        rpc_url: str,
        commitment: str = "confirmed",
    ):
        super().__init__(rpc_url)
        self._private_key = private_key
        self.commitment = Commitment(commitment)
        self._keypair: Optional[Keypair] = None

    @property
    def keypair(self) -> Keypair:
        """Held keypair, validated on first use."""
        if self._keypair is None:
            self._keypair = load_keypair(self._private_key)
        return self._keypair

    @property
    def address(self) -> str:
        return str(self.keypair.pubkey())

    def _connect(self) -> AsyncClient:
        return AsyncClient(self.rpc_url, commitment=self.commitment)

    async def sign_and_send(self, descriptor: TransactionDescriptor) -> str:
        """Refresh, fee-check, sign, send and confirm a Solana transaction.

        Args:
            descriptor: Descriptor whose data is a hex serialized transaction

        Returns:
            Transaction signature (base58)

        Raises:
            InvalidKeyConfiguration: Held key is not a 64-byte keypair
            DecodeError: Payload is neither legacy nor versioned
            InsufficientFundsError: Balance below the estimated fee
            NetworkError: RPC unreachable or confirmation timed out
            SubmissionError: RPC rejected the transaction
            ExecutionError: Transaction confirmed with an on-chain error
        """
        keypair = self.keypair
        wallet = keypair.pubkey()

        try:
            raw = descriptor.raw_bytes
        except ValueError as e:
            raise DecodeError(f"Transaction data is not valid hex: {e}") from e
        transaction = decode_transaction(raw)
        logger.info(f"Decoded {transaction.kind} Solana transaction ({len(raw)} bytes)")

        try:
            async with self._connect() as client:
                balance = (await client.get_balance(wallet)).value
                logger.info(
                    f"Wallet balance: {Decimal(balance) / LAMPORTS_PER_SOL} SOL ({wallet})"
                )

                blockhash = (await client.get_latest_blockhash()).value.blockhash
                transaction = transaction.stamp(blockhash, wallet)

                fee = (await client.get_fee_for_message(transaction.message)).value
                if fee is None:
                    raise NetworkError(f"Fee estimate unavailable for blockhash {blockhash}")
                if balance < fee:
                    raise InsufficientFundsError(
                        f"Insufficient balance to cover transaction fees: "
                        f"balance={balance} fee={fee} lamports"
                    )

                try:
                    signed = transaction.sign(keypair)
                except Exception as e:
                    raise SubmissionError(f"Failed to sign Solana transaction: {e}") from e

                tx_sig = (await client.send_raw_transaction(signed)).value
                logger.info(f"Solana transaction submitted: {tx_sig}")

                confirmation = await client.confirm_transaction(tx_sig, self.commitment)

        except (UnconfirmedTxError, TransactionExpiredBlockheightExceededError) as e:
            raise NetworkError(f"Solana transaction not confirmed: {e}") from e
        except RPCException as e:
            raise SubmissionError(f"Solana transaction rejected: {e}") from e
        except (SolanaRpcException, httpx.HTTPError) as e:
            raise NetworkError(f"Solana RPC unreachable ({self.rpc_url}): {e}") from e

        statuses = confirmation.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            logger.error(f"Solana transaction {tx_sig} failed: {status.err}")
            raise ExecutionError(status.err)

        return str(tx_sig)
