"""Data model shared by the orchestrator, dispatcher and chain signers."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from swingswap.chains import ChainFamily

Amount = Union[int, str]

NO_QUOTES_MESSAGE = "No Quotes Available"


def parse_amount(value: Any) -> int:
    """Parse an aggregator amount into an integer of base units.

    Accepts ints, decimal strings and 0x-prefixed hex strings. None is zero.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)

    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)

    try:
        return int(Decimal(text))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")


@dataclass(frozen=True)
class TransactionDescriptor:
    """Chain-agnostic transaction envelope produced by the aggregator.

    Attributes:
        chain: Execution family that must sign this transaction
        data: Hex payload. Call data for EVM, a whole serialized
            transaction for Solana.
        from_address: Sender address
        to_address: Target contract/account
        value: Native value to transfer (base units)
        gas_limit: Gas limit supplied by the aggregator (EVM only)
    """
    chain: ChainFamily
    data: str
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    value: Optional[Amount] = None
    gas_limit: Optional[Amount] = None

    @classmethod
    def from_aggregator(cls, payload: dict, chain: ChainFamily) -> "TransactionDescriptor":
        """Build a descriptor from an aggregator ``tx`` object."""
        if not isinstance(payload, dict) or not payload.get("data"):
            raise ValueError("Aggregator transaction has no data")

        return cls(
            chain=chain,
            data=payload["data"],
            from_address=payload.get("from"),
            to_address=payload.get("to"),
            value=payload.get("value"),
            gas_limit=payload.get("gas", payload.get("gasLimit")),
        )

    @property
    def raw_bytes(self) -> bytes:
        """Decode the hex payload."""
        text = self.data.strip()
        if text.startswith(("0x", "0X")):
            text = text[2:]
        return bytes.fromhex(text)


@dataclass
class SwapParams:
    """Parameters of one swap/bridge request."""
    from_chain: str
    from_token_address: str
    from_user_address: str
    token_symbol: str
    to_token_address: str
    to_chain: str
    token_amount: str
    to_token_symbol: str
    to_user_address: str
    project_id: Optional[str] = None

    @property
    def amount(self) -> int:
        return parse_amount(self.token_amount)

    def quote_params(self) -> dict:
        """Query parameters for the quote call."""
        params = {
            "fromChain": self.from_chain,
            "fromTokenAddress": self.from_token_address,
            "fromUserAddress": self.from_user_address,
            "tokenSymbol": self.token_symbol,
            "toTokenAddress": self.to_token_address,
            "toChain": self.to_chain,
            "tokenAmount": self.token_amount,
            "toTokenSymbol": self.to_token_symbol,
            "toUserAddress": self.to_user_address,
        }
        if self.project_id:
            params["projectId"] = self.project_id
        return params

    def allowance_params(self, integration: str) -> dict:
        """Query parameters for the allowance call."""
        return {
            "bridge": integration,
            "fromAddress": self.from_user_address,
            "fromChain": self.from_chain,
            "toChain": self.to_chain,
            "tokenAddress": self.from_token_address,
            "tokenSymbol": self.token_symbol,
            "toTokenSymbol": self.to_token_symbol,
            "toTokenAddress": self.to_token_address,
        }

    def approval_params(self, integration: str) -> dict:
        """Query parameters for the approve call."""
        params = self.allowance_params(integration)
        params["tokenAmount"] = self.token_amount
        return params

    def send_params(self, route: Any) -> dict:
        """JSON body for the send call."""
        body = {
            "fromUserAddress": self.from_user_address,
            "toUserAddress": self.to_user_address,
            "tokenSymbol": self.token_symbol,
            "fromTokenAddress": self.from_token_address,
            "fromChain": self.from_chain,
            "toTokenSymbol": self.to_token_symbol,
            "toTokenAddress": self.to_token_address,
            "toChain": self.to_chain,
            "tokenAmount": self.token_amount,
            "route": route,
        }
        if self.project_id:
            body["projectId"] = self.project_id
        return body


@dataclass
class SettlementResult:
    """Result of one orchestration run."""
    success: bool
    tx_hash: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def settled(cls, tx_hash: str) -> "SettlementResult":
        return cls(success=True, tx_hash=tx_hash)

    @classmethod
    def no_quotes(cls) -> "SettlementResult":
        return cls(success=False, message=NO_QUOTES_MESSAGE)

    @classmethod
    def failed(cls, error: str) -> "SettlementResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        """Convert to the response shape."""
        data: dict = {"success": self.success}
        if self.tx_hash is not None:
            data["txHash"] = self.tx_hash
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        return data
