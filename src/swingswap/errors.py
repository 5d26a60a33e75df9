"""Exceptions raised while orchestrating and finalizing a swap.

Every error aborts the swap attempt. The orchestrator turns them into a
failed SettlementResult carrying str(error).
"""

from typing import Any, Optional


class SwingswapError(Exception):
    """Base class for all swap orchestration errors."""
    pass


class InvalidKeyConfiguration(SwingswapError):
    """Signing key is missing or malformed."""
    pass


class InsufficientFundsError(SwingswapError):
    """Held account cannot pay the network fee."""
    pass


class DecodeError(SwingswapError):
    """Transaction payload could not be decoded in any supported format."""
    pass


class NetworkError(SwingswapError):
    """Chain endpoint is unreachable or did not answer in time."""
    pass


class SubmissionError(SwingswapError):
    """The node rejected the transaction."""
    pass


class ExecutionError(SwingswapError):
    """Transaction was confirmed but failed on-chain."""

    def __init__(self, detail: Any, message: Optional[str] = None):
        self.detail = detail
        super().__init__(message or f"Transaction failed: {detail}")


class AggregatorError(SwingswapError):
    """Aggregator API call failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UnsupportedChainError(SwingswapError):
    """Chain identifier is not recognized under strict routing."""
    pass
