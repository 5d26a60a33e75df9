"""Chain identifier to execution family resolution."""

import logging
from enum import Enum

from swingswap.errors import UnsupportedChainError

logger = logging.getLogger(__name__)


class ChainFamily(str, Enum):
    """Execution model of a chain."""
    ACCOUNT_BASED = "evm"          # nonce + fee payer, EVM-style
    INSTRUCTION_BASED = "solana"   # instruction list + recent blockhash


# Swing chain slugs
INSTRUCTION_BASED_CHAINS = frozenset({"solana"})

ACCOUNT_BASED_CHAINS = frozenset({
    "ethereum",
    "polygon",
    "bsc",
    "arbitrum",
    "optimism",
    "avalanche",
    "base",
    "gnosis",
    "fantom",
    "linea",
    "zksync",
    "scroll",
    "blast",
    "mantle",
    "celo",
    "moonbeam",
    "aurora",
    "metis",
    "polygon-zkevm",
})


def resolve_chain_family(chain: str, strict: bool = False) -> ChainFamily:
    """Map a chain identifier to its execution family.

    Identifiers that are not explicitly known are treated as account-based
    unless ``strict`` is set, in which case UnsupportedChainError is raised.
    """
    name = (chain or "").strip().lower()

    if name in INSTRUCTION_BASED_CHAINS:
        return ChainFamily.INSTRUCTION_BASED
    if name in ACCOUNT_BASED_CHAINS:
        return ChainFamily.ACCOUNT_BASED

    if strict:
        raise UnsupportedChainError(f"Unsupported chain: {chain!r}")

    logger.warning(f"Unknown chain {chain!r}, assuming account-based (EVM)")
    return ChainFamily.ACCOUNT_BASED
