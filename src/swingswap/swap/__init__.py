"""Swap orchestration."""

from swingswap.swap.orchestrator import SwapOrchestrator

__all__ = ["SwapOrchestrator"]
