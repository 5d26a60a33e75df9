"""Aggregator API clients."""

from swingswap.aggregator.swing import SwingClient, create_swing_client

__all__ = ["SwingClient", "create_swing_client"]
