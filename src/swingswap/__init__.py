"""Swingswap - cross-chain swap execution through the Swing aggregator."""

__version__ = "0.1.0"
