"""Staking reward income reports priced from historical exchange candles."""

__version__ = "0.1.0"
