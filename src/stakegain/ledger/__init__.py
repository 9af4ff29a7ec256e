"""Reward ledger input and mock ledger generation."""

from stakegain.ledger.mock import write_mock_ledger
from stakegain.ledger.reader import parse_ledger, read_ledger

__all__ = ["parse_ledger", "read_ledger", "write_mock_ledger"]
