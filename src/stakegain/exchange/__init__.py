"""Exchange client layer -- public kline data via ccxt."""

from stakegain.exchange.ccxt_client import CcxtClient
from stakegain.exchange.client import CandleClient

__all__ = ["CandleClient", "CcxtClient"]
