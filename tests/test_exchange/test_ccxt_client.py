"""Tests for CcxtClient.

All tests use mocked ccxt exchange objects to avoid real API calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from stakegain.config import ExchangeSettings
from stakegain.exceptions import ConfigurationError, StakeGainError
from stakegain.exchange.ccxt_client import CcxtClient


@pytest.fixture
def exchange_settings() -> ExchangeSettings:
    return ExchangeSettings(name="binance", timeout_ms=5000)


@pytest.fixture
def mock_exchange() -> MagicMock:
    exchange = MagicMock()
    exchange.load_markets = AsyncMock(return_value={"DOT/EUR": {}, "DOT/USDT": {}})
    exchange.close = AsyncMock()
    exchange.fetch_ohlcv = AsyncMock(return_value=[[1640995200000, 1, 2, 0.5, 1.5, 10]])
    exchange.parse_timeframe.return_value = 86400
    return exchange


@pytest.fixture
def client(exchange_settings: ExchangeSettings, mock_exchange: MagicMock) -> CcxtClient:
    with patch("stakegain.exchange.ccxt_client.ccxt_async") as ccxt_mod:
        ccxt_mod.binance.return_value = mock_exchange
        return CcxtClient(exchange_settings)


class TestInit:
    def test_public_config(self, exchange_settings: ExchangeSettings) -> None:
        with patch("stakegain.exchange.ccxt_client.ccxt_async") as ccxt_mod:
            CcxtClient(exchange_settings)
            config = ccxt_mod.binance.call_args[0][0]
        assert config["enableRateLimit"] is True
        assert config["timeout"] == 5000
        assert "apiKey" not in config

    def test_unknown_exchange(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown ccxt exchange") as exc_info:
            CcxtClient(ExchangeSettings(name="not_an_exchange"))
        assert isinstance(exc_info.value, StakeGainError)
        assert isinstance(exc_info.value, ValueError)


class TestCalls:
    @pytest.mark.asyncio
    async def test_connect_loads_markets(self, client: CcxtClient, mock_exchange: MagicMock) -> None:
        await client.connect()
        mock_exchange.load_markets.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close(self, client: CcxtClient, mock_exchange: MagicMock) -> None:
        await client.close()
        mock_exchange.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_ohlcv_delegates(self, client: CcxtClient, mock_exchange: MagicMock) -> None:
        rows = await client.fetch_ohlcv("DOT/EUR", timeframe="1d", since=1640995200000, limit=5)
        assert rows == [[1640995200000, 1, 2, 0.5, 1.5, 10]]
        mock_exchange.fetch_ohlcv.assert_awaited_once_with(
            "DOT/EUR", timeframe="1d", since=1640995200000, limit=5, params={}
        )

    def test_timeframe_duration_ms(self, client: CcxtClient, mock_exchange: MagicMock) -> None:
        assert client.timeframe_duration_ms("1d") == 86_400_000
        mock_exchange.parse_timeframe.assert_called_once_with("1d")
