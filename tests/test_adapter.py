"""Tests for the unified Pionex adapter."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from conftest import envelope
from pionex_connector.adapters.pionex import PionexAdapter, PionexRestClient
from pionex_connector.config import ConnectorSettings
from pionex_connector.errors import (
    ArgumentsRequired,
    BadRequest,
    BadSymbol,
    NotSupported,
)
from pionex_connector.models import OrderStatus


def _rest(responses: Optional[Dict[str, Any]] = None) -> MagicMock:
    """Fake REST client answering by endpoint path."""
    responses = responses or {}

    def route(path, api="public", method="GET", params=None):
        return responses.get(path, envelope({}))

    rest = MagicMock()
    rest.request = AsyncMock(side_effect=route)
    rest.close = AsyncMock()
    return rest


@pytest.fixture
def settings() -> ConnectorSettings:
    return ConnectorSettings(api_key="key", secret="secret")


def _adapter(description, rest: MagicMock, settings: ConnectorSettings) -> PionexAdapter:
    return PionexAdapter(settings, description=description, rest=rest)


class TestConstruction:
    """Tests for adapter construction."""

    def test_builds_rest_client(self, description, settings) -> None:
        """Without an injected client a PionexRestClient is built."""
        adapter = PionexAdapter(settings, description=description)
        assert isinstance(adapter._rest, PionexRestClient)
        assert adapter._rest.signer.base_url == "https://api.pionex.com"
        assert adapter.exchange_name == "pionex"
        assert repr(adapter) == "PionexAdapter(exchange=pionex)"

    def test_base_url_override(self, description) -> None:
        """The settings base URL wins over the description."""
        adapter = PionexAdapter(
            ConnectorSettings(base_url="http://localhost:8080"), description=description
        )
        assert adapter._rest.signer.base_url == "http://localhost:8080"

    async def test_close(self, description, settings) -> None:
        """close() closes the transport."""
        rest = _rest()
        async with _adapter(description, rest, settings):
            pass
        rest.close.assert_awaited_once()

    async def test_capability_gate(self, description, settings) -> None:
        """Operations flagged off raise NotSupported without a request."""
        has = dict(description.has, fetchTrades=False)
        rest = _rest()
        adapter = _adapter(description.model_copy(update={"has": has}), rest, settings)
        with pytest.raises(NotSupported):
            await adapter.fetch_trades("BTC/USDT")
        rest.request.assert_not_awaited()


class TestMarketData:
    """Tests for public market data operations."""

    async def test_fetch_markets(self, description, settings, symbol_record) -> None:
        """Markets come from common/symbols with the schedule's fees."""
        rest = _rest({"common/symbols": envelope({"symbols": [symbol_record]})})
        markets = await _adapter(description, rest, settings).fetch_markets()

        assert [m.id for m in markets] == ["BTC/USDT"]
        assert markets[0].taker == Decimal("0.0005")
        rest.request.assert_awaited_once_with(
            "common/symbols", api="public", method="GET", params=None
        )

    async def test_fetch_trades(self, description, settings) -> None:
        """Trades are requested with the vendor symbol and limit."""
        trades = [{"tradeId": "1", "price": "10", "size": "1", "side": "SELL",
                   "timestamp": 5, "symbol": "BTC_USDT"}]
        rest = _rest({"market/trades": envelope({"trades": trades})})
        result = await _adapter(description, rest, settings).fetch_trades("BTC/USDT", limit=5)

        assert result[0].symbol == "BTC/USDT"
        assert result[0].is_sell
        rest.request.assert_awaited_once_with(
            "market/trades", api="public", method="GET",
            params={"symbol": "BTC_USDT", "limit": 5},
        )

    async def test_fetch_order_book(self, description, settings) -> None:
        """The depth payload becomes a snapshot for the unified symbol."""
        depth = {"bids": [["100", "1"]], "asks": [["101", "2"]], "updateTime": 7}
        rest = _rest({"market/depth": envelope(depth)})
        book = await _adapter(description, rest, settings).fetch_order_book("BTC/USDT")

        assert book.symbol == "BTC/USDT"
        assert book.best_ask == Decimal("101")
        assert book.spread == Decimal("1")

    async def test_fetch_order_books(self, description, settings) -> None:
        """One depth request is made per symbol."""
        rest = _rest({"market/depth": envelope({"bids": [], "asks": []})})
        books = await _adapter(description, rest, settings).fetch_order_books(
            ["BTC/USDT", "ETH/USDT"], limit=10
        )

        assert list(books) == ["BTC/USDT", "ETH/USDT"]
        assert rest.request.await_args_list == [
            call("market/depth", api="public", method="GET",
                 params={"symbol": "BTC_USDT", "limit": 10}),
            call("market/depth", api="public", method="GET",
                 params={"symbol": "ETH_USDT", "limit": 10}),
        ]

    async def test_fetch_ohlcv(self, description, settings) -> None:
        """The timeframe is mapped and since filters candles locally."""
        klines = [
            {"time": 1000, "open": "1", "high": "2", "low": "1", "close": "2", "volume": "3"},
            {"time": 2000, "open": "2", "high": "3", "low": "2", "close": "3", "volume": "4"},
        ]
        rest = _rest({"market/klines": envelope({"klines": klines})})
        candles = await _adapter(description, rest, settings).fetch_ohlcv(
            "BTC/USDT", timeframe="1h", since=1500, limit=2
        )

        assert [c.timestamp for c in candles] == [2000]
        rest.request.assert_awaited_once_with(
            "market/klines", api="public", method="GET",
            params={"symbol": "BTC_USDT", "interval": "60M", "limit": 2},
        )

    async def test_fetch_ohlcv_unknown_timeframe(self, description, settings) -> None:
        """Unmapped timeframes raise BadRequest."""
        with pytest.raises(BadRequest):
            await _adapter(description, _rest(), settings).fetch_ohlcv("BTC/USDT", "3m")


class TestTickers:
    """Tests for the two-feed ticker operations."""

    STATS = [
        {"symbol": "BTC_USDT", "open": "100", "close": "110", "high": "120", "low": "90"},
        {"symbol": "ETH_USDT", "open": "10", "close": "11", "high": "12", "low": "9"},
    ]
    BOOKS = [
        {"symbol": "BTC_USDT", "bidPrice": "109", "askPrice": "111"},
        {"symbol": "ETH_USDT", "bidPrice": "10.9", "askPrice": "11.1"},
    ]

    def _rest(self) -> MagicMock:
        return _rest({
            "market/tickers": envelope({"tickers": self.STATS}),
            "market/bookTickers": envelope({"tickers": self.BOOKS}),
        })

    async def test_fetch_tickers(self, description, settings) -> None:
        """Both feeds are fetched and joined."""
        rest = self._rest()
        tickers = await _adapter(description, rest, settings).fetch_tickers()

        assert [t.symbol for t in tickers] == ["BTC/USDT", "ETH/USDT"]
        assert [c.args[0] for c in rest.request.await_args_list] == [
            "market/tickers",
            "market/bookTickers",
        ]

    async def test_fetch_tickers_filtered(self, description, settings) -> None:
        """Requested symbols restrict the result."""
        tickers = await _adapter(description, self._rest(), settings).fetch_tickers(["ETH/USDT"])
        assert [t.symbol for t in tickers] == ["ETH/USDT"]

    async def test_fetch_ticker(self, description, settings) -> None:
        """A single ticker passes the symbol to both feeds."""
        rest = self._rest()
        ticker = await _adapter(description, rest, settings).fetch_ticker("BTC/USDT")

        assert ticker.bid == Decimal("109")
        for awaited in rest.request.await_args_list:
            assert awaited.kwargs["params"] == {"symbol": "BTC_USDT"}

    async def test_fetch_ticker_missing(self, description, settings) -> None:
        """A symbol absent from the feeds raises BadSymbol."""
        with pytest.raises(BadSymbol):
            await _adapter(description, self._rest(), settings).fetch_ticker("XRP/USDT")


class TestAccount:
    """Tests for balance and order history operations."""

    async def test_fetch_balance(self, description, settings) -> None:
        """Balances carry the envelope timestamp."""
        data = {"balances": [{"coin": "BTC", "free": "1", "frozen": "0.5"}]}
        rest = _rest({"account/balances": envelope(data, timestamp=99)})
        balance = await _adapter(description, rest, settings).fetch_balance()

        assert balance.timestamp == 99
        assert balance.total == {"BTC": Decimal("1.5")}
        rest.request.assert_awaited_once_with(
            "account/balances", api="private", method="GET", params=None
        )

    async def test_fetch_order(self, description, settings, order_record) -> None:
        """A single order is fetched by id."""
        rest = _rest({"trade/order": envelope(order_record)})
        order = await _adapter(description, rest, settings).fetch_order("1234567890", "BTC/USDT")

        assert order.status == OrderStatus.OPEN
        rest.request.assert_awaited_once_with(
            "trade/order", api="private", method="GET",
            params={"orderId": "1234567890", "symbol": "BTC_USDT"},
        )

    async def test_fetch_order_by_client_order_id(self, description, settings, order_record) -> None:
        """Orders can be looked up by client order id."""
        rest = _rest({"trade/orderByClientOrderId": envelope(order_record)})
        order = await _adapter(description, rest, settings).fetch_order_by_client_order_id(
            "9e3d5ab3", "BTC/USDT"
        )
        assert order.client_order_id == "9e3d5ab3"

    async def test_fetch_open_orders_requires_symbol(self, description, settings) -> None:
        """Open orders are per symbol."""
        with pytest.raises(ArgumentsRequired):
            await _adapter(description, _rest(), settings).fetch_open_orders()

    async def test_fetch_open_orders(self, description, settings, order_record) -> None:
        """Open orders come from trade/openOrders."""
        rest = _rest({"trade/openOrders": envelope({"orders": [order_record]})})
        orders = await _adapter(description, rest, settings).fetch_open_orders("BTC/USDT")
        assert [o.id for o in orders] == ["1234567890"]

    async def test_fetch_orders(self, description, settings) -> None:
        """since and limit map to startTime and limit."""
        rest = _rest()
        await _adapter(description, rest, settings).fetch_orders("BTC/USDT", since=10, limit=3)
        rest.request.assert_awaited_once_with(
            "trade/allOrders", api="private", method="GET",
            params={"symbol": "BTC_USDT", "startTime": 10, "limit": 3},
        )

    async def test_fetch_my_trades(self, description, settings) -> None:
        """Fills are normalized as trades."""
        fills = [{"id": 1, "orderId": 2, "symbol": "BTC_USDT", "side": "BUY",
                  "role": "MAKER", "price": "10", "size": "1"}]
        rest = _rest({"trade/fills": envelope({"fills": fills})})
        trades = await _adapter(description, rest, settings).fetch_my_trades("BTC/USDT")
        assert trades[0].order == "2"

    async def test_fetch_order_trades(self, description, settings) -> None:
        """Order fills are fetched by order id."""
        rest = _rest()
        await _adapter(description, rest, settings).fetch_order_trades("2", "BTC/USDT")
        rest.request.assert_awaited_once_with(
            "trade/fillsByOrderId", api="private", method="GET",
            params={"symbol": "BTC_USDT", "orderId": "2"},
        )


class TestOrders:
    """Tests for order placement and cancellation."""

    async def test_limit_order(self, description, settings) -> None:
        """Limit orders send size and price as strings."""
        rest = _rest({"trade/order": envelope({"orderId": 7, "clientOrderId": "c1"})})
        order = await _adapter(description, rest, settings).create_order(
            "BTC/USDT", "limit", "buy", Decimal("0.01"), Decimal("30000"),
            params={"client_order_id": "c1", "ioc": True},
        )

        assert order.id == "7"
        assert order.symbol == "BTC/USDT"
        rest.request.assert_awaited_once_with(
            "trade/order", api="private", method="POST",
            params={
                "symbol": "BTC_USDT",
                "side": "BUY",
                "type": "LIMIT",
                "clientOrderId": "c1",
                "size": "0.01",
                "price": "30000",
                "IOC": True,
            },
        )

    async def test_limit_order_requires_price(self, description, settings) -> None:
        """Limit orders without a price are rejected before any request."""
        rest = _rest()
        with pytest.raises(ArgumentsRequired):
            await _adapter(description, rest, settings).create_order(
                "BTC/USDT", "limit", "buy", Decimal("1")
            )
        rest.request.assert_not_awaited()

    async def test_market_buy_with_cost(self, description, settings) -> None:
        """Market buys send the quote amount from params['cost']."""
        rest = _rest()
        await _adapter(description, rest, settings).create_order(
            "BTC/USDT", "market", "buy", None, params={"cost": Decimal("100")}
        )
        assert rest.request.await_args.kwargs["params"]["amount"] == "100"

    async def test_market_buy_from_amount_and_price(self, description, settings) -> None:
        """Without cost the quote amount is amount times price."""
        rest = _rest()
        await _adapter(description, rest, settings).create_order(
            "BTC/USDT", "market", "buy", Decimal("0.5"), Decimal("20")
        )
        params = rest.request.await_args.kwargs["params"]
        assert params["amount"] == "10.0"
        assert "size" not in params

    async def test_market_buy_requires_cost(self, description, settings) -> None:
        """Market buys need a cost or amount and price."""
        with pytest.raises(ArgumentsRequired):
            await _adapter(description, _rest(), settings).create_order(
                "BTC/USDT", "market", "buy", Decimal("1")
            )

    async def test_market_sell(self, description, settings) -> None:
        """Market sells send the base size."""
        rest = _rest()
        await _adapter(description, rest, settings).create_order(
            "BTC/USDT", "MARKET", "SELL", Decimal("0.25")
        )
        params = rest.request.await_args.kwargs["params"]
        assert params["size"] == "0.25"
        assert params["type"] == "MARKET"

    async def test_unknown_side(self, description, settings) -> None:
        """Unknown sides are rejected."""
        with pytest.raises(BadRequest):
            await _adapter(description, _rest(), settings).create_order(
                "BTC/USDT", "limit", "hold", Decimal("1"), Decimal("1")
            )

    async def test_create_orders(self, description, settings) -> None:
        """Batches are sent to trade/massOrder."""
        ids = {"orderIds": [{"orderId": 1, "clientOrderId": "a"}, {"orderId": 2}]}
        rest = _rest({"trade/massOrder": envelope(ids)})
        orders = await _adapter(description, rest, settings).create_orders(
            "BTC/USDT",
            [
                {"side": "buy", "amount": Decimal("1"), "price": Decimal("10"),
                 "client_order_id": "a"},
                {"side": "sell", "amount": Decimal("2"), "price": Decimal("12")},
            ],
        )

        assert [o.id for o in orders] == ["1", "2"]
        sent = rest.request.await_args.kwargs["params"]
        assert sent["symbol"] == "BTC_USDT"
        assert sent["orders"][0] == {
            "side": "BUY", "type": "LIMIT", "price": "10", "size": "1", "clientOrderId": "a",
        }

    async def test_create_orders_limit_only(self, description, settings) -> None:
        """Batches only accept limit orders."""
        with pytest.raises(BadRequest):
            await _adapter(description, _rest(), settings).create_orders(
                "BTC/USDT", [{"side": "buy", "type": "market", "amount": 1, "price": 1}]
            )

    async def test_cancel_order(self, description, settings) -> None:
        """Cancellation is a DELETE with symbol and order id."""
        rest = _rest()
        order = await _adapter(description, rest, settings).cancel_order("7", "BTC/USDT")

        assert order.id == "7"
        rest.request.assert_awaited_once_with(
            "trade/order", api="private", method="DELETE",
            params={"symbol": "BTC_USDT", "orderId": "7"},
        )

    async def test_cancel_order_requires_symbol(self, description, settings) -> None:
        """Cancellation needs the symbol."""
        with pytest.raises(ArgumentsRequired):
            await _adapter(description, _rest(), settings).cancel_order("7")

    async def test_cancel_all_orders(self, description, settings) -> None:
        """Cancel-all returns the acknowledgement envelope."""
        ack = envelope()
        rest = _rest({"trade/allOrders": ack})
        result = await _adapter(description, rest, settings).cancel_all_orders("BTC/USDT")
        assert result == ack
