"""
Pionex exchange adapter.

Implements the ExchangeAdapter interface on top of the Pionex REST API.
Each operation builds the vendor request, lets the REST client sign and send
it, and normalizes the "data" payload of the response.

Pionex-Specific Details:
    - Vendor symbols use an underscore ("BTC_USDT"); unified symbols a slash
    - Tickers combine two endpoints (market/tickers and market/bookTickers)
    - Private endpoints are HMAC-SHA256 signed with a millisecond timestamp
    - Order history and fills are per symbol

Example:
    >>> from pionex_connector.adapters.pionex import PionexAdapter
    >>> from pionex_connector.config import load_settings
    >>>
    >>> adapter = PionexAdapter(load_settings())
    >>> book = await adapter.fetch_order_book("BTC/USDT", limit=20)
    >>> print(f"Best bid: {book.best_bid}")
    >>> await adapter.close()
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import structlog

from pionex_connector.adapters.pionex.classifier import PionexErrorClassifier
from pionex_connector.adapters.pionex.normalizer import PionexNormalizer
from pionex_connector.adapters.pionex.rest import PionexRestClient
from pionex_connector.adapters.pionex.signer import PionexSigner
from pionex_connector.config.loader import load_description
from pionex_connector.config.models import ConnectorSettings, ExchangeDescription
from pionex_connector.errors import (
    ArgumentsRequired,
    BadRequest,
    BadSymbol,
    NotSupported,
)
from pionex_connector.interfaces.exchange_adapter import ExchangeAdapter
from pionex_connector.models.balance import Balance
from pionex_connector.models.market import Market
from pionex_connector.models.ohlcv import Candle
from pionex_connector.models.order import Order
from pionex_connector.models.orderbook import OrderBookSnapshot
from pionex_connector.models.ticker import Ticker
from pionex_connector.models.trade import Trade

logger = structlog.get_logger(__name__)


def _number_to_string(value: Any) -> str:
    """Render a number as a plain decimal string (no exponent)."""
    return format(Decimal(str(value)), "f")


class PionexAdapter(ExchangeAdapter):
    """
    Pionex exchange adapter implementing ExchangeAdapter interface.

    The description table is loaded once at construction and shared by the
    signer, the error classifier and the REST client.

    Attributes:
        exchange_name: Always returns "pionex".
        description: Immutable exchange description.

    Example:
        >>> adapter = PionexAdapter(settings)
        >>> tickers = await adapter.fetch_tickers(["BTC/USDT", "ETH/USDT"])
    """

    def __init__(
        self,
        settings: Optional[ConnectorSettings] = None,
        description: Optional[ExchangeDescription] = None,
        rest: Optional[PionexRestClient] = None,
    ):
        """
        Initialize Pionex adapter.

        Args:
            settings: Credentials and transport settings. Defaults to an
                unauthenticated configuration.
            description: Exchange description. Defaults to the bundled table.
            rest: Pre-built REST client (mainly for tests).
        """
        self._settings = settings or ConnectorSettings()
        self.description = description or load_description()

        if rest is None:
            signer = PionexSigner(
                api_key=self._settings.api_key,
                secret=self._settings.secret,
                base_url=self._settings.base_url or self.description.urls.api.public,
                version=self.description.version,
            )
            exact, broad = self.description.error_tables()
            classifier = PionexErrorClassifier(exact, broad, exchange_id=self.description.id)
            rest = PionexRestClient(
                signer=signer,
                classifier=classifier,
                description=self.description,
                timeout_seconds=self._settings.timeout_seconds,
            )
        self._rest = rest

        logger.info(
            "pionex_adapter_initialized",
            authenticated=self._settings.has_credentials,
            version=self.description.version,
        )

    @property
    def exchange_name(self) -> str:
        """Return exchange identifier."""
        return self.description.id

    async def close(self) -> None:
        await self._rest.close()

    async def __aenter__(self) -> "PionexAdapter":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require(self, capability: str) -> None:
        if not self.description.supports(capability):
            raise NotSupported(f"{self.exchange_name} {capability}() is not supported")

    def _require_symbol(self, symbol: Optional[str], method: str) -> str:
        if symbol is None:
            raise ArgumentsRequired(
                f"{self.exchange_name} {method}() requires a symbol argument"
            )
        return PionexNormalizer.to_exchange_symbol(symbol)

    async def _public_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._rest.request(path, api="public", method="GET", params=params)

    async def _private(
        self, method: str, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return await self._rest.request(path, api="private", method=method, params=params)

    @staticmethod
    def _data(response: Dict[str, Any]) -> Dict[str, Any]:
        data = response.get("data")
        return data if isinstance(data, dict) else {}

    # -------------------------------------------------------------------------
    # Public market data
    # -------------------------------------------------------------------------

    async def fetch_markets(self) -> List[Market]:
        """
        Fetch all markets via GET common/symbols.

        Returns:
            List[Market]: Markets in vendor order.
        """
        self._require("fetchMarkets")
        response = await self._public_get("common/symbols")
        fees = self.description.fees.trading
        markets = PionexNormalizer.parse_markets(
            self._data(response).get("symbols") or [],
            maker=fees.maker,
            taker=fees.taker,
        )
        logger.debug("markets_fetched", exchange=self.exchange_name, count=len(markets))
        return markets

    async def fetch_trades(self, symbol: str, limit: Optional[int] = None) -> List[Trade]:
        """Fetch recent trades via GET market/trades."""
        self._require("fetchTrades")
        request: Dict[str, Any] = {"symbol": self._require_symbol(symbol, "fetchTrades")}
        if limit is not None:
            request["limit"] = limit
        response = await self._public_get("market/trades", request)
        return PionexNormalizer.parse_trades(
            self._data(response).get("trades") or [], symbol=symbol
        )

    async def fetch_order_book(
        self, symbol: str, limit: Optional[int] = None
    ) -> OrderBookSnapshot:
        """Fetch an order book snapshot via GET market/depth."""
        self._require("fetchOrderBook")
        request: Dict[str, Any] = {"symbol": self._require_symbol(symbol, "fetchOrderBook")}
        if limit is not None:
            request["limit"] = limit
        response = await self._public_get("market/depth", request)
        return PionexNormalizer.parse_order_book(self._data(response), symbol=symbol)

    async def fetch_order_books(
        self, symbols: Sequence[str], limit: Optional[int] = None
    ) -> Dict[str, OrderBookSnapshot]:
        """
        Fetch order books for several symbols, one request per symbol.

        Returns:
            Dict[str, OrderBookSnapshot]: Snapshots keyed by unified symbol.
        """
        self._require("fetchOrderBooks")
        books: Dict[str, OrderBookSnapshot] = {}
        for symbol in symbols:
            books[symbol] = await self.fetch_order_book(symbol, limit)
        return books

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """
        Fetch candles via GET market/klines.

        The endpoint has no start-time filter, so candles opening before
        since are dropped from the result.

        Raises:
            BadRequest: If the timeframe is not supported.
        """
        self._require("fetchOHLCV")
        interval = self.description.timeframe(timeframe)
        if interval is None:
            raise BadRequest(f"{self.exchange_name} does not support timeframe {timeframe}")

        request: Dict[str, Any] = {
            "symbol": self._require_symbol(symbol, "fetchOHLCV"),
            "interval": interval,
        }
        if limit is not None:
            request["limit"] = limit
        response = await self._public_get("market/klines", request)

        candles = PionexNormalizer.parse_ohlcvs(self._data(response).get("klines") or [])
        if since is not None:
            candles = [c for c in candles if c.timestamp is not None and c.timestamp >= since]
        return candles

    async def _fetch_ticker_feeds(
        self, request: Optional[Dict[str, Any]] = None
    ) -> List[Ticker]:
        stats_response = await self._public_get("market/tickers", request)
        book_response = await self._public_get("market/bookTickers", request)
        return PionexNormalizer.parse_tickers(
            self._data(stats_response).get("tickers") or [],
            self._data(book_response).get("tickers") or [],
        )

    async def fetch_tickers(self, symbols: Optional[Sequence[str]] = None) -> List[Ticker]:
        """
        Fetch tickers via GET market/tickers and GET market/bookTickers.

        Args:
            symbols: Optional unified symbols to keep.

        Returns:
            List[Ticker]: Symbols present in both feeds.
        """
        self._require("fetchTickers")
        tickers = await self._fetch_ticker_feeds()
        if symbols is not None:
            wanted = set(symbols)
            tickers = [t for t in tickers if t.symbol in wanted]
        logger.debug("tickers_fetched", exchange=self.exchange_name, count=len(tickers))
        return tickers

    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Fetch one ticker.

        Raises:
            BadSymbol: If the symbol is missing from either feed.
        """
        self._require("fetchTicker")
        request = {"symbol": self._require_symbol(symbol, "fetchTicker")}
        tickers = await self._fetch_ticker_feeds(request)
        for ticker in tickers:
            if ticker.symbol == symbol:
                return ticker
        raise BadSymbol(f"{self.exchange_name} no ticker for symbol {symbol}")

    # -------------------------------------------------------------------------
    # Account
    # -------------------------------------------------------------------------

    async def fetch_balance(self) -> Balance:
        """Fetch balances via GET account/balances."""
        self._require("fetchBalance")
        response = await self._private("GET", "account/balances")
        timestamp = response.get("timestamp")
        return PionexNormalizer.parse_balance(
            self._data(response),
            timestamp=int(timestamp) if timestamp is not None else None,
        )

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Optional[Decimal],
        price: Optional[Decimal] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Order:
        """
        Place an order via POST trade/order.

        Limit orders send size and price. Market sells send size; market
        buys send the quote amount, taken from params["cost"] or computed as
        amount * price.

        Args:
            symbol: Unified symbol.
            type: "limit" or "market".
            side: "buy" or "sell".
            amount: Size in base currency.
            price: Limit price.
            params: Options: client_order_id, ioc, cost. Other keys are sent
                to the exchange unchanged.

        Returns:
            Order: Created order with id and client order id.

        Raises:
            ArgumentsRequired: If price, amount or cost is missing.
            BadRequest: If type or side is unknown.
        """
        self._require("createOrder")
        params = dict(params or {})
        order_type = type.lower()
        order_side = side.lower()
        if order_type not in ("limit", "market"):
            raise BadRequest(f"{self.exchange_name} unsupported order type {type}")
        if order_side not in ("buy", "sell"):
            raise BadRequest(f"{self.exchange_name} unsupported order side {side}")

        request: Dict[str, Any] = {
            "symbol": self._require_symbol(symbol, "createOrder"),
            "side": order_side.upper(),
            "type": order_type.upper(),
        }
        client_order_id = params.pop("client_order_id", None)
        if client_order_id is not None:
            request["clientOrderId"] = client_order_id
        ioc = params.pop("ioc", None)
        cost = params.pop("cost", None)

        if order_type == "limit":
            if price is None or amount is None:
                raise ArgumentsRequired(
                    f"{self.exchange_name} createOrder() requires amount and price for limit orders"
                )
            request["size"] = _number_to_string(amount)
            request["price"] = _number_to_string(price)
            if ioc is not None:
                request["IOC"] = bool(ioc)
        elif order_side == "buy":
            if cost is None:
                if amount is None or price is None:
                    raise ArgumentsRequired(
                        f"{self.exchange_name} createOrder() requires params['cost'] "
                        "or amount and price for market buy orders"
                    )
                cost = Decimal(str(amount)) * Decimal(str(price))
            request["amount"] = _number_to_string(cost)
        else:
            if amount is None:
                raise ArgumentsRequired(
                    f"{self.exchange_name} createOrder() requires amount for market sell orders"
                )
            request["size"] = _number_to_string(amount)

        request.update(params)
        response = await self._private("POST", "trade/order", request)
        order = PionexNormalizer.parse_order(self._data(response), symbol=symbol)

        logger.info(
            "order_created",
            exchange=self.exchange_name,
            symbol=symbol,
            type=order_type,
            side=order_side,
            order_id=order.id,
        )
        return order

    async def create_orders(self, symbol: str, orders: Sequence[Dict[str, Any]]) -> List[Order]:
        """
        Place several limit orders via POST trade/massOrder.

        Args:
            symbol: Unified symbol shared by all orders.
            orders: Dicts with side, amount, price and optional type
                (only "limit") and client_order_id.

        Returns:
            List[Order]: Created orders in request order.
        """
        self._require("createOrders")
        exchange_symbol = self._require_symbol(symbol, "createOrders")
        raw_orders: List[Dict[str, Any]] = []
        for order in orders:
            order_type = str(order.get("type", "limit")).lower()
            if order_type != "limit":
                raise BadRequest(f"{self.exchange_name} createOrders() supports limit orders only")
            if order.get("price") is None or order.get("amount") is None:
                raise ArgumentsRequired(
                    f"{self.exchange_name} createOrders() requires amount and price for every order"
                )
            raw: Dict[str, Any] = {
                "side": str(order["side"]).upper(),
                "type": "LIMIT",
                "price": _number_to_string(order["price"]),
                "size": _number_to_string(order["amount"]),
            }
            if order.get("client_order_id") is not None:
                raw["clientOrderId"] = order["client_order_id"]
            raw_orders.append(raw)

        response = await self._private(
            "POST", "trade/massOrder", {"symbol": exchange_symbol, "orders": raw_orders}
        )
        return PionexNormalizer.parse_orders(
            self._data(response).get("orderIds") or [], symbol=symbol
        )

    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Cancel an order via DELETE trade/order."""
        self._require("cancelOrder")
        request = {
            "symbol": self._require_symbol(symbol, "cancelOrder"),
            "orderId": id,
        }
        response = await self._private("DELETE", "trade/order", request)
        logger.info("order_canceled", exchange=self.exchange_name, symbol=symbol, order_id=id)
        return Order(id=str(id), symbol=symbol, info=response)

    async def cancel_all_orders(self, symbol: Optional[str] = None) -> Dict[str, Any]:
        """
        Cancel all open orders of a symbol via DELETE trade/allOrders.

        Returns:
            Dict[str, Any]: The response envelope; the exchange does not
            report which orders were canceled.
        """
        self._require("cancelAllOrders")
        request = {"symbol": self._require_symbol(symbol, "cancelAllOrders")}
        response = await self._private("DELETE", "trade/allOrders", request)
        logger.info("all_orders_canceled", exchange=self.exchange_name, symbol=symbol)
        return response

    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Fetch one order via GET trade/order."""
        self._require("fetchOrder")
        request: Dict[str, Any] = {"orderId": id}
        if symbol is not None:
            request["symbol"] = PionexNormalizer.to_exchange_symbol(symbol)
        response = await self._private("GET", "trade/order", request)
        return PionexNormalizer.parse_order(self._data(response), symbol=symbol)

    async def fetch_order_by_client_order_id(
        self, client_order_id: str, symbol: Optional[str] = None
    ) -> Order:
        """Fetch one order via GET trade/orderByClientOrderId."""
        self._require("fetchOrder")
        request = {
            "symbol": self._require_symbol(symbol, "fetchOrderByClientOrderId"),
            "clientOrderId": client_order_id,
        }
        response = await self._private("GET", "trade/orderByClientOrderId", request)
        return PionexNormalizer.parse_order(self._data(response), symbol=symbol)

    async def fetch_open_orders(self, symbol: Optional[str] = None) -> List[Order]:
        """Fetch open orders via GET trade/openOrders."""
        self._require("fetchOpenOrders")
        request = {"symbol": self._require_symbol(symbol, "fetchOpenOrders")}
        response = await self._private("GET", "trade/openOrders", request)
        return PionexNormalizer.parse_orders(
            self._data(response).get("orders") or [], symbol=symbol
        )

    async def fetch_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Fetch order history via GET trade/allOrders."""
        self._require("fetchOrders")
        request: Dict[str, Any] = {"symbol": self._require_symbol(symbol, "fetchOrders")}
        if since is not None:
            request["startTime"] = since
        if limit is not None:
            request["limit"] = limit
        response = await self._private("GET", "trade/allOrders", request)
        return PionexNormalizer.parse_orders(
            self._data(response).get("orders") or [], symbol=symbol
        )

    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Fetch the account's fills via GET trade/fills."""
        self._require("fetchMyTrades")
        request: Dict[str, Any] = {"symbol": self._require_symbol(symbol, "fetchMyTrades")}
        if since is not None:
            request["startTime"] = since
        if limit is not None:
            request["limit"] = limit
        response = await self._private("GET", "trade/fills", request)
        return PionexNormalizer.parse_trades(
            self._data(response).get("fills") or [], symbol=symbol
        )

    async def fetch_order_trades(self, id: str, symbol: Optional[str] = None) -> List[Trade]:
        """Fetch the fills of one order via GET trade/fillsByOrderId."""
        self._require("fetchOrderTrades")
        request: Dict[str, Any] = {
            "symbol": self._require_symbol(symbol, "fetchOrderTrades"),
            "orderId": id,
        }
        response = await self._private("GET", "trade/fillsByOrderId", request)
        return PionexNormalizer.parse_trades(
            self._data(response).get("fills") or [], symbol=symbol
        )
