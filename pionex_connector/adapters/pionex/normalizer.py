"""
Pionex data normalizer.

Converts Pionex JSON payloads to the unified Pydantic models. Every method is
a pure transform: no I/O, inputs are never mutated, list order is preserved.

Pionex Symbol Format (common/symbols):
    {
        "symbol": "BTC_USDT",
        "type": "SPOT",
        "baseCurrency": "BTC",
        "quoteCurrency": "USDT",
        "basePrecision": 6,
        "quotePrecision": 2,
        "amountPrecision": 8,
        "minAmount": "10",
        "minTradeSize": "0.000001",
        "maxTradeSize": "1000",
        "enable": true
    }

Pionex Trade Format (market/trades):
    {"symbol": "BTC_USDT", "tradeId": "600848671", "price": "7962.62",
     "size": "0.0122", "side": "BUY", "timestamp": 1566691672311}

Pionex Fill Format (trade/fills):
    {"id": 9876, "orderId": 1234, "symbol": "BTC_USDT", "side": "SELL",
     "role": "TAKER", "price": "30000.00", "size": "0.01", "fee": "0.3",
     "feeCoin": "USDT", "timestamp": 1566691672311}

Pionex Depth Format (market/depth):
    {"bids": [["29658.37", "0.0123"], ...], "asks": [["29658.47", "0.0345"], ...],
     "updateTime": 1566676132311}

Pionex Kline Format (market/klines):
    {"time": 1691649240000, "open": "1851.27", "close": "1851.32",
     "high": "1851.32", "low": "1851.27", "volume": "0.542"}

Pionex 24h Ticker Format (market/tickers):
    {"symbol": "BTC_USDT", "time": 1545291675000, "open": "7962.62",
     "close": "7952.32", "high": "7982.62", "low": "7942.62",
     "volume": "1.53", "amount": "12166.67", "count": 242}

Pionex Book Ticker Format (market/bookTickers):
    {"symbol": "BTC_USDT", "bidPrice": "7952.32", "bidSize": "0.09",
     "askPrice": "7952.33", "askSize": "0.1", "timestamp": 1545291675000}

Pionex Order Format (trade/order):
    {"orderId": 1234567890, "symbol": "BTC_USDT", "type": "LIMIT",
     "side": "SELL", "price": "30000.00", "size": "0.10", "amount": "0",
     "filledSize": "0.05", "filledAmount": "1500.00", "fee": "0.15",
     "feeCoin": "USDT", "status": "OPEN", "IOC": false,
     "clientOrderId": "9e3d5ab3", "createTime": 1566676132311,
     "updateTime": 1566676132311}

Pionex Balance Format (account/balances):
    {"balances": [{"coin": "BTC", "free": "0.90000000", "frozen": "0.00000000"}]}

Symbol Mapping:
    Pionex Format -> Unified Format
    BTC_USDT -> BTC/USDT
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

import structlog

from pionex_connector.models.balance import Balance, BalanceEntry
from pionex_connector.models.market import Market, MarketLimits, MarketPrecision, MinMax
from pionex_connector.models.ohlcv import Candle
from pionex_connector.models.order import Order, OrderStatus, OrderType, TimeInForce
from pionex_connector.models.orderbook import OrderBookSnapshot, PriceLevel
from pionex_connector.models.ticker import Ticker
from pionex_connector.models.trade import Fee, TakerOrMaker, Trade, TradeSide

logger = structlog.get_logger(__name__)

DEFAULT_TRADING_FEE = Decimal("0.0005")


def _safe_string(record: Dict[str, Any], key: str) -> Optional[str]:
    value = record.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _safe_decimal(record: Dict[str, Any], key: str) -> Optional[Decimal]:
    value = record.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Field {key} is not numeric: {value!r}")
    try:
        # str() keeps float inputs at their printed precision
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Field {key} is not numeric: {value!r}") from e


def _safe_int(record: Dict[str, Any], key: str) -> Optional[int]:
    value = record.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Field {key} is not an integer: {value!r}")
    return int(value)


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _precision_to_tick(digits: Optional[int]) -> Optional[Decimal]:
    """Convert a count of decimal digits to a tick size (8 -> 1E-8)."""
    if digits is None:
        return None
    return Decimal(1).scaleb(-digits)


class PionexNormalizer:
    """
    Normalizes Pionex data to unified models.

    Example:
        >>> candle = PionexNormalizer.parse_ohlcv({
        ...     "time": 1691649240000, "open": "1851.27", "high": "1851.32",
        ...     "low": "1851.27", "close": "1851.32", "volume": "0.542",
        ... })
        >>> candle.close
        Decimal('1851.32')
    """

    @staticmethod
    def normalize_symbol(exchange_symbol: str) -> str:
        """
        Normalize a Pionex symbol to the unified format.

        Example:
            >>> PionexNormalizer.normalize_symbol("BTC_USDT")
            'BTC/USDT'
        """
        return exchange_symbol.replace("_", "/", 1)

    @staticmethod
    def to_exchange_symbol(symbol: str) -> str:
        """
        Convert a unified symbol to the Pionex format.

        Example:
            >>> PionexNormalizer.to_exchange_symbol("BTC/USDT")
            'BTC_USDT'
        """
        return symbol.replace("/", "_", 1)

    # -------------------------------------------------------------------------
    # Markets
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_market(
        market: Dict[str, Any],
        maker: Decimal = DEFAULT_TRADING_FEE,
        taker: Decimal = DEFAULT_TRADING_FEE,
    ) -> Market:
        """
        Normalize one common/symbols entry to a Market.

        The market id is always base + "/" + quote and active is the vendor
        enable flag unchanged. Precision digits become tick sizes.

        Args:
            market: Raw symbol record.
            maker: Maker fee rate.
            taker: Taker fee rate.

        Returns:
            Market: Normalized market.

        Raises:
            ValueError: If base or quote currency is missing or data is invalid.
        """
        try:
            base_id = market["baseCurrency"]
            quote_id = market["quoteCurrency"]
            market_type = _lower(_safe_string(market, "type"))
            spot = market_type == "spot"
            enable = market.get("enable")

            return Market(
                id=f"{base_id}/{quote_id}",
                symbol=_safe_string(market, "symbol"),
                base=base_id,
                quote=quote_id,
                base_id=base_id,
                quote_id=quote_id,
                type=market_type,
                spot=spot,
                future=not spot,
                active=enable if isinstance(enable, bool) else None,
                maker=maker,
                taker=taker,
                precision=MarketPrecision(
                    amount=_precision_to_tick(_safe_int(market, "amountPrecision")),
                    price=_precision_to_tick(_safe_int(market, "basePrecision")),
                    quote=_precision_to_tick(_safe_int(market, "quotePrecision")),
                ),
                limits=MarketLimits(
                    amount=MinMax(
                        min=_safe_decimal(market, "minTradeSize"),
                        max=_safe_decimal(market, "maxTradeSize"),
                    ),
                    cost=MinMax(min=_safe_decimal(market, "minAmount")),
                ),
                info=dict(market),
            )

        except KeyError as e:
            logger.error(
                "market_normalization_failed_missing_field",
                exchange="pionex",
                missing_field=str(e),
                record=market,
            )
            raise ValueError(f"Missing required field in Pionex market: {e}")
        except (ValueError, TypeError) as e:
            logger.error(
                "market_normalization_failed_invalid_data",
                exchange="pionex",
                error=str(e),
                record=market,
            )
            raise ValueError(f"Invalid data in Pionex market: {e}")

    @classmethod
    def parse_markets(
        cls,
        markets: Iterable[Dict[str, Any]],
        maker: Decimal = DEFAULT_TRADING_FEE,
        taker: Decimal = DEFAULT_TRADING_FEE,
    ) -> List[Market]:
        return [cls.parse_market(market, maker=maker, taker=taker) for market in markets]

    # -------------------------------------------------------------------------
    # Trades
    # -------------------------------------------------------------------------

    @classmethod
    def parse_trade(
        cls,
        trade: Dict[str, Any],
        symbol: Optional[str] = None,
    ) -> Trade:
        """
        Normalize a public trade print or a private fill.

        Args:
            trade: Raw market/trades or trade/fills entry.
            symbol: Unified symbol to use when the record has none.

        Returns:
            Trade: Normalized trade. Timestamp is passed through unchanged.

        Raises:
            ValueError: If the record contains invalid data.
        """
        try:
            exchange_symbol = _safe_string(trade, "symbol")
            if exchange_symbol is not None:
                symbol = cls.normalize_symbol(exchange_symbol)

            trade_id = _safe_string(trade, "tradeId") or _safe_string(trade, "id")
            side = _lower(_safe_string(trade, "side"))
            role = _lower(_safe_string(trade, "role"))
            price = _safe_decimal(trade, "price")
            amount = _safe_decimal(trade, "size")
            cost = price * amount if price is not None and amount is not None else None

            fee: Optional[Fee] = None
            fee_cost = _safe_decimal(trade, "fee")
            if fee_cost is not None:
                fee = Fee(cost=fee_cost, currency=_safe_string(trade, "feeCoin"))

            return Trade(
                id=trade_id,
                order=_safe_string(trade, "orderId"),
                symbol=symbol,
                timestamp=_safe_int(trade, "timestamp"),
                side=TradeSide(side) if side is not None else None,
                price=price,
                amount=amount,
                cost=cost,
                taker_or_maker=TakerOrMaker(role) if role is not None else None,
                fee=fee,
                info=dict(trade),
            )

        except (ValueError, TypeError) as e:
            logger.error(
                "trade_normalization_failed_invalid_data",
                exchange="pionex",
                symbol=symbol,
                error=str(e),
            )
            raise ValueError(f"Invalid data in Pionex trade: {e}")

    @classmethod
    def parse_trades(
        cls,
        trades: Iterable[Dict[str, Any]],
        symbol: Optional[str] = None,
    ) -> List[Trade]:
        """Normalize a list of trades, keeping the vendor's chronological order."""
        return [cls.parse_trade(trade, symbol) for trade in trades]

    # -------------------------------------------------------------------------
    # Order book
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_order_book(
        data: Dict[str, Any],
        symbol: str,
    ) -> OrderBookSnapshot:
        """
        Normalize a market/depth payload to an OrderBookSnapshot.

        Levels keep the order the vendor returned; they are not re-sorted.

        Args:
            data: The "data" object of the depth response.
            symbol: Unified symbol.

        Returns:
            OrderBookSnapshot: Normalized order book.

        Raises:
            ValueError: If a level is malformed.

        Example:
            >>> book = PionexNormalizer.parse_order_book(
            ...     {"bids": [["29658.37", "0.0123"]], "asks": [["29658.47", "0.0345"]]},
            ...     symbol="BTC/USDT",
            ... )
            >>> book.best_bid
            Decimal('29658.37')
        """
        try:
            bids: List[PriceLevel] = [
                PriceLevel(price=Decimal(str(level[0])), amount=Decimal(str(level[1])))
                for level in data.get("bids") or []
            ]
            asks: List[PriceLevel] = [
                PriceLevel(price=Decimal(str(level[0])), amount=Decimal(str(level[1])))
                for level in data.get("asks") or []
            ]

            snapshot = OrderBookSnapshot(
                symbol=symbol,
                timestamp=_safe_int(data, "updateTime"),
                bids=bids,
                asks=asks,
                info=dict(data),
            )

            logger.debug(
                "normalized_orderbook",
                exchange="pionex",
                symbol=symbol,
                bids_count=len(bids),
                asks_count=len(asks),
            )

            return snapshot

        except (ValueError, TypeError, IndexError, InvalidOperation) as e:
            logger.error(
                "orderbook_normalization_failed_invalid_data",
                exchange="pionex",
                symbol=symbol,
                error=str(e),
            )
            raise ValueError(f"Invalid data in Pionex order book: {e}")

    # -------------------------------------------------------------------------
    # Candles
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_ohlcv(kline: Dict[str, Any]) -> Candle:
        """
        Normalize one kline record to a Candle six-tuple.

        Raises:
            ValueError: If a field is not numeric.
        """
        try:
            return Candle(
                timestamp=_safe_int(kline, "time"),
                open=_safe_decimal(kline, "open"),
                high=_safe_decimal(kline, "high"),
                low=_safe_decimal(kline, "low"),
                close=_safe_decimal(kline, "close"),
                volume=_safe_decimal(kline, "volume"),
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "ohlcv_normalization_failed_invalid_data",
                exchange="pionex",
                error=str(e),
                record=kline,
            )
            raise ValueError(f"Invalid data in Pionex kline: {e}")

    @classmethod
    def parse_ohlcvs(cls, klines: Iterable[Dict[str, Any]]) -> List[Candle]:
        return [cls.parse_ohlcv(kline) for kline in klines]

    # -------------------------------------------------------------------------
    # Tickers
    # -------------------------------------------------------------------------

    @classmethod
    def parse_ticker(
        cls,
        stats: Dict[str, Any],
        book: Optional[Dict[str, Any]] = None,
    ) -> Ticker:
        """
        Merge a 24h statistics record and a book-ticker record into a Ticker.

        Args:
            stats: Raw market/tickers entry.
            book: Raw market/bookTickers entry for the same symbol.

        Returns:
            Ticker: Normalized ticker.

        Raises:
            ValueError: If required fields are missing or invalid.
        """
        book = book or {}
        try:
            symbol = cls.normalize_symbol(stats["symbol"])
            open_price = _safe_decimal(stats, "open")
            close = _safe_decimal(stats, "close")

            change: Optional[Decimal] = None
            percentage: Optional[Decimal] = None
            if open_price is not None and close is not None:
                change = close - open_price
                if open_price > 0:
                    percentage = change / open_price * Decimal("100")

            return Ticker(
                symbol=symbol,
                timestamp=_safe_int(stats, "time"),
                open=open_price,
                high=_safe_decimal(stats, "high"),
                low=_safe_decimal(stats, "low"),
                close=close,
                last=close,
                base_volume=_safe_decimal(stats, "volume"),
                quote_volume=_safe_decimal(stats, "amount"),
                change=change,
                percentage=percentage,
                bid=_safe_decimal(book, "bidPrice"),
                bid_volume=_safe_decimal(book, "bidSize"),
                ask=_safe_decimal(book, "askPrice"),
                ask_volume=_safe_decimal(book, "askSize"),
                info={"stats": dict(stats), "book": dict(book)},
            )

        except KeyError as e:
            logger.error(
                "ticker_normalization_failed_missing_field",
                exchange="pionex",
                missing_field=str(e),
            )
            raise ValueError(f"Missing required field in Pionex ticker: {e}")
        except (ValueError, TypeError) as e:
            logger.error(
                "ticker_normalization_failed_invalid_data",
                exchange="pionex",
                error=str(e),
            )
            raise ValueError(f"Invalid data in Pionex ticker: {e}")

    @classmethod
    def parse_tickers(
        cls,
        stats_list: Iterable[Dict[str, Any]],
        book_list: Iterable[Dict[str, Any]],
    ) -> List[Ticker]:
        """
        Join 24h statistics and book tickers on symbol.

        Entries present in only one of the lists are dropped. Output follows
        the order of the statistics list.
        """
        books = {
            book["symbol"]: book for book in book_list if book.get("symbol") is not None
        }
        tickers: List[Ticker] = []
        for stats in stats_list:
            book = books.get(stats.get("symbol"))
            if book is None:
                continue
            tickers.append(cls.parse_ticker(stats, book))
        return tickers

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_order_status(
        status: Optional[str],
        amount: Optional[Decimal] = None,
        filled: Optional[Decimal] = None,
    ) -> Optional[OrderStatus]:
        """
        Map a vendor order status to the unified status.

        Pionex reports canceled orders as CLOSED; a closed order with a known
        size that was not completely filled is reported as canceled.
        """
        if status is None:
            return None
        status = status.upper()
        if status == "OPEN":
            return OrderStatus.OPEN
        if status in ("CANCELED", "CANCELLED"):
            return OrderStatus.CANCELED
        if status == "CLOSED":
            if amount is not None and filled is not None and filled < amount:
                return OrderStatus.CANCELED
            return OrderStatus.CLOSED
        return None

    @classmethod
    def parse_order(
        cls,
        order: Dict[str, Any],
        symbol: Optional[str] = None,
    ) -> Order:
        """
        Normalize an order record or an order-creation response.

        Args:
            order: Raw order record ({"orderId": ..., "clientOrderId": ...}
                for creation responses).
            symbol: Unified symbol to use when the record has none.

        Returns:
            Order: Normalized order.

        Raises:
            ValueError: If the record contains invalid data.
        """
        try:
            exchange_symbol = _safe_string(order, "symbol")
            if exchange_symbol is not None:
                symbol = cls.normalize_symbol(exchange_symbol)

            amount = _safe_decimal(order, "size")
            filled = _safe_decimal(order, "filledSize")
            cost = _safe_decimal(order, "filledAmount")

            remaining: Optional[Decimal] = None
            if amount is not None and filled is not None:
                remaining = max(amount - filled, Decimal("0"))

            average: Optional[Decimal] = None
            if cost is not None and filled is not None and filled > 0:
                average = cost / filled

            order_type = _lower(_safe_string(order, "type"))
            side = _lower(_safe_string(order, "side"))

            time_in_force: Optional[TimeInForce] = None
            if "IOC" in order:
                time_in_force = TimeInForce.IOC if order["IOC"] else TimeInForce.GTC

            fee: Optional[Fee] = None
            fee_cost = _safe_decimal(order, "fee")
            if fee_cost is not None:
                fee = Fee(cost=fee_cost, currency=_safe_string(order, "feeCoin"))

            return Order(
                id=_safe_string(order, "orderId"),
                client_order_id=_safe_string(order, "clientOrderId"),
                symbol=symbol,
                type=OrderType(order_type) if order_type is not None else None,
                side=TradeSide(side) if side is not None else None,
                price=_safe_decimal(order, "price"),
                amount=amount,
                cost=cost,
                filled=filled,
                remaining=remaining,
                average=average,
                status=cls.parse_order_status(
                    _safe_string(order, "status"), amount=amount, filled=filled
                ),
                time_in_force=time_in_force,
                fee=fee,
                timestamp=_safe_int(order, "createTime"),
                last_update_timestamp=_safe_int(order, "updateTime"),
                info=dict(order),
            )

        except (ValueError, TypeError) as e:
            logger.error(
                "order_normalization_failed_invalid_data",
                exchange="pionex",
                symbol=symbol,
                error=str(e),
            )
            raise ValueError(f"Invalid data in Pionex order: {e}")

    @classmethod
    def parse_orders(
        cls,
        orders: Iterable[Dict[str, Any]],
        symbol: Optional[str] = None,
    ) -> List[Order]:
        return [cls.parse_order(order, symbol) for order in orders]

    # -------------------------------------------------------------------------
    # Balances
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_balance(
        data: Dict[str, Any],
        timestamp: Optional[int] = None,
    ) -> Balance:
        """
        Normalize an account/balances payload.

        Args:
            data: The "data" object of the balances response.
            timestamp: Envelope timestamp in epoch milliseconds.

        Returns:
            Balance: Balances keyed by coin; total = free + frozen.
        """
        currencies: Dict[str, BalanceEntry] = {}
        try:
            for entry in data.get("balances") or []:
                code = entry["coin"]
                free = _safe_decimal(entry, "free")
                used = _safe_decimal(entry, "frozen")
                total = free + used if free is not None and used is not None else None
                currencies[code] = BalanceEntry(free=free, used=used, total=total)
        except KeyError as e:
            logger.error(
                "balance_normalization_failed_missing_field",
                exchange="pionex",
                missing_field=str(e),
            )
            raise ValueError(f"Missing required field in Pionex balance: {e}")
        except (ValueError, TypeError) as e:
            logger.error(
                "balance_normalization_failed_invalid_data",
                exchange="pionex",
                error=str(e),
            )
            raise ValueError(f"Invalid data in Pionex balance: {e}")

        return Balance(timestamp=timestamp, currencies=currencies, info=dict(data))
