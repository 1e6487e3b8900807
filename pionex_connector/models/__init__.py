"""
Shared Pydantic data models for the connector.

All records are request-scoped and frozen once parsed. Financial values use
Decimal; absent vendor fields are None.

Modules:
    market: Market descriptors, precision and limits
    trade: Trades and fills
    orderbook: Order book snapshots and price levels
    ohlcv: Candle six-tuples
    ticker: Merged tickers
    order: Orders
    balance: Account balances

Example:
    >>> from pionex_connector.models import Market, OrderBookSnapshot, Ticker
"""

# Market models
from pionex_connector.models.market import (
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
)

# Trade models
from pionex_connector.models.trade import (
    Fee,
    TakerOrMaker,
    Trade,
    TradeSide,
)

# Order book models
from pionex_connector.models.orderbook import (
    OrderBookSnapshot,
    PriceLevel,
)

# Candle model
from pionex_connector.models.ohlcv import Candle

# Ticker model
from pionex_connector.models.ticker import Ticker

# Order models
from pionex_connector.models.order import (
    Order,
    OrderStatus,
    OrderType,
    TimeInForce,
)

# Balance models
from pionex_connector.models.balance import (
    Balance,
    BalanceEntry,
)

__all__ = [
    # Market
    "Market",
    "MarketLimits",
    "MarketPrecision",
    "MinMax",
    # Trade
    "Fee",
    "TakerOrMaker",
    "Trade",
    "TradeSide",
    # Order book
    "OrderBookSnapshot",
    "PriceLevel",
    # Candle
    "Candle",
    # Ticker
    "Ticker",
    # Order
    "Order",
    "OrderStatus",
    "OrderType",
    "TimeInForce",
    # Balance
    "Balance",
    "BalanceEntry",
]
