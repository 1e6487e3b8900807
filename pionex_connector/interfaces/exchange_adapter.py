"""
Abstract base class for exchange adapters.

This module defines the unified trading-API interface that an exchange
connector implements. Callers work with unified symbols ("BTC/USDT") and
normalized records; the adapter translates to vendor requests and back.

Example:
    >>> class PionexAdapter(ExchangeAdapter):
    ...     @property
    ...     def exchange_name(self) -> str:
    ...         return "pionex"
    ...     # ... implement other abstract methods
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from pionex_connector.models.balance import Balance
from pionex_connector.models.market import Market
from pionex_connector.models.ohlcv import Candle
from pionex_connector.models.order import Order
from pionex_connector.models.orderbook import OrderBookSnapshot
from pionex_connector.models.ticker import Ticker
from pionex_connector.models.trade import Trade


class ExchangeAdapter(ABC):
    """
    Abstract base class for exchange adapters.

    Every operation is call-scoped: it issues zero or more sequential HTTP
    requests and returns freshly constructed records. No state is shared
    between calls.

    Note:
        All financial values in returned models use Decimal for precision.
    """

    @property
    @abstractmethod
    def exchange_name(self) -> str:
        """
        Return the lowercase exchange identifier.

        Returns:
            str: Lowercase exchange name (e.g. "pionex").
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources. Safe to call more than once."""
        pass

    # -------------------------------------------------------------------------
    # Public market data
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """
        Fetch all tradable markets.

        Returns:
            List[Market]: Markets in vendor order.
        """
        pass

    @abstractmethod
    async def fetch_trades(self, symbol: str, limit: Optional[int] = None) -> List[Trade]:
        """
        Fetch recent public trades.

        Args:
            symbol: Unified symbol.
            limit: Maximum number of trades.

        Returns:
            List[Trade]: Trades in the order the vendor returned them.
        """
        pass

    @abstractmethod
    async def fetch_order_book(
        self, symbol: str, limit: Optional[int] = None
    ) -> OrderBookSnapshot:
        """
        Fetch a full order book snapshot.

        Args:
            symbol: Unified symbol.
            limit: Depth per side.

        Returns:
            OrderBookSnapshot: Bids and asks in vendor order.
        """
        pass

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Candle]:
        """
        Fetch candles.

        Args:
            symbol: Unified symbol.
            timeframe: Unified timeframe ("1m", "1h", ...).
            since: Earliest candle open time in epoch milliseconds.
            limit: Maximum number of candles.

        Returns:
            List[Candle]: Time-ordered six-tuples.
        """
        pass

    @abstractmethod
    async def fetch_tickers(self, symbols: Optional[Sequence[str]] = None) -> List[Ticker]:
        """
        Fetch tickers for all (or the given) symbols.

        Returns:
            List[Ticker]: Only symbols present in both vendor ticker feeds.
        """
        pass

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Fetch the ticker of one symbol.

        Raises:
            BadSymbol: If the symbol is not present in both feeds.
        """
        pass

    # -------------------------------------------------------------------------
    # Account and orders (authenticated)
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_balance(self) -> Balance:
        """Fetch account balances."""
        pass

    @abstractmethod
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
        Place an order.

        Args:
            symbol: Unified symbol.
            type: "limit" or "market".
            side: "buy" or "sell".
            amount: Size in base currency.
            price: Limit price (required for limit orders).
            params: Extra options (client_order_id, ioc, cost).

        Returns:
            Order: The created order (identifiers only).

        Raises:
            ArgumentsRequired: If a required argument is missing.
        """
        pass

    @abstractmethod
    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Cancel one order."""
        pass

    @abstractmethod
    async def cancel_all_orders(self, symbol: Optional[str] = None) -> Dict[str, Any]:
        """Cancel all open orders of a symbol and return the raw acknowledgement."""
        pass

    @abstractmethod
    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Fetch one order by id."""
        pass

    @abstractmethod
    async def fetch_open_orders(self, symbol: Optional[str] = None) -> List[Order]:
        """Fetch open orders of a symbol."""
        pass

    @abstractmethod
    async def fetch_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Fetch order history of a symbol."""
        pass

    @abstractmethod
    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Fetch the account's fills for a symbol."""
        pass

    @abstractmethod
    async def fetch_order_trades(self, id: str, symbol: Optional[str] = None) -> List[Trade]:
        """Fetch the fills of one order."""
        pass

    def __repr__(self) -> str:
        """Return string representation of adapter."""
        return f"{self.__class__.__name__}(exchange={self.exchange_name})"
