"""
Order book data models.

Models:
    PriceLevel: Single price level in an order book (price, amount)
    OrderBookSnapshot: Full order book snapshot

Every fetch is a full snapshot; no incremental updates are modeled. Levels
keep the order the vendor returned them in (bids best-first descending,
asks best-first ascending).
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in quote currency.
        amount: Size available at this level in base currency.

    Example:
        >>> level = PriceLevel(price=Decimal("29658.37"), amount=Decimal("0.0123"))
        >>> level.notional
        Decimal('364.797951')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(..., ge=Decimal("0"))
    amount: Decimal = Field(..., ge=Decimal("0"))

    @computed_field  # type: ignore[misc]
    @property
    def notional(self) -> Decimal:
        """Price multiplied by amount."""
        return self.price * self.amount


class OrderBookSnapshot(BaseModel):
    """
    Normalized order book snapshot.

    Attributes:
        symbol: Unified symbol (e.g. "BTC/USDT").
        timestamp: Vendor update time in epoch milliseconds.
        bids: Bid levels in vendor order.
        asks: Ask levels in vendor order.
        info: Raw vendor payload.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    symbol: str = Field(..., min_length=1)
    timestamp: Optional[int] = Field(default=None, ge=0)
    bids: List[PriceLevel] = Field(default_factory=list)
    asks: List[PriceLevel] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)

    @computed_field  # type: ignore[misc]
    @property
    def best_bid(self) -> Optional[Decimal]:
        """Price of the first bid level, or None if no bids."""
        return self.bids[0].price if self.bids else None

    @computed_field  # type: ignore[misc]
    @property
    def best_ask(self) -> Optional[Decimal]:
        """Price of the first ask level, or None if no asks."""
        return self.asks[0].price if self.asks else None

    @property
    def spread(self) -> Optional[Decimal]:
        """
        Absolute spread (best_ask - best_bid).

        Returns:
            Optional[Decimal]: Spread, or None if either side is empty.
        """
        if self.best_bid is not None and self.best_ask is not None:
            return self.best_ask - self.best_bid
        return None

    def as_lists(self) -> Dict[str, List[List[Decimal]]]:
        """Return bids/asks as [[price, amount], ...] lists."""
        return {
            "bids": [[level.price, level.amount] for level in self.bids],
            "asks": [[level.price, level.amount] for level in self.asks],
        }
