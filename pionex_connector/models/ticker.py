"""
Ticker data model.

Models:
    Ticker: Merged view of 24-hour statistics and best bid/offer
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Ticker(BaseModel):
    """
    Ticker for one symbol.

    Built by joining a 24-hour statistics record with a book-ticker record
    for the same symbol.

    Attributes:
        symbol: Unified symbol (e.g. "BTC/USDT").
        timestamp: Statistics close time in epoch milliseconds.
        open: Price at the start of the 24h window.
        high: 24h high price.
        low: 24h low price.
        close: Latest price.
        last: Same as close.
        base_volume: 24h volume in base currency.
        quote_volume: 24h volume in quote currency.
        bid: Best bid price.
        bid_volume: Size at best bid.
        ask: Best ask price.
        ask_volume: Size at best ask.
        change: close - open.
        percentage: change / open * 100.
        info: Raw vendor records under "stats" and "book".
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(..., min_length=1)
    timestamp: Optional[int] = Field(default=None, ge=0)

    # 24-hour statistics
    open: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    high: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    low: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    close: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    last: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    base_volume: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    quote_volume: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None

    # Best bid/offer
    bid: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    bid_volume: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    ask: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    ask_volume: Optional[Decimal] = Field(default=None, ge=Decimal("0"))

    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def mid_price(self) -> Optional[Decimal]:
        """Average of best bid and best ask, or None."""
        if self.bid is not None and self.ask is not None:
            return (self.bid + self.ask) / Decimal("2")
        return None
