"""
Trade data models.

Models:
    TradeSide: Enum for trade/order side (buy/sell)
    TakerOrMaker: Liquidity role of a fill
    Fee: Fee charged on a fill or order
    Trade: One executed fill (public print or private fill)
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class TradeSide(str, Enum):
    """
    Enumeration for trade side.

    Attributes:
        BUY: Buyer was the aggressor (taker bought)
        SELL: Seller was the aggressor (taker sold)
    """

    BUY = "buy"
    SELL = "sell"


class TakerOrMaker(str, Enum):
    """Liquidity role of a private fill."""

    TAKER = "taker"
    MAKER = "maker"


class Fee(BaseModel):
    """Fee amount and the currency it was charged in."""

    model_config = {"frozen": True, "extra": "forbid"}

    cost: Optional[Decimal] = None
    currency: Optional[str] = None


class Trade(BaseModel):
    """
    Executed trade.

    Public trade prints and private fills share this shape; the order,
    role and fee fields are only present for fills.

    Attributes:
        id: Vendor trade identifier.
        order: Vendor order id (fills only).
        symbol: Unified symbol (e.g. "BTC/USDT").
        timestamp: Epoch milliseconds, as returned by the vendor.
        side: Lower-cased trade side.
        price: Execution price.
        amount: Executed size in base currency.
        cost: price * amount.

    Example:
        >>> trade = PionexNormalizer.parse_trade(raw_trade)
        >>> trade.side
        <TradeSide.BUY: 'buy'>
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    order: Optional[str] = None
    symbol: Optional[str] = None
    timestamp: Optional[int] = Field(default=None, ge=0)
    side: Optional[TradeSide] = None
    price: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    amount: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    cost: Optional[Decimal] = None
    taker_or_maker: Optional[TakerOrMaker] = None
    fee: Optional[Fee] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY

    @property
    def is_sell(self) -> bool:
        return self.side == TradeSide.SELL
