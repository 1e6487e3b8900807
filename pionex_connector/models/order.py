"""
Order data models.

Models:
    OrderType: limit / market
    OrderStatus: open / closed / canceled
    TimeInForce: GTC / IOC
    Order: Normalized order record
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from pionex_connector.models.trade import Fee, TradeSide


class OrderType(str, Enum):
    LIMIT = "limit"
    MARKET = "market"


class OrderStatus(str, Enum):
    """
    Unified order status.

    Attributes:
        OPEN: Resting or partially filled.
        CLOSED: Fully filled.
        CANCELED: Canceled, possibly after a partial fill.
    """

    OPEN = "open"
    CLOSED = "closed"
    CANCELED = "canceled"


class TimeInForce(str, Enum):
    GTC = "GTC"
    IOC = "IOC"


class Order(BaseModel):
    """
    Normalized order.

    Responses to order creation only carry identifiers, so every field
    other than id may be absent.

    Attributes:
        id: Vendor order id.
        client_order_id: Caller-supplied id, if any.
        symbol: Unified symbol.
        type: Order type.
        side: Order side.
        price: Limit price.
        amount: Ordered size in base currency.
        cost: Filled quote amount.
        filled: Filled size in base currency.
        remaining: amount - filled.
        average: Average fill price (cost / filled).
        status: Unified status.
        timestamp: Creation time in epoch milliseconds.
        last_update_timestamp: Last update time in epoch milliseconds.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    client_order_id: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[OrderType] = None
    side: Optional[TradeSide] = None
    price: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    amount: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    cost: Optional[Decimal] = None
    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    average: Optional[Decimal] = None
    status: Optional[OrderStatus] = None
    time_in_force: Optional[TimeInForce] = None
    fee: Optional[Fee] = None
    timestamp: Optional[int] = Field(default=None, ge=0)
    last_update_timestamp: Optional[int] = Field(default=None, ge=0)
    info: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN
