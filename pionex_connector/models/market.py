"""
Market data models.

Models:
    MarketPrecision: Tick sizes for amount, price and quote amounts
    MarketLimits: Tradable amount and cost bounds
    Market: Normalized description of a tradable pair
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class MarketPrecision(BaseModel):
    """
    Precision of a market expressed as tick sizes.

    A vendor precision of 8 decimal digits becomes Decimal("1E-8").

    Attributes:
        amount: Smallest amount increment.
        price: Smallest price increment.
        quote: Smallest quote-amount increment.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    amount: Optional[Decimal] = Field(default=None, gt=Decimal("0"))
    price: Optional[Decimal] = Field(default=None, gt=Decimal("0"))
    quote: Optional[Decimal] = Field(default=None, gt=Decimal("0"))


class MinMax(BaseModel):
    """Lower/upper bound pair; either side may be absent."""

    model_config = {"frozen": True, "extra": "forbid"}

    min: Optional[Decimal] = None
    max: Optional[Decimal] = None


class MarketLimits(BaseModel):
    """Trading-limit bounds of a market."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class Market(BaseModel):
    """
    Normalized market (tradable pair).

    Attributes:
        id: Always base + "/" + quote (e.g. "BTC/USDT").
        symbol: Vendor symbol (e.g. "BTC_USDT").
        base: Base asset code.
        quote: Quote asset code.
        type: Lower-cased vendor market type ("spot").
        active: The vendor's enable flag, unchanged.
        info: Raw vendor record.

    Example:
        >>> market = PionexNormalizer.parse_market(raw_symbol)
        >>> market.id
        'BTC/USDT'
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=3)
    symbol: Optional[str] = None
    base: str = Field(..., min_length=1)
    quote: str = Field(..., min_length=1)
    base_id: str = Field(..., min_length=1)
    quote_id: str = Field(..., min_length=1)
    type: Optional[str] = None
    spot: bool = False
    margin: bool = False
    swap: bool = False
    future: bool = False
    option: bool = False
    contract: bool = False
    active: Optional[bool] = None
    maker: Optional[Decimal] = None
    taker: Optional[Decimal] = None
    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    limits: MarketLimits = Field(default_factory=MarketLimits)
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_id(self) -> "Market":
        """Ensure the id is derived from base and quote."""
        if self.id != f"{self.base}/{self.quote}":
            raise ValueError(f"Market id {self.id} does not match {self.base}/{self.quote}")
        return self
