"""
Candle (OHLCV) model.

A candle is a fixed six-tuple so it compares equal to a plain tuple:

    >>> Candle(1691649240000, Decimal("1851.27"), ...) == (1691649240000, Decimal("1851.27"), ...)
    True
"""

from decimal import Decimal
from typing import NamedTuple, Optional


class Candle(NamedTuple):
    """One time bucket: timestamp (epoch ms), open, high, low, close, volume."""

    timestamp: Optional[int]
    open: Optional[Decimal]
    high: Optional[Decimal]
    low: Optional[Decimal]
    close: Optional[Decimal]
    volume: Optional[Decimal]
