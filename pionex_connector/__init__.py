"""
Pionex exchange connector.

An asynchronous REST connector exposing the Pionex spot API through a
unified trading interface.

This package provides:
- Data models for markets, trades, order books, candles, tickers, orders
  and balances
- The ExchangeAdapter interface and its Pionex implementation
- Request signing and vendor error classification
- Configuration management (exchange description and connector settings)
"""

from pionex_connector.adapters.pionex import PionexAdapter
from pionex_connector.config import load_description, load_settings
from pionex_connector.logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "PionexAdapter",
    "configure_logging",
    "load_description",
    "load_settings",
]
