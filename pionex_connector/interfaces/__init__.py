"""
Abstract interfaces for the connector.

The key interface is ExchangeAdapter, the unified trading-API contract
that exchange connectors implement.

Example:
    >>> from pionex_connector.interfaces import ExchangeAdapter

Modules:
    exchange_adapter: ExchangeAdapter ABC
"""

from pionex_connector.interfaces.exchange_adapter import ExchangeAdapter

__all__: list[str] = [
    "ExchangeAdapter",
]
