"""
Exchange adapters.

All adapters implement the ExchangeAdapter interface.

Supported Exchanges:
    - Pionex (spot)
"""

from pionex_connector.adapters.pionex import PionexAdapter

__all__ = ["PionexAdapter"]
