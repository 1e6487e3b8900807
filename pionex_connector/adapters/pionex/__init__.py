"""
Pionex exchange adapter.

Components:
    - PionexSigner: Builds signed request URLs, bodies and headers
    - PionexErrorClassifier: Maps vendor error codes to exceptions
    - PionexNormalizer: Data format converter
    - PionexRestClient: Async REST transport
    - PionexAdapter: Main adapter implementing ExchangeAdapter interface

Example:
    >>> from pionex_connector.adapters.pionex import PionexAdapter
    >>>
    >>> async with PionexAdapter() as adapter:
    ...     tickers = await adapter.fetch_tickers(["BTC/USDT"])
"""

from pionex_connector.adapters.pionex.adapter import PionexAdapter
from pionex_connector.adapters.pionex.classifier import PionexErrorClassifier
from pionex_connector.adapters.pionex.normalizer import PionexNormalizer
from pionex_connector.adapters.pionex.rest import PionexRestClient
from pionex_connector.adapters.pionex.signer import PionexSigner, SignedRequest

__all__ = [
    "PionexAdapter",
    "PionexErrorClassifier",
    "PionexNormalizer",
    "PionexRestClient",
    "PionexSigner",
    "SignedRequest",
]
