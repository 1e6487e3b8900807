"""
Exception taxonomy for the Pionex connector.

Vendor error codes are classified into the kinds below by the error
classifier (see adapters/pionex/classifier.py). The taxonomy is closed: the
description table in config/pionex.yaml may only name classes registered in
ERROR_KINDS.

Hierarchy:
    ExchangeError
    ├── AuthenticationError
    │   └── PermissionDenied
    ├── ArgumentsRequired
    ├── BadRequest
    │   └── BadSymbol
    ├── InvalidAddress
    ├── InsufficientFunds
    ├── InvalidOrder
    │   ├── OrderNotFound
    │   └── DuplicateOrderId
    ├── NotSupported
    └── NetworkError
        ├── DDoSProtection
        │   └── RateLimitExceeded
        └── RequestTimeout
"""

from typing import Any, Dict, Optional, Type


class ExchangeError(Exception):
    """
    Base class for all exchange-related errors.

    Attributes:
        message: Human readable message, prefixed with the exchange id.
        body: Raw HTTP body text, if the error came from a response.
        response: Decoded JSON response, if any.
    """

    def __init__(
        self,
        message: str,
        body: Optional[str] = None,
        response: Optional[Any] = None,
    ):
        self.message = message
        self.body = body
        self.response = response
        super().__init__(message)


class AuthenticationError(ExchangeError):
    """Invalid, expired or missing API credentials."""


class PermissionDenied(AuthenticationError):
    """The API key lacks permission for the operation."""


class ArgumentsRequired(ExchangeError):
    """A required argument or credential was not supplied."""


class BadRequest(ExchangeError):
    """The exchange rejected request parameters."""


class BadSymbol(BadRequest):
    """Unknown or unsupported market symbol."""


class InvalidAddress(ExchangeError):
    """Request origin or address is not allowed (e.g. IP whitelist)."""


class InsufficientFunds(ExchangeError):
    """Not enough balance to place the order."""


class InvalidOrder(ExchangeError):
    """Base class for order-specific failures."""


class OrderNotFound(InvalidOrder):
    """The referenced order does not exist."""


class DuplicateOrderId(InvalidOrder):
    """The client order id was already used."""


class NotSupported(ExchangeError):
    """The operation is not supported by this exchange."""


class NetworkError(ExchangeError):
    """Transport-level failure."""


class DDoSProtection(NetworkError):
    """Request throttled by the exchange."""


class RateLimitExceeded(DDoSProtection):
    """HTTP 429 returned by the exchange."""


class RequestTimeout(NetworkError):
    """The request did not complete in time."""


ERROR_KINDS: Dict[str, Type[ExchangeError]] = {
    cls.__name__: cls
    for cls in (
        ExchangeError,
        AuthenticationError,
        PermissionDenied,
        ArgumentsRequired,
        BadRequest,
        BadSymbol,
        InvalidAddress,
        InsufficientFunds,
        InvalidOrder,
        OrderNotFound,
        DuplicateOrderId,
        NotSupported,
        NetworkError,
        DDoSProtection,
        RateLimitExceeded,
        RequestTimeout,
    )
}
