"""
Pionex error classifier.

Maps a decoded Pionex error envelope to an exception kind from the error
taxonomy. Error envelope:

    {"result": false, "status": 401, "code": "INVALID_SIGNATURE",
     "message": "signature is invalid", "parameters": null,
     "timestamp": 1566691672311}

A response fails when its numeric "status" is greater than 200 or when
"result" is false. The vendor code ("code", falling back to "message") is
looked up in the exact table, then in the broad (substring) table. No match
means no verdict: the caller falls back to its generic error handling.
"""

from typing import Any, Dict, Mapping, Optional, Type

import structlog

from pionex_connector.errors import ExchangeError

logger = structlog.get_logger(__name__)


class PionexErrorClassifier:
    """
    Two-tier vendor error code lookup.

    Example:
        >>> classifier = PionexErrorClassifier(
        ...     exact={"INVALID_SIGNATURE": AuthenticationError}, broad={}
        ... )
        >>> classifier.classify({"status": 401, "code": "INVALID_SIGNATURE"})
        <class 'pionex_connector.errors.AuthenticationError'>
    """

    def __init__(
        self,
        exact: Mapping[str, Type[ExchangeError]],
        broad: Mapping[str, Type[ExchangeError]],
        exchange_id: str = "pionex",
    ):
        self.exact: Dict[str, Type[ExchangeError]] = dict(exact)
        self.broad: Dict[str, Type[ExchangeError]] = dict(broad)
        self.exchange_id = exchange_id

    @staticmethod
    def is_failure(response: Mapping[str, Any]) -> bool:
        """
        Check whether a decoded envelope signals failure.

        A missing or non-numeric status counts as 200; numeric strings such
        as "401.0" are parsed.
        """
        status = response.get("status", 200)
        try:
            status = float(status)
        except (TypeError, ValueError):
            status = 200.0
        return status > 200 or response.get("result") is False

    @staticmethod
    def error_code(response: Mapping[str, Any]) -> Optional[str]:
        """Return the vendor's textual error code, or the message when absent."""
        for key in ("code", "message"):
            value = response.get(key)
            if value is not None and value != "":
                return str(value)
        return None

    def match_exact(self, code: str) -> Optional[Type[ExchangeError]]:
        return self.exact.get(code)

    def match_broad(self, text: str) -> Optional[Type[ExchangeError]]:
        for fragment, kind in self.broad.items():
            if fragment in text:
                return kind
        return None

    def classify(self, response: Any) -> Optional[Type[ExchangeError]]:
        """
        Classify a decoded response body.

        Args:
            response: Decoded JSON body.

        Returns:
            Optional[Type[ExchangeError]]: The error kind, or None when the
            response is not a failure or no table entry matches.
        """
        if not isinstance(response, Mapping) or not self.is_failure(response):
            return None

        code = self.error_code(response)
        if code is None:
            return None

        kind = self.match_exact(code)
        if kind is not None:
            return kind

        message = response.get("message")
        for text in (code, message):
            if isinstance(text, str):
                kind = self.match_broad(text)
                if kind is not None:
                    return kind
        return None

    def handle_errors(
        self,
        http_status: int,
        body: str,
        response: Any,
    ) -> None:
        """
        Raise the classified error for a response, if any.

        Args:
            http_status: HTTP status code.
            body: Raw response body text.
            response: Decoded JSON body (None if the body was not JSON).

        Raises:
            ExchangeError: The classified error kind, carrying the body text.
        """
        if response is None:
            return None

        kind = self.classify(response)
        if kind is None:
            return None

        logger.warning(
            "exchange_error_classified",
            exchange=self.exchange_id,
            http_status=http_status,
            code=self.error_code(response),
            error_kind=kind.__name__,
        )
        raise kind(f"{self.exchange_id} {body}", body=body, response=response)
