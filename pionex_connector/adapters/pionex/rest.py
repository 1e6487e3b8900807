"""
Pionex REST API client.

Executes signed requests against the Pionex REST API and applies error
classification to every response.

Endpoints:
    Base URL: https://api.pionex.com
    Public:  GET /api/v1/common/symbols, /api/v1/market/{trades,depth,tickers,
             bookTickers,klines}
    Private: GET/POST/DELETE /api/v1/account/..., /api/v1/trade/...

Rate Limits:
    - The description declares a weight per endpoint and a base interval
      (rate_limit, milliseconds). Calls are spaced by interval * weight.

Response Format:
    {
        "data": {...},
        "result": true,
        "timestamp": 1566691672311
    }

Error Format:
    {
        "result": false,
        "code": "TRADE_INVALID_SYMBOL",
        "message": "...",
        "timestamp": 1566691672311
    }
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
import structlog

from pionex_connector.adapters.pionex.classifier import PionexErrorClassifier
from pionex_connector.adapters.pionex.signer import PionexSigner
from pionex_connector.config.models import ExchangeDescription
from pionex_connector.errors import (
    ExchangeError,
    NetworkError,
    RateLimitExceeded,
    RequestTimeout,
)

logger = structlog.get_logger(__name__)


class PionexRestClient:
    """
    Async REST API client for Pionex.

    Attributes:
        signer: Builds URLs, bodies and auth headers.
        classifier: Maps error envelopes to exception kinds.
        description: Exchange description (weights, rate limit).
        timeout_seconds: Total request timeout.

    Example:
        >>> async with PionexRestClient(signer, classifier, description) as client:
        ...     response = await client.request("market/depth", params={"symbol": "BTC_USDT"})
        >>> response["data"]["bids"][0]
        ['29658.37', '0.0123']
    """

    def __init__(
        self,
        signer: PionexSigner,
        classifier: PionexErrorClassifier,
        description: ExchangeDescription,
        timeout_seconds: int = 10,
    ):
        """
        Initialize REST client.

        Args:
            signer: Request signer.
            classifier: Error classifier.
            description: Exchange description.
            timeout_seconds: Request timeout in seconds.
        """
        self.signer = signer
        self.classifier = classifier
        self.description = description
        self.timeout_seconds = timeout_seconds

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0.0
        self._throttle_lock = asyncio.Lock()
        self._request_interval = description.rate_limit / 1000.0

        logger.info(
            "rest_client_initialized",
            exchange=description.id,
            base_url=signer.base_url,
            rate_limit_ms=description.rate_limit,
        )

    async def __aenter__(self) -> "PionexRestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": "pionex-connector/0.1"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed", exchange=self.description.id)

    async def _throttle(self, weight: int) -> None:
        """
        Space requests by the endpoint's weighted interval.

        Concurrent callers are serialized so each one waits its own turn.
        """
        loop = asyncio.get_running_loop()
        interval = self._request_interval * weight

        async with self._throttle_lock:
            time_since_last = loop.time() - self._last_request_time
            if time_since_last < interval:
                await asyncio.sleep(interval - time_since_last)
            self._last_request_time = loop.time()

    @staticmethod
    def _decode(text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return None

    def _check_response(self, url: str, status: int, text: str, data: Any) -> None:
        """
        Raise for failed responses.

        Order: HTTP 429, classified vendor error, then generic failure.
        """
        if status == 429:
            logger.warning("rest_rate_limited", exchange=self.description.id, url=url)
            raise RateLimitExceeded(
                f"{self.description.id} {text}", body=text, response=data
            )

        self.classifier.handle_errors(status, text, data)

        envelope_failed = isinstance(data, dict) and self.classifier.is_failure(data)
        if status >= 400 or envelope_failed:
            logger.error(
                "rest_request_failed",
                exchange=self.description.id,
                url=url,
                status=status,
                error=text,
            )
            raise ExchangeError(f"{self.description.id} {text}", body=text, response=data)

    async def request(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Sign and execute a request.

        Args:
            path: Endpoint path (e.g. "market/depth").
            api: "public" or "private".
            method: HTTP method.
            params: Request parameters.

        Returns:
            Dict[str, Any]: Decoded response envelope.

        Raises:
            ExchangeError: Classified or generic vendor error.
            RateLimitExceeded: If the exchange returned HTTP 429.
            NetworkError: If the request fails at the transport level.
            RequestTimeout: If the request times out.
        """
        weight = self.description.endpoint_weight(api, method, path)
        await self._throttle(weight)

        signed = self.signer.sign(path, api=api, method=method, params=params)
        session = await self._ensure_session()

        try:
            async with session.request(
                signed.method,
                signed.url,
                data=signed.body,
                headers=signed.headers or None,
            ) as response:
                text = await response.text()
                data = self._decode(text)
                self._check_response(signed.url, response.status, text, data)

        except aiohttp.ClientError as e:
            logger.error("rest_client_error", exchange=self.description.id, path=path, error=str(e))
            raise NetworkError(f"{self.description.id} request failed: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(
                "rest_timeout",
                exchange=self.description.id,
                path=path,
                timeout=self.timeout_seconds,
            )
            raise RequestTimeout(
                f"{self.description.id} request timeout after {self.timeout_seconds}s"
            ) from e

        if not isinstance(data, dict):
            raise ExchangeError(
                f"{self.description.id} unexpected response: {text}", body=text
            )

        logger.debug(
            "rest_request_completed",
            exchange=self.description.id,
            method=signed.method,
            path=path,
            weight=weight,
        )
        return data

    def __repr__(self) -> str:
        return (
            f"PionexRestClient(base_url={self.signer.base_url}, "
            f"rate_limit={self.description.rate_limit}ms)"
        )
