"""
Pionex request signer.

Builds the fully qualified URL, the optional JSON body and, for private
endpoints, the authentication headers.

Signing (private endpoints):
    1. POST/DELETE: the parameter bag, even when empty, is the JSON body.
    2. "timestamp" (epoch ms) is added to the bag.
    3. The bag is URL-encoded and appended to the URL as the query string.
    4. canonical = METHOD + "/api/v1/<path>" + "?" + query [+ body]
    5. PIONEX-SIGNATURE = hex(HMAC-SHA256(secret, canonical))

Example:
    >>> signer = PionexSigner(api_key="key", secret="secret")
    >>> request = signer.sign("trade/order", api="private", method="POST",
    ...                       params={"symbol": "BTC_USDT", "side": "BUY"},
    ...                       timestamp=1655896754515)
    >>> request.headers["PIONEX-KEY"]
    'key'
"""

import hashlib
import hmac
import json
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

import structlog

from pionex_connector.errors import AuthenticationError

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.pionex.com"

_PATH_PARAM = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class SignedRequest:
    """A request ready to hand to the transport."""

    url: str
    method: str
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


def implode_params(path: str, params: Mapping[str, Any]) -> str:
    """Substitute {name} placeholders in a path template."""
    return _PATH_PARAM.sub(lambda m: str(params[m.group(1)]), path)


def extract_params(path: str) -> list[str]:
    """Return the placeholder names used in a path template."""
    return _PATH_PARAM.findall(path)


def encode_query(params: Mapping[str, Any]) -> str:
    """
    URL-encode a parameter bag the way the JSON body renders it.

    Booleans become "true"/"false"; lists and dicts are compact JSON.
    """
    rendered: Dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, bool):
            rendered[key] = "true" if value else "false"
        elif isinstance(value, (list, dict)):
            rendered[key] = json.dumps(value, separators=(",", ":"))
        else:
            rendered[key] = value
    return urlencode(rendered)


def milliseconds() -> int:
    return int(time.time() * 1000)


class PionexSigner:
    """
    Signs Pionex REST requests.

    Attributes:
        api_key: Public key id sent as PIONEX-KEY.
        base_url: REST base URL.
        version: API version used in the path prefix.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        secret: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        version: str = "v1",
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize signer.

        Args:
            api_key: Pionex API key.
            secret: Pionex API secret.
            base_url: REST base URL.
            version: API version ("v1").
            clock: Returns the current time in epoch milliseconds.
        """
        self.api_key = api_key
        self._secret = secret
        self.base_url = base_url.rstrip("/")
        self.version = version
        self._clock = clock or milliseconds

    @staticmethod
    def hmac_sha256(secret: str, message: str) -> str:
        return hmac.new(
            secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def endpoint_path(self, path: str, params: Mapping[str, Any]) -> str:
        return f"/api/{self.version}/{implode_params(path, params)}"

    def sign(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        timestamp: Optional[int] = None,
    ) -> SignedRequest:
        """
        Build a signed request.

        Args:
            path: Endpoint path template (e.g. "trade/order").
            api: "public" or "private".
            method: HTTP method.
            params: Parameter bag; never mutated.
            timestamp: Epoch milliseconds to sign with. Defaults to the clock.

        Returns:
            SignedRequest: URL, method, body and headers.

        Raises:
            AuthenticationError: If a private request is made without credentials.
        """
        method = method.upper()
        params = dict(params or {})
        endpoint_path = self.endpoint_path(path, params)
        url = self.base_url + endpoint_path
        for name in extract_params(path):
            params.pop(name, None)

        if api != "private":
            if params and method == "GET":
                url += "?" + encode_query(params)
            return SignedRequest(url=url, method=method)

        if not self.api_key or not self._secret:
            raise AuthenticationError(
                "pionex requires api_key and secret for private endpoints"
            )

        body: Optional[str] = None
        if method in ("POST", "DELETE"):
            body = json.dumps(params, separators=(",", ":"))

        params["timestamp"] = timestamp if timestamp is not None else self._clock()
        query = encode_query(params)
        url += "?" + query

        canonical = method + endpoint_path + "?" + query
        if body:
            canonical += body

        signature = self.hmac_sha256(self._secret, canonical)

        logger.debug(
            "request_signed",
            exchange="pionex",
            method=method,
            path=endpoint_path,
            timestamp=params["timestamp"],
        )

        return SignedRequest(
            url=url,
            method=method,
            body=body,
            headers={
                "Content-Type": "application/json",
                "PIONEX-KEY": self.api_key,
                "PIONEX-SIGNATURE": signature,
            },
        )

    def __repr__(self) -> str:
        return f"PionexSigner(base_url={self.base_url}, version={self.version})"
