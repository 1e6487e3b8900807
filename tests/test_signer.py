"""Tests for Pionex request signing."""

from __future__ import annotations

import hashlib
import hmac
import json
from urllib.parse import parse_qs, urlsplit

import pytest

from pionex_connector.adapters.pionex.signer import (
    PionexSigner,
    extract_params,
    implode_params,
)
from pionex_connector.errors import AuthenticationError

TIMESTAMP = 1655896754515


def _expected_signature(secret: str, canonical: str) -> str:
    return hmac.new(secret.encode(), canonical.encode(), hashlib.sha256).hexdigest()


@pytest.fixture
def signer() -> PionexSigner:
    return PionexSigner(api_key="test-key", secret="test-secret", clock=lambda: TIMESTAMP)


class TestPathTemplates:
    """Tests for path placeholder helpers."""

    def test_implode_params(self) -> None:
        """Placeholders are substituted from params."""
        assert implode_params("orders/{id}", {"id": 7}) == "orders/7"

    def test_extract_params(self) -> None:
        """Placeholder names are listed in order."""
        assert extract_params("a/{x}/b/{y}") == ["x", "y"]


class TestPublicRequests:
    """Tests for unsigned public requests."""

    def test_query_string(self, signer: PionexSigner) -> None:
        """GET parameters become the query string."""
        request = signer.sign(
            "market/depth", params={"symbol": "BTC_USDT", "limit": 5}
        )
        assert request.url == "https://api.pionex.com/api/v1/market/depth?symbol=BTC_USDT&limit=5"
        assert request.method == "GET"
        assert request.body is None
        assert request.headers == {}

    def test_no_params_no_query(self, signer: PionexSigner) -> None:
        """Without params no '?' is appended."""
        request = signer.sign("common/symbols")
        assert request.url == "https://api.pionex.com/api/v1/common/symbols"

    def test_public_needs_no_credentials(self) -> None:
        """Anonymous signers can build public requests."""
        request = PionexSigner().sign("market/tickers")
        assert request.url.endswith("/api/v1/market/tickers")


class TestPrivateRequests:
    """Tests for HMAC-signed private requests."""

    def test_get_signature(self, signer: PionexSigner) -> None:
        """GET signs METHOD + path + '?' + query with timestamp last."""
        request = signer.sign(
            "trade/openOrders", api="private", method="GET", params={"symbol": "BTC_USDT"}
        )
        query = f"symbol=BTC_USDT&timestamp={TIMESTAMP}"
        canonical = f"GET/api/v1/trade/openOrders?{query}"

        assert request.url == f"https://api.pionex.com/api/v1/trade/openOrders?{query}"
        assert request.body is None
        assert request.headers["PIONEX-KEY"] == "test-key"
        assert request.headers["PIONEX-SIGNATURE"] == _expected_signature("test-secret", canonical)

    def test_post_body_excludes_timestamp(self, signer: PionexSigner) -> None:
        """The JSON body is the parameter bag without the timestamp."""
        params = {"symbol": "BTC_USDT", "side": "BUY", "type": "LIMIT"}
        request = signer.sign("trade/order", api="private", method="POST", params=params)

        assert json.loads(request.body) == params
        assert "timestamp" not in request.body
        assert request.headers["Content-Type"] == "application/json"

        canonical = (
            "POST/api/v1/trade/order?"
            f"symbol=BTC_USDT&side=BUY&type=LIMIT&timestamp={TIMESTAMP}"
            + request.body
        )
        assert request.headers["PIONEX-SIGNATURE"] == _expected_signature("test-secret", canonical)

    def test_deterministic(self, signer: PionexSigner) -> None:
        """Identical inputs give identical signatures."""
        args = dict(api="private", method="DELETE", params={"symbol": "BTC_USDT", "orderId": 1})
        first = signer.sign("trade/order", **args)
        second = signer.sign("trade/order", **args)
        assert first == second

    def test_explicit_timestamp_overrides_clock(self, signer: PionexSigner) -> None:
        """A passed timestamp is used instead of the clock."""
        request = signer.sign("account/balances", api="private", timestamp=1)
        assert request.url.endswith("?timestamp=1")

    def test_params_not_mutated(self, signer: PionexSigner) -> None:
        """The caller's parameter bag is left untouched."""
        params = {"symbol": "BTC_USDT"}
        signer.sign("trade/allOrders", api="private", params=params)
        assert params == {"symbol": "BTC_USDT"}

    def test_missing_credentials(self) -> None:
        """Private requests without credentials raise AuthenticationError."""
        with pytest.raises(AuthenticationError):
            PionexSigner(api_key="key").sign("account/balances", api="private")

    def test_secret_not_in_repr(self, signer: PionexSigner) -> None:
        """The secret never appears in the signer's repr."""
        assert "test-secret" not in repr(signer)


class TestWireEncoding:
    """Tests for body and query rendering of non-string values."""

    def test_empty_delete_sends_empty_object(self, signer: PionexSigner) -> None:
        """An empty POST/DELETE bag is still sent and signed as '{}'."""
        request = signer.sign("trade/allOrders", api="private", method="DELETE", params={})
        assert request.body == "{}"

        canonical = f"DELETE/api/v1/trade/allOrders?timestamp={TIMESTAMP}{{}}"
        assert request.headers["PIONEX-SIGNATURE"] == _expected_signature("test-secret", canonical)

    def test_boolean_query_matches_body(self, signer: PionexSigner) -> None:
        """Booleans render as JSON literals in both query and body."""
        request = signer.sign(
            "trade/order", api="private", method="POST",
            params={"symbol": "BTC_USDT", "IOC": True},
        )
        assert request.url.endswith(f"?symbol=BTC_USDT&IOC=true&timestamp={TIMESTAMP}")
        assert request.body == '{"symbol":"BTC_USDT","IOC":true}'

    def test_list_query_is_json(self, signer: PionexSigner) -> None:
        """Nested lists are JSON-encoded in the query, never Python reprs."""
        orders = [{"side": "BUY"}]
        request = signer.sign(
            "trade/massOrder", api="private", method="POST",
            params={"symbol": "BTC_USDT", "orders": orders},
        )
        query = parse_qs(urlsplit(request.url).query)
        assert query["orders"] == ['[{"side":"BUY"}]']
        assert "%27" not in request.url

    def test_public_boolean_query(self) -> None:
        """Public queries render booleans the same way."""
        request = PionexSigner().sign("market/depth", params={"merge": False})
        assert request.url.endswith("?merge=false")
