"""Tests for vendor error classification."""

from __future__ import annotations

import json

import pytest

from pionex_connector.adapters.pionex.classifier import PionexErrorClassifier
from pionex_connector.errors import (
    AuthenticationError,
    BadSymbol,
    InsufficientFunds,
    OrderNotFound,
)


@pytest.fixture
def classifier(description) -> PionexErrorClassifier:
    exact, broad = description.error_tables()
    return PionexErrorClassifier(exact, broad)


class TestClassify:
    """Tests for exact and broad table lookups."""

    def test_invalid_signature(self, classifier: PionexErrorClassifier) -> None:
        """status 401 with INVALID_SIGNATURE is an authentication error."""
        response = {"status": 401, "code": "INVALID_SIGNATURE", "result": False}
        assert classifier.classify(response) is AuthenticationError

    def test_unknown_code_no_verdict(self, classifier: PionexErrorClassifier) -> None:
        """Unmapped codes give no verdict."""
        assert classifier.classify({"status": 400, "code": "SOMETHING_ELSE"}) is None

    def test_success_no_verdict(self, classifier: PionexErrorClassifier) -> None:
        """status 200 is never classified."""
        assert classifier.classify({"status": 200, "code": "INVALID_SIGNATURE"}) is None

    def test_result_false_is_failure(self, classifier: PionexErrorClassifier) -> None:
        """Envelopes without status fail on result false."""
        response = {"result": False, "code": "TRADE_INVALID_SYMBOL"}
        assert classifier.classify(response) is BadSymbol

    def test_broad_match(self, classifier: PionexErrorClassifier) -> None:
        """Unlisted codes fall back to substring matching."""
        response = {"result": False, "code": "MARGIN_NOT_ENOUGH_BALANCE"}
        assert classifier.classify(response) is InsufficientFunds

    def test_message_fallback(self, classifier: PionexErrorClassifier) -> None:
        """The message is used when no code is present."""
        response = {"status": 404, "message": "TRADE_ORDER_NOT_FOUND"}
        assert classifier.classify(response) is OrderNotFound

    def test_numeric_string_status(self, classifier: PionexErrorClassifier) -> None:
        """Numeric strings such as "401.0" are parsed as statuses."""
        response = {"status": "401.0", "code": "INVALID_SIGNATURE"}
        assert classifier.classify(response) is AuthenticationError

    def test_non_numeric_status(self, classifier: PionexErrorClassifier) -> None:
        """A non-numeric status counts as success."""
        assert classifier.classify({"status": "oops", "code": "INVALID_SIGNATURE"}) is None

    def test_non_mapping(self, classifier: PionexErrorClassifier) -> None:
        """Non-object bodies are not classified."""
        assert classifier.classify(["INVALID_SIGNATURE"]) is None


class TestHandleErrors:
    """Tests for raising classified errors."""

    def test_raises_with_body(self, classifier: PionexErrorClassifier) -> None:
        """The raised error carries the raw body."""
        response = {"status": 401, "code": "INVALID_SIGNATURE", "result": False}
        body = json.dumps(response)
        with pytest.raises(AuthenticationError) as exc_info:
            classifier.handle_errors(401, body, response)
        assert exc_info.value.body == body
        assert body in str(exc_info.value)

    def test_undecodable_body_passes(self, classifier: PionexErrorClassifier) -> None:
        """Bodies that are not JSON are left to the caller."""
        assert classifier.handle_errors(500, "<html>", None) is None

    def test_no_verdict_passes(self, classifier: PionexErrorClassifier) -> None:
        """Unclassified failures are left to the caller."""
        response = {"status": 500, "code": "UNKNOWN"}
        assert classifier.handle_errors(500, json.dumps(response), response) is None
