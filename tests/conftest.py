"""Shared fixtures: the bundled description and sample Pionex payloads."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from pionex_connector.config import ExchangeDescription, load_description


@pytest.fixture(scope="session")
def description() -> ExchangeDescription:
    return load_description()


@pytest.fixture
def unthrottled(description: ExchangeDescription) -> ExchangeDescription:
    """Description with throttling disabled so tests never sleep."""
    return description.model_copy(update={"rate_limit": 0})


@pytest.fixture
def symbol_record() -> Dict[str, Any]:
    return {
        "symbol": "BTC_USDT",
        "type": "SPOT",
        "baseCurrency": "BTC",
        "quoteCurrency": "USDT",
        "basePrecision": 6,
        "quotePrecision": 2,
        "amountPrecision": 8,
        "minAmount": "10",
        "minTradeSize": "0.000001",
        "maxTradeSize": "1000",
        "enable": True,
    }


@pytest.fixture
def order_record() -> Dict[str, Any]:
    return {
        "orderId": 1234567890,
        "symbol": "BTC_USDT",
        "type": "LIMIT",
        "side": "SELL",
        "price": "30000.00",
        "size": "0.10",
        "amount": "0",
        "filledSize": "0.05",
        "filledAmount": "1500.00",
        "fee": "0.15",
        "feeCoin": "USDT",
        "status": "OPEN",
        "IOC": False,
        "clientOrderId": "9e3d5ab3",
        "createTime": 1566676132311,
        "updateTime": 1566676132311,
    }


def envelope(data: Any = None, timestamp: int = 1566691672311) -> Dict[str, Any]:
    """Wrap a payload in a successful Pionex response envelope."""
    response: Dict[str, Any] = {"result": True, "timestamp": timestamp}
    if data is not None:
        response["data"] = data
    return response
