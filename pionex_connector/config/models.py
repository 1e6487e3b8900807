"""
Pydantic models for connector configuration.

Two kinds of configuration exist:
    - ExchangeDescription: the static description table shipped with the
      package (config/pionex.yaml) - rate limits, capability flags, URLs,
      endpoint weights, fees and the vendor error-code mapping.
    - ConnectorSettings: per-deployment settings read from the environment
      (credentials, base URL override, timeouts, logging).

Both are frozen so a loaded configuration can be shared safely.

Example:
    >>> from pionex_connector.config import load_description
    >>> description = load_description()
    >>> description.endpoint_weight("private", "get", "trade/openOrders")
    5
"""

from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, Field, field_validator, model_validator

from pionex_connector.errors import ERROR_KINDS, ExchangeError


def _freeze(value: Any) -> Any:
    """Wrap nested dicts in read-only mapping proxies."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


# =============================================================================
# ENUMS
# =============================================================================


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# EXCHANGE DESCRIPTION
# =============================================================================


class ApiUrls(BaseModel):
    """Base URLs for each API namespace."""

    model_config = {"frozen": True, "extra": "forbid"}

    public: str = Field(..., description="Base URL for public endpoints")
    private: str = Field(..., description="Base URL for private endpoints")


class Urls(BaseModel):
    """URL section of the description table."""

    model_config = {"frozen": True, "extra": "forbid"}

    api: ApiUrls
    www: Optional[str] = None
    doc: Optional[str] = None
    fees: Optional[str] = None


class TradingFees(BaseModel):
    """Flat trading fee schedule."""

    model_config = {"frozen": True, "extra": "forbid"}

    tier_based: bool = False
    percentage: bool = True
    taker: Decimal = Field(..., ge=Decimal("0"))
    maker: Decimal = Field(..., ge=Decimal("0"))


class FeeSchedule(BaseModel):
    """Fee section of the description table."""

    model_config = {"frozen": True, "extra": "forbid"}

    trading: TradingFees


class ErrorTables(BaseModel):
    """Vendor error code -> error kind name, exact and broad (substring)."""

    model_config = {"frozen": True, "extra": "forbid"}

    exact: Mapping[str, str] = Field(default_factory=dict)
    broad: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("exact", "broad")
    @classmethod
    def validate_kinds(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Ensure every mapped kind belongs to the error taxonomy."""
        unknown = sorted({kind for kind in v.values() if kind not in ERROR_KINDS})
        if unknown:
            raise ValueError(f"Unknown error kinds in exception table: {unknown}")
        return _freeze(v)


class ExchangeDescription(BaseModel):
    """
    Static description of the exchange.

    Loaded once at adapter construction and never mutated.

    Attributes:
        id: Lowercase exchange identifier ("pionex").
        name: Display name.
        version: API version used in the path prefix ("/api/v1/").
        rate_limit: Minimum milliseconds between weight-1 requests.
        has: Capability flags (None means unknown).
        timeframes: Unified timeframe -> vendor interval.
        api: namespace -> HTTP method -> endpoint path -> weight.
        exceptions: Exact and broad error code tables.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1)
    countries: List[str] = Field(default_factory=list)
    version: str = Field(default="v1")
    rate_limit: int = Field(default=100, ge=0, description="Milliseconds per weight unit")
    precision_mode: str = Field(default="tick_size")
    has: Mapping[str, Optional[bool]] = Field(default_factory=dict)
    timeframes: Mapping[str, str] = Field(default_factory=dict)
    urls: Urls
    api: Mapping[str, Mapping[str, Mapping[str, int]]] = Field(default_factory=dict)
    fees: FeeSchedule
    exceptions: ErrorTables = Field(default_factory=ErrorTables)

    @field_validator("has", "timeframes", "api")
    @classmethod
    def freeze_tables(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        """Expose lookup tables read-only."""
        return _freeze(v)

    @model_validator(mode="after")
    def validate_api(self) -> "ExchangeDescription":
        """Endpoint tables may only use known namespaces and methods."""
        for namespace, methods in self.api.items():
            if namespace not in ("public", "private"):
                raise ValueError(f"Unknown API namespace: {namespace}")
            for method, endpoints in methods.items():
                if method not in ("get", "post", "put", "delete"):
                    raise ValueError(f"Unknown HTTP method in {namespace}: {method}")
                for path, weight in endpoints.items():
                    if weight < 0:
                        raise ValueError(f"Negative weight for {namespace} {method} {path}")
        return self

    def endpoint_weight(self, api: str, method: str, path: str) -> int:
        """
        Return the declared weight of an endpoint.

        Args:
            api: "public" or "private".
            method: HTTP method (case-insensitive).
            path: Endpoint path (e.g. "market/depth").

        Returns:
            int: Declared weight, or 1 when the endpoint is not listed.
        """
        return self.api.get(api, {}).get(method.lower(), {}).get(path, 1)

    def supports(self, capability: str) -> bool:
        """Return True only when the capability flag is explicitly true."""
        return self.has.get(capability) is True

    def timeframe(self, timeframe: str) -> Optional[str]:
        """Map a unified timeframe ("1h") to the vendor interval ("60M")."""
        return self.timeframes.get(timeframe)

    def error_tables(
        self,
    ) -> Tuple[Dict[str, Type[ExchangeError]], Dict[str, Type[ExchangeError]]]:
        """Resolve the exception tables to exception classes."""
        exact = {code: ERROR_KINDS[kind] for code, kind in self.exceptions.exact.items()}
        broad = {code: ERROR_KINDS[kind] for code, kind in self.exceptions.broad.items()}
        return exact, broad


# =============================================================================
# CONNECTOR SETTINGS (from environment)
# =============================================================================


class ConnectorSettings(BaseModel):
    """Per-deployment connector settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    api_key: Optional[str] = Field(
        default=None,
        description="Pionex API key (PIONEX-KEY header)",
    )
    secret: Optional[str] = Field(
        default=None,
        description="Pionex API secret used for HMAC signing",
        repr=False,
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override for the REST base URL",
    )
    timeout_seconds: int = Field(
        default=10,
        description="HTTP request timeout",
        ge=1,
        le=120,
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )

    @property
    def has_credentials(self) -> bool:
        """True when both API key and secret are configured."""
        return bool(self.api_key and self.secret)
