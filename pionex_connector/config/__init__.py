"""
Configuration management for the Pionex connector.

The exchange description (rate limits, capability flags, URLs, endpoint
weights, fees, error-code mapping) is loaded from the bundled YAML table and
validated with Pydantic. Connector settings (credentials, timeouts, logging)
come from environment variables.

Example:
    >>> from pionex_connector.config import load_description, load_settings
    >>> description = load_description()
    >>> description.supports("fetchTickers")
    True

Modules:
    loader: YAML and environment loading
    models: Pydantic models for configuration validation
"""

from pionex_connector.config.loader import (
    ConfigLoadError,
    ConfigLoader,
    load_description,
    load_settings,
)
from pionex_connector.config.models import (
    ApiUrls,
    ConnectorSettings,
    ErrorTables,
    ExchangeDescription,
    FeeSchedule,
    LogFormat,
    LogLevel,
    TradingFees,
    Urls,
)

__all__: list[str] = [
    # Loader
    "load_description",
    "load_settings",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "LogFormat",
    "LogLevel",
    # Description
    "ApiUrls",
    "Urls",
    "TradingFees",
    "FeeSchedule",
    "ErrorTables",
    "ExchangeDescription",
    # Settings
    "ConnectorSettings",
]
