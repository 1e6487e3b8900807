"""
Configuration loader for the exchange description and connector settings.

The description table ships with the package as config/pionex.yaml and is
validated into an ExchangeDescription. Connector settings come from the
environment.

Environment variables:
    - PIONEX_API_KEY: API key
    - PIONEX_API_SECRET: API secret
    - PIONEX_BASE_URL: REST base URL override
    - PIONEX_TIMEOUT_SECONDS: Request timeout (default: 10)
    - LOG_LEVEL: Application log level (default: INFO)
    - LOG_FORMAT: "json" or "text" (default: json)

Example:
    >>> from pionex_connector.config.loader import load_description, load_settings
    >>> description = load_description()
    >>> settings = load_settings()
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from pionex_connector.config.models import (
    ConnectorSettings,
    ExchangeDescription,
    LogFormat,
    LogLevel,
)

DEFAULT_DESCRIPTION_PATH = Path(__file__).parent / "pionex.yaml"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads the exchange description and connector settings.

    Example:
        >>> loader = ConfigLoader()
        >>> description = loader.load_description()
        >>> description.id
        'pionex'
    """

    def __init__(self, description_path: Path | str | None = None):
        """
        Initialize config loader.

        Args:
            description_path: Path to a description YAML file. Defaults to the
                table bundled with the package.

        Raises:
            ConfigLoadError: If the description file does not exist.
        """
        self.description_path = Path(description_path or DEFAULT_DESCRIPTION_PATH)
        if not self.description_path.is_file():
            raise ConfigLoadError(
                f"Description file not found: {self.description_path}",
                file_path=self.description_path,
            )

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load the description YAML file.

        Raises:
            ConfigLoadError: If the file is empty, unreadable or invalid YAML.
        """
        file_path = self.description_path
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

        if data is None:
            raise ConfigLoadError(
                f"Description file is empty: {file_path}",
                file_path=file_path,
            )
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Description file must contain a mapping: {file_path}",
                file_path=file_path,
            )
        return data

    def load_description(self) -> ExchangeDescription:
        """
        Load and validate the exchange description table.

        Returns:
            ExchangeDescription: Validated, immutable description.

        Raises:
            ConfigLoadError: If the table is missing fields or invalid.
        """
        data = self._load_yaml()
        # YAML keys such as timeframes may parse as non-strings
        timeframes = data.get("timeframes") or {}
        data["timeframes"] = {str(k): str(v) for k, v in timeframes.items()}

        try:
            return ExchangeDescription(**data)
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid exchange description: {e}",
                file_path=self.description_path,
                cause=e,
            ) from e

    def _get_log_level(self) -> LogLevel:
        level_str = os.getenv("LOG_LEVEL", "INFO").upper()
        try:
            return LogLevel(level_str)
        except ValueError:
            return LogLevel.INFO

    def _get_log_format(self) -> LogFormat:
        format_str = os.getenv("LOG_FORMAT", "json").lower()
        try:
            return LogFormat(format_str)
        except ValueError:
            return LogFormat.JSON

    def load_settings(self) -> ConnectorSettings:
        """
        Load connector settings from environment variables.

        Returns:
            ConnectorSettings: Validated settings.

        Raises:
            ConfigLoadError: If a value fails validation.
        """
        try:
            return ConnectorSettings(
                api_key=os.getenv("PIONEX_API_KEY") or None,
                secret=os.getenv("PIONEX_API_SECRET") or None,
                base_url=os.getenv("PIONEX_BASE_URL") or None,
                timeout_seconds=int(os.getenv("PIONEX_TIMEOUT_SECONDS", "10")),
                log_level=self._get_log_level(),
                log_format=self._get_log_format(),
            )
        except (ValidationError, ValueError) as e:
            raise ConfigLoadError(
                f"Invalid connector settings: {e}",
                cause=e,
            ) from e


def load_description(description_path: Path | str | None = None) -> ExchangeDescription:
    """
    Convenience function to load the exchange description.

    Args:
        description_path: Optional path to an alternative description file.

    Returns:
        ExchangeDescription: Validated description.

    Raises:
        ConfigLoadError: If loading fails.
    """
    return ConfigLoader(description_path).load_description()


def load_settings() -> ConnectorSettings:
    """
    Convenience function to load connector settings from the environment.

    Returns:
        ConnectorSettings: Validated settings.
    """
    return ConfigLoader().load_settings()
