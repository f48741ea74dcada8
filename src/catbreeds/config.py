"""
Client configuration for catbreeds.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (catbreeds.toml)
3. Default values (lowest priority)

Environment variables:
- CAT_API_KEY: The Cat API key (required to talk to the API)
- CAT_API_BASE_URL: API base URL
- CATBREEDS_TIMEOUT: Per-attempt request timeout in seconds
- CATBREEDS_MAX_RETRIES: Total attempts per request
- CATBREEDS_RETRY_DELAY: Base retry backoff in seconds
- CATBREEDS_PAGE_SIZE: Breeds requested per page
- CATBREEDS_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- CATBREEDS_STRUCTURED_LOGGING: One JSON object per log line (true/false)
- CATBREEDS_CONFIG_FILE: Path to TOML config file

Example catbreeds.toml:

    [api]
    key = "live_..."
    page_size = 20

    [http]
    timeout = 10.0
    max_retries = 5

    [logging]
    level = "DEBUG"
"""

import os
import json
import logging
import tomllib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from catbreeds.core.errors import ConfigurationError
from catbreeds.core.gateway import DEFAULT_BASE_URL, DEFAULT_PAGE_SIZE
from catbreeds.core.http import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY, DEFAULT_TIMEOUT
from catbreeds.core.redaction import redact_secrets


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("catbreeds.toml", ".catbreeds.toml")

_TRUTHY = ("true", "1", "yes")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per log record, with secrets redacted from the message."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }

        if record.exc_info:
            log_obj["error.type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            log_obj["error.stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False, default=str)


@dataclass
class CatalogConfig:
    """Client configuration with support for env vars and TOML overrides."""

    # API configuration
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE

    # HTTP configuration
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = False

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "CatalogConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("CATBREEDS_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Error loading config file %s: %s", path, e)
            return

        if "api" in data:
            api = data["api"]
            if "key" in api:
                self.api_key = str(api["key"])
            if "base_url" in api:
                self.base_url = str(api["base_url"])
            if "page_size" in api:
                self._set_number("page_size", api["page_size"], int, str(path))

        if "http" in data:
            http = data["http"]
            if "timeout" in http:
                self._set_number("timeout", http["timeout"], float, str(path))
            if "max_retries" in http:
                self._set_number("max_retries", http["max_retries"], int, str(path))
            if "retry_delay" in http:
                self._set_number("retry_delay", http["retry_delay"], float, str(path))

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = bool(log["structured"])

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if key := os.environ.get("CAT_API_KEY"):
            self.api_key = key

        if base_url := os.environ.get("CAT_API_BASE_URL"):
            self.base_url = base_url

        if timeout := os.environ.get("CATBREEDS_TIMEOUT"):
            self._set_number("timeout", timeout, float, "CATBREEDS_TIMEOUT")

        if retries := os.environ.get("CATBREEDS_MAX_RETRIES"):
            self._set_number("max_retries", retries, int, "CATBREEDS_MAX_RETRIES")

        if delay := os.environ.get("CATBREEDS_RETRY_DELAY"):
            self._set_number("retry_delay", delay, float, "CATBREEDS_RETRY_DELAY")

        if page_size := os.environ.get("CATBREEDS_PAGE_SIZE"):
            self._set_number("page_size", page_size, int, "CATBREEDS_PAGE_SIZE")

        if level := os.environ.get("CATBREEDS_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("CATBREEDS_STRUCTURED_LOGGING"):
            self.structured_logging = structured.lower() in _TRUTHY

    def _set_number(
        self,
        name: str,
        raw: Any,
        convert: Callable[[Any], Any],
        source: str,
    ) -> None:
        # Keep the current value when the override does not parse
        try:
            setattr(self, name, convert(raw))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s value from %s: %r", name, source, raw)

    def require_api_key(self) -> str:
        """
        Return the API key, failing fast when it is not configured.

        Raises:
            ConfigurationError: If no key was found in env or TOML
        """
        if not self.api_key:
            raise ConfigurationError("CAT_API_KEY not found in environment variables")
        return self.api_key

    def validate(self) -> None:
        """
        Check numeric settings are usable by the HTTP client and gateway.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be >= 1, got {self.max_retries}")
        if self.page_size < 1:
            raise ConfigurationError(f"page_size must be >= 1, got {self.page_size}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout:g}")
        if self.retry_delay < 0:
            raise ConfigurationError(f"retry_delay must be >= 0, got {self.retry_delay:g}")

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            formatter: logging.Formatter = JsonLogFormatter()
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("catbreeds")
        root_logger.setLevel(level)
        # Repeated calls replace the handler instead of stacking duplicates
        for existing in list(root_logger.handlers):
            if getattr(existing, "_catbreeds_handler", False):
                root_logger.removeHandler(existing)
        handler._catbreeds_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
