"""Configuration management for the EcoScout discovery service.

This module provides centralized configuration for all pipeline components.
All settings are loaded from environment variables with sensible defaults.

Environment Variables:
    Required:
        GEMINI_API_KEY: Google Gemini API key (text + image generation)
        SERPER_API_KEY: Serper API key (shopping + image search)

    Models:
        GEMINI_MODEL: Model for text generation (generateContent)
        IMAGEN_MODEL: Model for article image generation (predict)

    Discovery:
        SEARCH_REGION: Country code sent to the search provider ('in')
        TREND_COUNT: Number of trending categories to request
        ARTICLE_COUNT: Number of learn-hub articles to request
        VERIFY_LINKS: Check scouted links before trusting them
        AFFILIATE_TAG: Amazon affiliate tag added to Amazon links (empty = off)

    Network:
        REQUEST_TIMEOUT: Timeout for AI and search calls in seconds
        VERIFY_TIMEOUT: Bounded wait for link verification in seconds

    Server:
        SERVER_HOST / SERVER_PORT: Bind address for `main.py serve`
        CACHE_TTL_SECONDS: How long a discovery result is served from memory

    Optional Features:
        ENABLE_LOGFIRE: Enable Logfire/OpenTelemetry tracing

    Logging:
        LOG_LEVEL: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_BACKUP_COUNT: Number of rotated log files to keep
        LOG_MAX_BYTES: Max log file size in bytes (0 = time-based rotation)
        LOG_FORMAT: Log format ('text' or 'json' for structured logging)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from errors import ConfigurationError


def _env(key: str, default: str = "") -> str:
    """Get string environment variable with optional default.

    Args:
        key: Environment variable name
        default: Value to return if not set

    Returns:
        Environment variable value or default
    """
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Raises:
        ValueError: If value is set but cannot be parsed as integer
    """
    val = os.environ.get(key)
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer value for {key}: '{val}'")


def _env_float(key: str, default: float) -> float:
    """Get float environment variable with default.

    Raises:
        ValueError: If value is set but cannot be parsed as float
    """
    val = os.environ.get(key)
    if not val:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"Invalid float value for {key}: '{val}'")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable with default.

    Recognizes truthy values: '1', 'true', 'yes', 'on'
    Recognizes falsy values: '0', 'false', 'no', 'off'
    """
    val = os.environ.get(key, "").lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    return default


@dataclass
class Config:
    """Application configuration loaded from environment variables.

    Use Config.load() to create an instance with values from the environment.
    Secrets are never hard-coded; both keys must come from the environment.

    Example:
        >>> config = Config.load()
        >>> if error := config.validate():
        ...     print(f"Config error: {error}")
    """

    # === Required ===
    gemini_api_key: str = ""  # GEMINI_API_KEY
    serper_api_key: str = ""  # SERPER_API_KEY

    # === AI Models ===
    gemini_model: str = "gemini-2.0-flash"  # Text generation
    imagen_model: str = "imagen-3.0-generate-002"  # Article images

    # === Discovery ===
    search_region: str = "in"  # SEARCH_REGION - 'gl' parameter for Serper
    trend_count: int = 6  # TREND_COUNT - Categories per discovery run
    article_count: int = 3  # ARTICLE_COUNT - Articles per learn-hub run
    verify_links: bool = False  # VERIFY_LINKS - HEAD-check scouted links
    affiliate_tag: str = ""  # AFFILIATE_TAG - e.g. 'ecojinner-21'

    # === Network ===
    request_timeout: float = 60.0  # REQUEST_TIMEOUT - AI/search calls
    verify_timeout: float = 3.5  # VERIFY_TIMEOUT - Link liveness check

    # === Server ===
    server_host: str = "127.0.0.1"  # SERVER_HOST
    server_port: int = 8888  # SERVER_PORT
    cache_ttl_seconds: int = 600  # CACHE_TTL_SECONDS - Discovery cache (10 min)

    # === Output Directories ===
    log_dir: Path = field(default_factory=lambda: Path("log"))  # LOG_DIR

    # === Logging Configuration ===
    log_level: str = "INFO"  # LOG_LEVEL
    log_backup_count: int = 30  # LOG_BACKUP_COUNT
    log_max_bytes: int = 0  # LOG_MAX_BYTES - 0 = time-based rotation
    log_format: str = "text"  # LOG_FORMAT - 'text' or 'json'

    # === Optional: Observability ===
    # Requires: pip install logfire
    enable_logfire: bool = False  # ENABLE_LOGFIRE
    logfire_token: str = ""  # LOGFIRE_TOKEN

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            gemini_api_key=_env("GEMINI_API_KEY"),
            serper_api_key=_env("SERPER_API_KEY"),
            gemini_model=_env("GEMINI_MODEL", "gemini-2.0-flash"),
            imagen_model=_env("IMAGEN_MODEL", "imagen-3.0-generate-002"),
            search_region=_env("SEARCH_REGION", "in"),
            trend_count=_env_int("TREND_COUNT", 6),
            article_count=_env_int("ARTICLE_COUNT", 3),
            verify_links=_env_bool("VERIFY_LINKS", False),
            affiliate_tag=_env("AFFILIATE_TAG"),
            request_timeout=_env_float("REQUEST_TIMEOUT", 60.0),
            verify_timeout=_env_float("VERIFY_TIMEOUT", 3.5),
            server_host=_env("SERVER_HOST", "127.0.0.1"),
            server_port=_env_int("SERVER_PORT", 8888),
            cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", 600),
            log_dir=Path(_env("LOG_DIR", "log")),
            enable_logfire=_env_bool("ENABLE_LOGFIRE", False),
            logfire_token=_env("LOGFIRE_TOKEN"),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_backup_count=_env_int("LOG_BACKUP_COUNT", 30),
            log_max_bytes=_env_int("LOG_MAX_BYTES", 0),
            log_format=_env("LOG_FORMAT", "text").lower(),
        )

    def validate(self) -> str | None:
        """Validate configuration for required fields and valid values.

        Returns:
            Error message string if invalid, None if valid.
        """
        if not self.gemini_api_key:
            return "GEMINI_API_KEY environment variable is required"
        if not self.serper_api_key:
            return "SERPER_API_KEY environment variable is required"
        if self.trend_count <= 0:
            return "TREND_COUNT must be positive"
        if self.article_count <= 0:
            return "ARTICLE_COUNT must be positive"
        if self.request_timeout <= 0:
            return "REQUEST_TIMEOUT must be positive"
        if self.verify_timeout <= 0:
            return "VERIFY_TIMEOUT must be positive"
        if self.cache_ttl_seconds < 0:
            return "CACHE_TTL_SECONDS must be non-negative"
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return f"Invalid LOG_LEVEL '{self.log_level}' - must be DEBUG, INFO, WARNING, ERROR, or CRITICAL"
        if self.log_format not in ("text", "json"):
            return f"Invalid LOG_FORMAT '{self.log_format}' - must be 'text' or 'json'"
        if self.log_backup_count < 0:
            return "LOG_BACKUP_COUNT must be non-negative"
        if self.log_max_bytes < 0:
            return "LOG_MAX_BYTES must be non-negative"
        return None

    def require(self) -> None:
        """Raise ConfigurationError if the configuration is unusable.

        Called by the pipeline before any network call is made.
        """
        if error := self.validate():
            raise ConfigurationError(error)
