"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Perforce session
    p4port: str = field(default="perforce:1666")
    p4user: str = field(default="")
    p4client: str = field(default="")
    p4_binary: str = field(default="p4")

    # Retry and refresh
    command_retries: int = field(default=10)
    refresh_threshold: int = field(default=100)
    retry_delay: float = field(default=5.0)
    command_timeout: int = field(default=0)  # 0 waits forever

    # Relay host
    ssh_host: str = field(default="localhost")
    known_hosts: str | None = field(default=None)
    strict_host_key_checking: bool = field(default=True)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Supports both P4RELAY_* (preferred) and the standard Perforce
        P4PORT / P4USER / P4CLIENT variables. P4RELAY_* takes precedence
        if both are set.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            p4port=cls._get_str("P4RELAY_P4PORT", "P4PORT", "perforce:1666"),
            p4user=cls._get_str("P4RELAY_P4USER", "P4USER", os.getenv("USER", "")),
            p4client=cls._get_str("P4RELAY_P4CLIENT", "P4CLIENT", ""),
            p4_binary=os.getenv("P4RELAY_P4_BINARY", "p4"),
            command_retries=cls._get_int("P4RELAY_RETRIES", 10),
            refresh_threshold=cls._get_int("P4RELAY_REFRESH_THRESHOLD", 100),
            retry_delay=cls._get_float("P4RELAY_RETRY_DELAY", 5.0),
            command_timeout=cls._get_int("P4RELAY_COMMAND_TIMEOUT", 0),
            ssh_host=os.getenv("P4RELAY_SSH_HOST", "localhost"),
            known_hosts=os.getenv("P4RELAY_KNOWN_HOSTS"),
            strict_host_key_checking=cls._get_bool("P4RELAY_STRICT_HOST_KEY_CHECKING", True),
            log_level=os.getenv("P4RELAY_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("P4RELAY_LOG_COLORS", True),
        )

    @staticmethod
    def _get_str(key: str, legacy_key: str, default: str) -> str:
        """Get string from environment with legacy fallback.

        Args:
            key: Primary environment variable key
            legacy_key: Standard Perforce variable consulted second
            default: Default value if neither is set

        Returns:
            String value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            value = os.getenv(legacy_key)
        return default if value is None else value

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid number for %s: %s, using default %s", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")
