"""
Configuration module for the space project reconciler.

Loads configuration from environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_OPERATION_TIMEOUT = 300  # seconds, per lifecycle verb


@dataclass
class ClientConfig:
    """Remote collaboration service API configuration."""

    api_base_url: str = "https://codecatalyst.global.api.aws"
    token: str = field(default="", repr=False)  # Never log token
    request_timeout: int = 30  # seconds
    service_name: str = "CodeCatalyst"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            api_base_url=os.getenv(
                "SPACES_API_URL", "https://codecatalyst.global.api.aws"
            ),
            token=os.getenv("SPACES_API_TOKEN", ""),
            request_timeout=int(os.getenv("SPACES_REQUEST_TIMEOUT", "30")),
            service_name=os.getenv("SPACES_SERVICE_NAME", "CodeCatalyst"),
        )


@dataclass
class TimeoutsConfig:
    """Deadlines for lifecycle operations and polling."""

    create: float = DEFAULT_OPERATION_TIMEOUT
    read: float = DEFAULT_OPERATION_TIMEOUT
    update: float = DEFAULT_OPERATION_TIMEOUT
    delete: float = DEFAULT_OPERATION_TIMEOUT
    poll_interval: float = 5.0
    wait_for_delete: bool = False

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        default = str(DEFAULT_OPERATION_TIMEOUT)
        return cls(
            create=float(os.getenv("PROJECT_CREATE_TIMEOUT", default)),
            read=float(os.getenv("PROJECT_READ_TIMEOUT", default)),
            update=float(os.getenv("PROJECT_UPDATE_TIMEOUT", default)),
            delete=float(os.getenv("PROJECT_DELETE_TIMEOUT", default)),
            poll_interval=float(os.getenv("PROJECT_POLL_INTERVAL", "5")),
            wait_for_delete=os.getenv("PROJECT_WAIT_FOR_DELETE", "false").lower()
            == "true",
        )


@dataclass
class DatabaseConfig:
    """PostgreSQL configuration for the local record store."""

    host: str = "localhost"
    port: int = 5432
    database: str = "space_projects"
    user: str = "reconciler"
    password: str = field(default="", repr=False)  # Never log password
    min_pool_size: int = 1
    max_pool_size: int = 10

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        password = os.getenv("DB_PASSWORD", "")
        if not password:
            raise ValueError(
                "DB_PASSWORD environment variable must be set. "
                "Database password cannot be empty."
            )

        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "space_projects"),
            user=os.getenv("DB_USER", "reconciler"),
            password=password,
            min_pool_size=int(os.getenv("DB_MIN_POOL_SIZE", "1")),
            max_pool_size=int(os.getenv("DB_MAX_POOL_SIZE", "10")),
        )


@dataclass
class Config:
    """Main configuration object."""

    client: ClientConfig
    timeouts: TimeoutsConfig
    database: DatabaseConfig
    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            client=ClientConfig.from_env(),
            timeouts=TimeoutsConfig.from_env(),
            database=DatabaseConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            client=ClientConfig(),
            timeouts=TimeoutsConfig(),
            database=DatabaseConfig(),
        )


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging with the standard format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
