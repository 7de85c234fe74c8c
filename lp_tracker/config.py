"""Configuration management for LP Tracker service."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from decouple import Choices
from decouple import config


class Environment(Enum):
    """Supported deployment environments."""

    DEVELOPMENT = "development"
    CI = "CI"
    PRODUCTION = "production"


@dataclass
class Config:
    """Configuration for the LP Tracker service."""

    # Required fields
    database_url: str
    riot_api_key: str
    database_name: str = "lp_tracker"

    # Environment configuration
    environment: Environment = Environment.DEVELOPMENT

    # Riot API configuration
    riot_api_url: Optional[str] = None
    riot_account_api_url: str = "https://europe.api.riotgames.com"
    riot_api_timeout_seconds: int = 30

    # Command handling
    # Kept low because the poller shares the same Riot API key
    command_worker_pool_size: int = 2
    add_player_timeout_seconds: float = 30.0
    list_players_timeout_seconds: float = 10.0

    # Polling configuration
    poll_interval_seconds: int = 300
    refresh_pacing_seconds: float = 1.0

    # Message bus configuration (NATS)
    message_bus_url: str = "nats://localhost:4222"
    message_bus_timeout_seconds: int = 10
    message_bus_max_reconnect_attempts: int = 10
    message_bus_reconnect_delay_seconds: int = 2
    commands_subject: str = "lp_tracker.commands"
    stats_subject: str = "lp_tracker.stats"
    commands_queue_group: str = "lp_tracker"

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "text"

    # OpenTelemetry configuration
    otel_enabled: bool = False
    otel_service_name: str = "lp-tracker"
    otel_exporter_type: str = "console"
    otel_otlp_endpoint: str = "http://localhost:4317"
    otel_export_interval_millis: int = 60000
    otel_export_timeout_millis: int = 30000

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(
            config("ENVIRONMENT", default="development", cast=Choices(["development", "CI", "production"]))
        )

        # Environment-specific defaults
        default_message_bus = "nats://nats:4222" if env == Environment.PRODUCTION else "nats://localhost:4222"

        return cls(
            # Required
            database_url=config("DATABASE_URL"),
            riot_api_key=config("RIOT_API_KEY"),
            database_name=config("DATABASE_NAME", default="lp_tracker"),
            # Environment
            environment=env,
            # Riot API
            riot_api_url=config("RIOT_API_URL", default="") or None,
            riot_account_api_url=config("RIOT_ACCOUNT_API_URL", default="https://europe.api.riotgames.com"),
            riot_api_timeout_seconds=config("RIOT_API_TIMEOUT_SECONDS", default=30, cast=int),
            # Command handling
            command_worker_pool_size=config("COMMAND_WORKER_POOL_SIZE", default=2, cast=int),
            add_player_timeout_seconds=config("ADD_PLAYER_TIMEOUT_SECONDS", default=30.0, cast=float),
            list_players_timeout_seconds=config("LIST_PLAYERS_TIMEOUT_SECONDS", default=10.0, cast=float),
            # Polling
            poll_interval_seconds=config("POLL_INTERVAL_SECONDS", default=300, cast=int),
            refresh_pacing_seconds=config("REFRESH_PACING_SECONDS", default=1.0, cast=float),
            # Message bus
            message_bus_url=config("MESSAGE_BUS_URL", default=default_message_bus),
            message_bus_timeout_seconds=config("MESSAGE_BUS_TIMEOUT_SECONDS", default=10, cast=int),
            message_bus_max_reconnect_attempts=config("MESSAGE_BUS_MAX_RECONNECT_ATTEMPTS", default=10, cast=int),
            message_bus_reconnect_delay_seconds=config("MESSAGE_BUS_RECONNECT_DELAY_SECONDS", default=2, cast=int),
            commands_subject=config("COMMANDS_SUBJECT", default="lp_tracker.commands"),
            stats_subject=config("STATS_SUBJECT", default="lp_tracker.stats"),
            commands_queue_group=config("COMMANDS_QUEUE_GROUP", default="lp_tracker"),
            # Logging
            log_level=config(
                "LOG_LEVEL", default="INFO", cast=Choices(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
            ),
            log_format=config("LOG_FORMAT", default="text", cast=Choices(["json", "text"])),
            # OpenTelemetry
            otel_enabled=config("OTEL_ENABLED", default=False, cast=bool),
            otel_service_name=config("OTEL_SERVICE_NAME", default="lp-tracker"),
            otel_exporter_type=config(
                "OTEL_EXPORTER_TYPE", default="console", cast=Choices(["console", "otlp", "none"])
            ),
            otel_otlp_endpoint=config("OTEL_OTLP_ENDPOINT", default="http://localhost:4317"),
            otel_export_interval_millis=config("OTEL_EXPORT_INTERVAL_MILLIS", default=60000, cast=int),
            otel_export_timeout_millis=config("OTEL_EXPORT_TIMEOUT_MILLIS", default=30000, cast=int),
        )

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == Environment.CI

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def get_command_timeouts(self) -> dict:
        """Deadline in seconds for each command name."""
        return {
            "add_player": self.add_player_timeout_seconds,
            "list_players": self.list_players_timeout_seconds,
        }

    def get_database_url(self) -> str:
        """Construct the full database URL by combining base URL and database name."""
        from urllib.parse import urlparse, urlunparse

        parsed = urlparse(self.database_url)

        # SQLite URLs already point at a concrete database file
        if parsed.scheme.startswith("sqlite"):
            return self.database_url

        # Ensure we have the asyncpg driver specified
        scheme = parsed.scheme
        if scheme in ("postgres", "postgresql"):
            scheme = "postgresql+asyncpg"

        # The path includes the leading '/', so we prepend it to database_name
        path = f"/{self.database_name}"

        return urlunparse(
            (scheme, parsed.netloc, path, parsed.params, parsed.query, parsed.fragment)
        )
