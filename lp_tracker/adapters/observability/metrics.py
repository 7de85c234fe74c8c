"""OpenTelemetry metrics provider for lp-tracker."""

import logging
from typing import Optional

from opentelemetry import metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader,
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

from ...config import Config
from .constants import (
    COMMAND_DURATION,
    COMMANDS_TOTAL,
    LABEL_COMMAND,
    LABEL_ENDPOINT_TYPE,
    LABEL_ERROR_TYPE,
    LABEL_OUTCOME,
    LABEL_STATUS_CODE,
    REFRESH_ERRORS,
    REFRESH_ITERATIONS,
    RIOT_API_CALL_DURATION,
    RIOT_API_CALLS_TOTAL,
    RIOT_API_RATE_LIMITS,
)

logger = logging.getLogger(__name__)


class MetricsProvider:
    """Manages OpenTelemetry metrics for the lp-tracker service."""

    def __init__(self, config: Config):
        """Initialize the metrics provider.

        Args:
            config: Application configuration
        """
        self.config = config
        self._meter_provider: Optional[MeterProvider] = None
        self._meter: Optional[metrics.Meter] = None
        self._initialized = False

        # Metric instruments - initialized in initialize()
        self._riot_api_calls_counter = None
        self._riot_api_duration_histogram = None
        self._riot_api_rate_limits_counter = None

        self._commands_counter = None
        self._command_duration_histogram = None

        self._refresh_iterations_counter = None
        self._refresh_errors_counter = None

    @property
    def enabled(self) -> bool:
        return self._initialized and self.config.otel_enabled

    def initialize(self) -> None:
        """Initialize the OpenTelemetry metrics provider."""
        if self._initialized:
            logger.warning("Metrics provider already initialized")
            return

        if not self.config.otel_enabled:
            logger.info("OpenTelemetry metrics disabled")
            self._initialized = True
            return

        try:
            resource = Resource.create({
                SERVICE_NAME: self.config.otel_service_name,
                "environment": self.config.environment.value,
            })

            if self.config.otel_exporter_type == "console":
                exporter = ConsoleMetricExporter()
                logger.info("Using console metric exporter")
            elif self.config.otel_exporter_type == "otlp":
                exporter = OTLPMetricExporter(
                    endpoint=self.config.otel_otlp_endpoint,
                    insecure=True,
                )
                logger.info(f"Using OTLP metric exporter: {self.config.otel_otlp_endpoint}")
            else:
                logger.info("Metrics export disabled (exporter_type='none')")
                self._initialized = True
                return

            reader = PeriodicExportingMetricReader(
                exporter=exporter,
                export_interval_millis=self.config.otel_export_interval_millis,
                export_timeout_millis=self.config.otel_export_timeout_millis,
            )

            self._meter_provider = MeterProvider(
                resource=resource,
                metric_readers=[reader],
            )
            metrics.set_meter_provider(self._meter_provider)

            self._meter = metrics.get_meter(__name__)
            self._create_instruments()

            self._initialized = True
            logger.info("Metrics provider initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize metrics provider: {e}")
            self._initialized = False
            raise

    def _create_instruments(self) -> None:
        """Create all metric instruments."""
        if not self._meter:
            return

        # Riot API metrics
        self._riot_api_calls_counter = self._meter.create_counter(
            name=RIOT_API_CALLS_TOTAL,
            description="Total number of Riot API calls",
            unit="1",
        )
        self._riot_api_duration_histogram = self._meter.create_histogram(
            name=RIOT_API_CALL_DURATION,
            description="Duration of Riot API calls in seconds",
            unit="s",
        )
        self._riot_api_rate_limits_counter = self._meter.create_counter(
            name=RIOT_API_RATE_LIMITS,
            description="Total number of rate limit responses from Riot API",
            unit="1",
        )

        # Command metrics
        self._commands_counter = self._meter.create_counter(
            name=COMMANDS_TOTAL,
            description="Total number of admitted commands by outcome",
            unit="1",
        )
        self._command_duration_histogram = self._meter.create_histogram(
            name=COMMAND_DURATION,
            description="Duration of admitted commands in seconds",
            unit="s",
        )

        # Refresh metrics
        self._refresh_iterations_counter = self._meter.create_counter(
            name=REFRESH_ITERATIONS,
            description="Total number of refresh batches",
            unit="1",
        )
        self._refresh_errors_counter = self._meter.create_counter(
            name=REFRESH_ERRORS,
            description="Total number of players that failed to refresh",
            unit="1",
        )

    def shutdown(self) -> None:
        """Shutdown the metrics provider and flush any pending metrics."""
        if self._meter_provider:
            try:
                self._meter_provider.shutdown()
                logger.info("Metrics provider shut down")
            except Exception as e:
                logger.error(f"Error shutting down metrics provider: {e}")

    # Riot API metrics

    def record_riot_api_call(
        self,
        endpoint_type: str,
        status_code: int,
        duration: float,
        error_type: Optional[str] = None
    ) -> None:
        """Record a Riot API call."""
        if not self.enabled:
            return

        labels = {
            LABEL_ENDPOINT_TYPE: endpoint_type,
            LABEL_STATUS_CODE: str(status_code),
        }
        if error_type:
            labels[LABEL_ERROR_TYPE] = error_type

        if self._riot_api_calls_counter:
            self._riot_api_calls_counter.add(1, labels)
        if self._riot_api_duration_histogram:
            self._riot_api_duration_histogram.record(duration, labels)

        if status_code == 429 and self._riot_api_rate_limits_counter:
            self._riot_api_rate_limits_counter.add(1, {LABEL_ENDPOINT_TYPE: endpoint_type})

    # Command metrics

    def record_command(self, command: str, outcome: str, duration: float) -> None:
        """Record a completed command and how long it held a worker slot."""
        if not self.enabled:
            return

        labels = {LABEL_COMMAND: command, LABEL_OUTCOME: outcome}
        if self._commands_counter:
            self._commands_counter.add(1, labels)
        if self._command_duration_histogram:
            self._command_duration_histogram.record(duration, {LABEL_COMMAND: command})

    # Refresh metrics

    def record_refresh_iteration(self, failed_players: int = 0) -> None:
        """Record a refresh batch and how many players failed in it."""
        if not self.enabled:
            return

        if self._refresh_iterations_counter:
            self._refresh_iterations_counter.add(1)
        if failed_players and self._refresh_errors_counter:
            self._refresh_errors_counter.add(failed_players)


# Global metrics provider instance
_metrics_provider: Optional[MetricsProvider] = None


def get_metrics_provider() -> Optional[MetricsProvider]:
    """Get the global metrics provider instance."""
    return _metrics_provider


def initialize_metrics(config: Config) -> MetricsProvider:
    """Initialize the global metrics provider.

    Args:
        config: Application configuration

    Returns:
        The initialized MetricsProvider instance
    """
    global _metrics_provider

    if _metrics_provider is not None:
        logger.warning("Metrics provider already initialized")
        return _metrics_provider

    _metrics_provider = MetricsProvider(config)
    _metrics_provider.initialize()

    return _metrics_provider


def shutdown_metrics() -> None:
    """Shutdown the global metrics provider."""
    global _metrics_provider

    if _metrics_provider:
        _metrics_provider.shutdown()
        _metrics_provider = None
