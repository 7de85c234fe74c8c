"""Tests for the OpenTelemetry metrics provider."""

import pytest

from lp_tracker.adapters.observability import metrics as metrics_module
from lp_tracker.adapters.observability import (
    MetricsProvider,
    get_metrics_provider,
    initialize_metrics,
    shutdown_metrics,
)
from lp_tracker.config import Config


@pytest.fixture(autouse=True)
def reset_global_provider():
    metrics_module._metrics_provider = None
    yield
    metrics_module._metrics_provider = None


def make_config(**overrides):
    return Config(database_url="sqlite+aiosqlite:///:memory:", riot_api_key="key", **overrides)


class TestMetricsProvider:
    """Test cases for MetricsProvider."""

    def test_disabled_provider_is_a_no_op(self):
        """Test that recording without OpenTelemetry enabled does nothing."""
        provider = MetricsProvider(make_config(otel_enabled=False))
        provider.initialize()

        assert not provider.enabled
        provider.record_riot_api_call("account", 200, 0.1)
        provider.record_command("add_player", "success", 1.5)
        provider.record_refresh_iteration(failed_players=2)

    def test_enabled_provider_creates_instruments(self):
        """Test that an enabled provider records through its instruments."""
        provider = MetricsProvider(make_config(otel_enabled=True, otel_exporter_type="console"))
        provider.initialize()

        try:
            assert provider.enabled
            assert provider._commands_counter is not None
            provider.record_riot_api_call("league", 429, 0.2, error_type="rate_limited")
            provider.record_command("list_players", "timeout", 10.0)
            provider.record_refresh_iteration(failed_players=1)
        finally:
            provider.shutdown()

    def test_global_provider_lifecycle(self):
        """Test the module level provider helpers."""
        assert get_metrics_provider() is None

        provider = initialize_metrics(make_config())
        assert get_metrics_provider() is provider
        assert initialize_metrics(make_config()) is provider

        shutdown_metrics()
        assert get_metrics_provider() is None
