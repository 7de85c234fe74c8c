"""Constants for OpenTelemetry metrics."""

# Service name
SERVICE_NAME = "lp-tracker"

# Metric name prefixes
METRIC_PREFIX = "lp_tracker"

# Riot API metrics
RIOT_API_CALLS_TOTAL = f"{METRIC_PREFIX}.riot_api.calls_total"
RIOT_API_CALL_DURATION = f"{METRIC_PREFIX}.riot_api.call_duration"
RIOT_API_RATE_LIMITS = f"{METRIC_PREFIX}.riot_api.rate_limits_total"

# Command metrics
COMMANDS_TOTAL = f"{METRIC_PREFIX}.commands.total"
COMMAND_DURATION = f"{METRIC_PREFIX}.commands.duration"

# Refresh metrics
REFRESH_ITERATIONS = f"{METRIC_PREFIX}.refresh.iterations_total"
REFRESH_ERRORS = f"{METRIC_PREFIX}.refresh.errors_total"

# Common label keys
LABEL_ENDPOINT_TYPE = "endpoint_type"
LABEL_STATUS_CODE = "status_code"
LABEL_ERROR_TYPE = "error_type"
LABEL_COMMAND = "command"
LABEL_OUTCOME = "outcome"
