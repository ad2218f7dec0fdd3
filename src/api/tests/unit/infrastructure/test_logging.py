"""Unit tests for structlog configuration."""

import structlog
from structlog.testing import capture_logs

from infrastructure.logging import (
    REDACTED,
    SENSITIVE_KEYS,
    configure_logging,
    redact_sensitive_values,
)


class TestRedactSensitiveValues:
    def test_masks_every_sensitive_key(self):
        event = {key: "secret-value" for key in SENSITIVE_KEYS}
        event["event"] = "api_key_added"

        result = redact_sensitive_values(None, "info", event)

        assert result["event"] == "api_key_added"
        for key in SENSITIVE_KEYS:
            assert result[key] == REDACTED

    def test_leaves_other_keys_untouched(self):
        event = {"event": "api_key_added", "platform": "openai", "api_key_id": "01H"}

        result = redact_sensitive_values(None, "info", dict(event))

        assert result == event


class TestConfigureLogging:
    def teardown_method(self):
        structlog.reset_defaults()

    def test_debug_events_dropped_by_default(self):
        configure_logging(debug=False)

        with capture_logs() as logs:
            structlog.get_logger().debug("hidden")
            structlog.get_logger().info("shown")

        assert [entry["event"] for entry in logs] == ["shown"]

    def test_debug_events_kept_in_debug_mode(self):
        configure_logging(debug=True)

        with capture_logs() as logs:
            structlog.get_logger().debug("visible")

        assert [entry["event"] for entry in logs] == ["visible"]
