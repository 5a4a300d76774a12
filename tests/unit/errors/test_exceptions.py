"""Tests for domain exceptions."""

from routegate.core.errors import (
    AppException,
    InvalidConfigurationError,
    RateLimitError,
    StoreUnavailableError,
)


class TestAppExceptionDefaults:
    """Class-level defaults and overrides."""

    def test_store_unavailable_defaults(self):
        exc = StoreUnavailableError()

        assert isinstance(exc, AppException)
        assert exc.status_code == 503
        assert exc.error_code == "store_unavailable"
        assert str(exc) == "Rate limit store unavailable"
        assert exc.details == {}

    def test_message_override(self):
        exc = RateLimitError("Too many requests", details={"limit": 3})

        assert exc.message == "Too many requests"
        assert exc.status_code == 429
        assert exc.details == {"limit": 3}

    def test_invalid_configuration_field_details(self):
        exc = InvalidConfigurationError(
            "threshold must be a positive integer", field="threshold", value=0
        )

        assert exc.details == {"field": "threshold", "value": 0}
        assert exc.error_code == "invalid_configuration"

    def test_invalid_configuration_without_field(self):
        assert InvalidConfigurationError().details == {}
