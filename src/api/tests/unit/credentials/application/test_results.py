"""Unit tests for API key result types."""

from credentials.application.results import (
    APIKeyError,
    APIKeyErrorCode,
    APIKeyResult,
)


class TestAPIKeyResult:
    """Tests for APIKeyResult factories."""

    def test_success_carries_data(self):
        """A success has data and no error."""
        result = APIKeyResult.success("value")

        assert result.ok is True
        assert result.data == "value"
        assert result.error is None

    def test_failure_carries_error(self):
        """A failure has an error and no data."""
        result = APIKeyResult.failure(
            APIKeyErrorCode.KEY_NOT_FOUND, "missing", details={"id": "x"}
        )

        assert result.ok is False
        assert result.data is None
        assert result.error == APIKeyError(
            code=APIKeyErrorCode.KEY_NOT_FOUND, message="missing", details={"id": "x"}
        )


class TestAPIKeyError:
    """Tests for APIKeyError serialization."""

    def test_as_dict_includes_details(self):
        """Details should be present when set."""
        error = APIKeyError(
            APIKeyErrorCode.DATABASE_ERROR, "Failed", details={"reason": "boom"}
        )

        assert error.as_dict() == {
            "code": "DATABASE_ERROR",
            "message": "Failed",
            "details": {"reason": "boom"},
        }

    def test_as_dict_can_omit_details(self):
        """Callers facing clients can leave diagnostics out."""
        error = APIKeyError(
            APIKeyErrorCode.DATABASE_ERROR, "Failed", details={"reason": "boom"}
        )

        assert error.as_dict(include_details=False) == {
            "code": "DATABASE_ERROR",
            "message": "Failed",
        }

    def test_codes_are_strings(self):
        """Error codes serialize as their names."""
        assert str(APIKeyErrorCode.KEY_EXPIRED) == "KEY_EXPIRED"
