"""Tests for error models (ErrorInfo, ErrorDetails, HandlerResult)."""

from courier.models.error import ErrorDetails, ErrorInfo, HandlerResult


def raise_and_capture(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as caught:
        return caught


class TestErrorDetails:
    """Test ErrorDetails model."""

    def test_create_error_details_with_no_fields(self):
        """Can create ErrorDetails with all fields as None (all are optional)."""
        details = ErrorDetails()

        assert details.exception_type is None
        assert details.stack_trace is None

    def test_error_details_serializes_to_camel_case(self):
        """ErrorDetails should serialize field names to camelCase."""
        details = ErrorDetails(exception_type="ValueError", stack_trace="trace")

        data = details.model_dump(by_alias=True)

        assert data == {"exceptionType": "ValueError", "stackTrace": "trace"}

    def test_error_details_parses_from_camel_case_json(self):
        """ErrorDetails should parse from camelCase JSON."""
        details = ErrorDetails.model_validate_json('{"exceptionType": "KeyError"}')

        assert details.exception_type == "KeyError"
        assert details.stack_trace is None


class TestErrorInfo:
    """Test ErrorInfo model."""

    def test_create_error_info_minimal(self):
        """Can create ErrorInfo with just type and message (details optional)."""
        error = ErrorInfo(type="handler_error", message="Invalid input")

        assert error.type == "handler_error"
        assert error.message == "Invalid input"
        assert error.details is None

    def test_from_exception(self):
        """from_exception keeps the message, class name and traceback."""
        exc = raise_and_capture(ValueError("Bad value"))

        error = ErrorInfo.from_exception(exc)

        assert error.type == "handler_error"
        assert error.message == "Bad value"
        assert error.details.exception_type == "ValueError"
        assert error.details.stack_trace.startswith("Traceback (most recent call last):")
        assert "ValueError: Bad value" in error.details.stack_trace

    def test_from_exception_custom_type(self):
        """The error type label can be overridden."""
        error = ErrorInfo.from_exception(RuntimeError("x"), error_type="payload_error")

        assert error.type == "payload_error"

    def test_error_info_round_trip_serialization(self):
        """ErrorInfo should round-trip through camelCase JSON."""
        original = ErrorInfo.from_exception(raise_and_capture(KeyError("missing")))

        restored = ErrorInfo.model_validate_json(original.model_dump_json(by_alias=True))

        assert restored == original

    def test_error_info_exclude_none_excludes_empty_details(self):
        """Serializing with exclude_none should omit the details field when None."""
        error = ErrorInfo(type="warn", message="Warning occurred")

        data = error.model_dump(by_alias=True, exclude_none=True)

        assert data == {"type": "warn", "message": "Warning occurred"}


class TestHandlerResult:
    """Test HandlerResult."""

    def test_truthy_response_succeeds(self):
        """A truthy response without error is a success."""
        result = HandlerResult(response="ok")

        assert result.succeeded is True
        assert result.failed is False

    def test_falsy_response_does_not_succeed(self):
        """Falsy responses are not successes but not failures either."""
        for response in (None, False, 0, "", []):
            result = HandlerResult(response=response)
            assert result.succeeded is False
            assert result.failed is False

    def test_error_fails(self):
        """A captured error is a failure."""
        result = HandlerResult(error=ErrorInfo(type="handler_error", message="boom"))

        assert result.failed is True
        assert result.succeeded is False
