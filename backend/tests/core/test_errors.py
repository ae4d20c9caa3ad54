"""Error Hierarchy — status codes and response envelope."""

from photobooth.core.errors import (
    AuthenticationError, ConflictError, ExternalServiceError,
    IntegrationNotConfiguredError, ResourceNotFoundError, ValidationFailedError,
)


def test_status_codes():
    assert ValidationFailedError("bad", "field").http_status == 400
    assert AuthenticationError().http_status == 401
    assert ResourceNotFoundError("Project", "x").http_status == 404
    assert ConflictError("taken").http_status == 409
    assert ExternalServiceError("down", "fal", "timeout").http_status == 502
    assert IntegrationNotConfiguredError("stripe").http_status == 503


def test_response_envelope():
    body = ExternalServiceError("down", "fal", "timeout", retry_after_ms=500).to_response()
    error = body["error"]
    assert error["code"] == "EXTERNAL_SERVICE_ERROR"
    assert error["category"] == "external_api"
    assert error["context"]["provider"] == "fal"
    assert error["context"]["retry_after_ms"] == 500
    assert "timestamp" in error


def test_not_found_message():
    assert ResourceNotFoundError("Style", "42").message == "Style '42' not found"
