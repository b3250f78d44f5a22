from __future__ import annotations

import types

import pytest

from ai_gateway.base.errors import (
    ClassifiedProviderError,
    ErrorKind,
    FormatError,
    GatewayError,
    IntegrityError,
    NotFoundError,
    USER_MESSAGES,
    classify,
    http_status_for,
    sanitize_message,
)


class _StatusError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class _CodedError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


@pytest.mark.parametrize(
    "message, kind",
    [
        ("Rate limit reached for requests", ErrorKind.RATE_LIMIT),
        ("Incorrect API key provided", ErrorKind.AUTHENTICATION),
        ("The model does not exist", ErrorKind.MODEL_NOT_FOUND),
        ("This model's maximum context length is 8192", ErrorKind.CONTEXT_EXCEEDED),
        ("Output blocked by content policy", ErrorKind.CONTENT_POLICY),
        ("malformed JSON body", ErrorKind.INVALID_REQUEST),
        ("connection reset by peer", ErrorKind.NETWORK),
        ("503 Service Unavailable", ErrorKind.SERVICE_UNAVAILABLE),
        ("billing hard limit reached", ErrorKind.PAYMENT_REQUIRED),
    ],
)
def test_message_patterns(message, kind):
    classified = classify(Exception(message))
    assert classified.kind is kind  # nosec B101 - assert is appropriate in unit tests
    assert classified.message == USER_MESSAGES[kind]  # nosec B101 - assert is appropriate in unit tests


def test_table_order_decides_overlapping_patterns():
    # "quota exceeded" is listed under payment but "quota" matches rate limit first
    assert classify(Exception("You exceeded your current quota exceeded")).kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    # "invalid api key" hits authentication before the generic "invalid"
    assert classify(Exception("invalid api key")).kind is ErrorKind.AUTHENTICATION  # nosec B101 - assert is appropriate in unit tests


def test_matching_is_case_insensitive():
    assert classify(Exception("TOO MANY REQUESTS")).kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests


def test_message_outranks_http_status_attribute():
    # a 400 status does not pull a connection failure into invalid-request
    assert classify(_StatusError("Connection reset by peer", 400)).kind is ErrorKind.NETWORK  # nosec B101 - assert is appropriate in unit tests
    assert classify(_StatusError("boom", 429)).kind is ErrorKind.INTERNAL  # nosec B101 - assert is appropriate in unit tests


def test_response_status_code_is_ignored():
    err = Exception("Error code: 503 - service unavailable")
    err.response = types.SimpleNamespace(status_code=400)  # type: ignore[attr-defined]
    assert classify(err).kind is ErrorKind.SERVICE_UNAVAILABLE  # nosec B101 - assert is appropriate in unit tests


def test_error_code_and_nested_cause_code():
    assert classify(_CodedError("boom", "rate_limit_exceeded")).kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    try:
        try:
            raise _CodedError("inner", "context_length_exceeded")
        except _CodedError as inner:
            raise RuntimeError("outer") from inner
    except RuntimeError as outer:
        assert classify(outer).kind is ErrorKind.CONTEXT_EXCEEDED  # nosec B101 - assert is appropriate in unit tests


def test_unmatched_error_is_internal_with_sanitized_message():
    classified = classify(RuntimeError("upstream rejected sk-abcdefghijklmnopqrstuvwxyz123456"))
    assert classified.kind is ErrorKind.INTERNAL  # nosec B101 - assert is appropriate in unit tests
    assert "sk-abcdefghijklmnopqrstuvwxyz" not in classified.message  # nosec B101 - assert is appropriate in unit tests
    assert "sk-****" in classified.message  # nosec B101 - assert is appropriate in unit tests


def test_non_exception_values():
    assert classify("boom").kind is ErrorKind.INTERNAL  # nosec B101 - assert is appropriate in unit tests
    assert classify(None).message == "An unknown error occurred"  # nosec B101 - assert is appropriate in unit tests
    assert classify(types.SimpleNamespace(status_code=429)).kind is ErrorKind.INTERNAL  # nosec B101 - assert is appropriate in unit tests


def test_gateway_errors_keep_their_kind_and_message():
    classified = classify(NotFoundError("API key not found"))
    assert classified.kind is ErrorKind.NOT_FOUND  # nosec B101 - assert is appropriate in unit tests
    assert classified.message == "API key not found"  # nosec B101 - assert is appropriate in unit tests
    wrapped = ClassifiedProviderError(message="Rate limit exceeded.", kind=ErrorKind.RATE_LIMIT)
    assert classify(wrapped).kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize("error", [FormatError("bad base64 at byte 3"), IntegrityError("tag mismatch")])
def test_vault_failures_never_leak_crypto_detail(error):
    classified = classify(error)
    assert classified.kind is ErrorKind.INTERNAL  # nosec B101 - assert is appropriate in unit tests
    assert classified.message == "Failed to decrypt API key"  # nosec B101 - assert is appropriate in unit tests


def test_empty_gateway_message_falls_back_to_generic():
    assert classify(GatewayError("")).message  # nosec B101 - assert is appropriate in unit tests


def test_sanitize_message():
    assert sanitize_message("key sk-proj-ABCDEFGHIJKLMNOPQRSTUV end") == "key sk-**** end"  # nosec B101 - assert is appropriate in unit tests
    assert sanitize_message(None) == ""  # nosec B101 - assert is appropriate in unit tests


def test_http_status_mapping():
    assert http_status_for(ErrorKind.RATE_LIMIT) == 429  # nosec B101 - assert is appropriate in unit tests
    assert http_status_for(ErrorKind.AUTHENTICATION) == 401  # nosec B101 - assert is appropriate in unit tests
    assert http_status_for(ErrorKind.NOT_FOUND) == 404  # nosec B101 - assert is appropriate in unit tests
    assert http_status_for(ErrorKind.VALIDATION) == 400  # nosec B101 - assert is appropriate in unit tests
    assert http_status_for(ErrorKind.NETWORK) == 503  # nosec B101 - assert is appropriate in unit tests
    assert http_status_for(ErrorKind.INTERNAL) == 500  # nosec B101 - assert is appropriate in unit tests
