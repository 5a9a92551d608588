"""
Test the error model and client configuration.
"""

import logging

import pytest

from helpers import make_response

from wedeploy_client.config import USER_AGENT, VERSION, ClientConfig
from wedeploy_client.runtime.codec import encode_json
from wedeploy_client.runtime.errors import (
    DecodeError,
    EncodingError,
    ErrorCode,
    InvalidURLError,
    RequestCancelledError,
    UnexpectedResponseError,
    WeDeployError,
)


@pytest.mark.parametrize("error_cls,code", [
    (InvalidURLError, ErrorCode.INVALID_URL),
    (EncodingError, ErrorCode.ENCODING_ERROR),
    (DecodeError, ErrorCode.DECODE_ERROR),
    (RequestCancelledError, ErrorCode.CANCELLED),
])
def test_error_codes(error_cls, code):
    error = error_cls()

    assert isinstance(error, WeDeployError)
    assert error.code == code
    assert str(error).startswith(f"[{code.name}]")


def test_invalid_url_is_value_error():
    assert isinstance(InvalidURLError(), ValueError)


def test_unexpected_response_keeps_response():
    response = make_response(503, "down")
    response.url = "http://example.com/url"
    error = UnexpectedResponseError(response)

    assert error.response is response
    assert error.status_code == 503
    assert error.url == "http://example.com/url"
    assert str(error) == (
        "[UNEXPECTED_RESPONSE] Unexpected response (http://example.com/url)"
        " | Details: {'status_code': 503}"
    )


def test_error_message_includes_url():
    error = RequestCancelledError(url="http://example.com/slow")

    assert str(error) == "[CANCELLED] Request cancelled (http://example.com/slow)"


def test_codec_errors_chain_their_cause():
    with pytest.raises(EncodingError) as exc_info:
        encode_json({"value": float("nan")})

    assert isinstance(exc_info.value.__cause__, ValueError)


def test_user_agent():
    assert USER_AGENT == f"WeDeploy/{VERSION} (+https://wedeploy.com)"


def test_config_defaults():
    config = ClientConfig()

    assert config.timeout == 60.0
    assert config.verify_ssl is True
    assert config.user_agent == USER_AGENT
    assert config.debug is False


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("WEDEPLOY_TIMEOUT", "2.5")
    monkeypatch.setenv("WEDEPLOY_VERIFY_SSL", "false")
    monkeypatch.setenv("WEDEPLOY_MAX_WORKERS", "3")
    monkeypatch.setenv("WEDEPLOY_DEBUG", "1")

    config = ClientConfig.from_env()

    assert config.timeout == 2.5
    assert config.verify_ssl is False
    assert config.max_workers == 3
    assert config.debug is True


def test_debug_sets_package_logger_level():
    logger = logging.getLogger("wedeploy_client")
    previous = logger.level
    try:
        ClientConfig(debug=True).apply_logging()
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
