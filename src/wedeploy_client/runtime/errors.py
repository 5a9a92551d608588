"""
WeDeploy Client Error Model

This module provides the error handling framework for the WeDeploy Python
client. Transport failures raised by ``requests`` are deliberately not part
of this hierarchy: they reach the caller untouched.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes surfaced by the client."""

    UNKNOWN = 1

    # Request construction (100-199)
    INVALID_URL = 100
    ENCODING_ERROR = 101

    # Request lifetime (200-299)
    CANCELLED = 200

    # Application level (400-499)
    UNEXPECTED_RESPONSE = 400

    # Response handling (500-599)
    DECODE_ERROR = 500


class WeDeployError(Exception):
    """
    Base class for all WeDeploy client errors.

    Carries a stable code and, when known, the URL of the request that
    failed. The underlying exception, if any, is chained as ``__cause__``.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 url: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.url = url
        self.details = details or {}

    def __str__(self) -> str:
        text = f"[{self.code.name}] {self.message}"
        if self.url:
            text += f" ({self.url})"
        if self.details:
            text += f" | Details: {self.details}"
        return text


class InvalidURLError(WeDeployError, ValueError):
    """The request URL could not be parsed."""

    def __init__(self, message: str = "Invalid URL", url: Optional[str] = None):
        super().__init__(message, ErrorCode.INVALID_URL, url)


class EncodingError(WeDeployError):
    """The request body could not be encoded."""

    def __init__(self, message: str = "Encoding error"):
        super().__init__(message, ErrorCode.ENCODING_ERROR)


class DecodeError(WeDeployError):
    """The response body is not valid JSON for the requested shape."""

    def __init__(self, message: str = "Decode error", url: Optional[str] = None):
        super().__init__(message, ErrorCode.DECODE_ERROR, url)


class RequestCancelledError(WeDeployError):
    """The request was cancelled before the transport returned, usually by its timeout."""

    def __init__(self, message: str = "Request cancelled", url: Optional[str] = None):
        super().__init__(message, ErrorCode.CANCELLED, url)


class UnexpectedResponseError(WeDeployError):
    """
    Raised for any response with status code >= 400.

    The response is kept on the error (and on the request builder) so the
    caller can inspect status, headers and body.
    """

    def __init__(self, response: Any = None, message: str = "Unexpected response"):
        status_code = getattr(response, "status_code", None)
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message, ErrorCode.UNEXPECTED_RESPONSE,
                         getattr(response, "url", None), details)
        self.response = response

    @property
    def status_code(self) -> Optional[int]:
        """Status code of the offending response."""
        return getattr(self.response, "status_code", None)


__all__ = [
    "ErrorCode",
    "WeDeployError",
    "InvalidURLError",
    "EncodingError",
    "DecodeError",
    "RequestCancelledError",
    "UnexpectedResponseError",
]
