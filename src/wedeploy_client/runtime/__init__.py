"""Runtime helpers for the WeDeploy Python client"""

from .errors import (
    ErrorCode,
    WeDeployError,
    InvalidURLError,
    EncodingError,
    DecodeError,
    RequestCancelledError,
    UnexpectedResponseError,
)
from .url import resolve_path, parse_url, set_param, get_params, encode_form
from .codec import encode_json, decode_json

__all__ = [
    "ErrorCode",
    "WeDeployError",
    "InvalidURLError",
    "EncodingError",
    "DecodeError",
    "RequestCancelledError",
    "UnexpectedResponseError",
    "resolve_path",
    "parse_url",
    "set_param",
    "get_params",
    "encode_form",
    "encode_json",
    "decode_json",
]
