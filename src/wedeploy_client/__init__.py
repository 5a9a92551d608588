"""
WeDeploy Python Client

Fluent HTTP client for REST APIs that take structured queries (filters,
aggregations, sorting, paging) as JSON request bodies.
"""

from .config import VERSION, USER_AGENT, ClientConfig
from .request import RequestBuilder, url, basic_auth
from .query import QueryBuilder, Filter, Aggregation, aggregation, filter
from .transport import Transport, RequestsTransport, get_default_transport, set_default_transport
from .cancellation import CancellationToken, TimeoutTimer
from .runtime.errors import *

__version__ = VERSION
__all__ = [
    # Request building
    "RequestBuilder",
    "url",
    "basic_auth",

    # Queries
    "QueryBuilder",
    "Filter",
    "Aggregation",
    "aggregation",
    "filter",

    # Transport
    "Transport",
    "RequestsTransport",
    "get_default_transport",
    "set_default_transport",
    "CancellationToken",
    "TimeoutTimer",

    # Configuration
    "ClientConfig",
    "USER_AGENT",

    # Errors
    "ErrorCode",
    "WeDeployError",
    "InvalidURLError",
    "EncodingError",
    "DecodeError",
    "RequestCancelledError",
    "UnexpectedResponseError",
]
