"""
Fluent request builder.

A ``RequestBuilder`` accumulates the state of one HTTP request (URL,
headers, form values, raw body, structured query, timeout) through chained
calls and sends it with one of the verb methods.

Example:
    ```python
    from wedeploy_client import url

    req = url("https://data.example.com", "movies").auth("token")
    req.filter("year", ">", 2000).sort("title").limit(20)
    req.get()
    movies = req.decode_json()
    ```

The request body is resolved at send time with a fixed precedence: form
values, then the structured query, then the raw body.
"""

from __future__ import annotations
import base64
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, Type, Union

import requests
from requests.structures import CaseInsensitiveDict

from .cancellation import CancellationToken, TimeoutTimer
from .config import USER_AGENT
from .query.builder import QueryBuilder
from .runtime.codec import decode_json
from .runtime.errors import DecodeError, InvalidURLError, UnexpectedResponseError
from .runtime.url import encode_form, get_params, parse_url, resolve_path, set_param
from .transport import Transport, get_default_transport

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def basic_auth(username: str, password: str) -> str:
    """Encode credentials for the Basic authorization scheme."""
    auth = f"{username}:{password}"
    return base64.b64encode(auth.encode("utf-8")).decode("ascii")


class RequestBuilder:
    """
    Mutable, chainable builder for a single HTTP request.

    Mutators return the builder itself. Verb methods (``get``, ``post``, ...)
    serialize the current state, send it and keep the outgoing request and
    the response on ``request`` and ``response``. Calling a verb again sends
    the current state again.
    """

    def __init__(self, uri: str, *paths: str, transport: Optional[Transport] = None):
        """
        Initialize a request builder.

        Args:
            uri: Base URL
            *paths: Path segments appended to the base URL
            transport: Transport to send with (default: the shared default transport)
        """
        self.id = random.randint(1, 2**63 - 1)
        self.created_at = datetime.now(timezone.utc)
        self.url = resolve_path(uri, resolve_path(*paths))

        self.headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self.headers["User-Agent"] = [USER_AGENT]
        self.headers["Content-Type"] = [JSON_CONTENT_TYPE]

        self.form_values: Optional[List[Tuple[str, str]]] = None
        self.query: Optional[QueryBuilder] = None
        self.request_body: Any = None
        self.request_timeout: Optional[float] = None

        self.request: Optional[requests.PreparedRequest] = None
        self.response: Optional[requests.Response] = None

        self._transport = transport

    def __repr__(self) -> str:
        return f"RequestBuilder(id={self.id}, url={self.url!r})"

    # =========================================================================
    # Headers and auth
    # =========================================================================

    def header(self, key: str, value: str) -> RequestBuilder:
        """Append a header value."""
        self.headers.setdefault(key, []).append(value)
        return self

    def set_header(self, key: str, value: str) -> RequestBuilder:
        """Replace all values of a header."""
        self.headers[key] = [value]
        return self

    def get_header(self, key: str) -> Optional[str]:
        """First value of a header, or None."""
        values = self.headers.get(key)
        return values[0] if values else None

    def auth(self, *args: str) -> RequestBuilder:
        """
        Set the Authorization header.

        ``auth(token)`` uses the Bearer scheme, ``auth(username, password)``
        the Basic scheme.
        """
        if len(args) == 1:
            return self.set_header("Authorization", f"Bearer {args[0]}")
        if len(args) == 2:
            return self.set_header("Authorization", f"Basic {basic_auth(args[0], args[1])}")
        raise TypeError(f"auth() takes 1 or 2 arguments ({len(args)} given)")

    # =========================================================================
    # Body
    # =========================================================================

    def body(self, data: Any) -> RequestBuilder:
        """Set the raw request body: bytes, str or a readable file-like object."""
        self.request_body = data
        return self

    def form(self, key: str, value: str) -> RequestBuilder:
        """Add a form field. Form fields take precedence over any other body."""
        if self.form_values is None:
            self.form_values = []
        self.form_values.append((key, value))
        return self

    def _get_or_create_query(self) -> QueryBuilder:
        if self.query is None:
            self.query = QueryBuilder()
        return self.query

    def filter(self, *args: Any) -> RequestBuilder:
        """Add a filter to the query. See ``QueryBuilder.filter``."""
        self._get_or_create_query().filter(*args)
        return self

    def aggregate(self, *args: Any) -> RequestBuilder:
        """Add an aggregation to the query. See ``QueryBuilder.aggregate``."""
        self._get_or_create_query().aggregate(*args)
        return self

    def sort(self, field: str, direction: str = "asc") -> RequestBuilder:
        self._get_or_create_query().sort(field, direction)
        return self

    def count(self) -> RequestBuilder:
        self._get_or_create_query().count()
        return self

    def limit(self, limit: int) -> RequestBuilder:
        self._get_or_create_query().limit(limit)
        return self

    def offset(self, offset: int) -> RequestBuilder:
        self._get_or_create_query().offset(offset)
        return self

    def highlight(self, field: str) -> RequestBuilder:
        self._get_or_create_query().highlight(field)
        return self

    # =========================================================================
    # URL
    # =========================================================================

    def param(self, key: str, value: str) -> RequestBuilder:
        """
        Set (overwrite) a query string parameter on the URL.

        A URL that cannot be parsed is left as is; the error is raised by
        the next verb call instead.
        """
        try:
            self.url = set_param(self.url, key, value)
        except InvalidURLError:
            pass
        return self

    def params(self) -> Optional[Dict[str, List[str]]]:
        """Query string parameters of the URL, or None if it cannot be parsed."""
        return get_params(self.url)

    def path(self, *paths: str) -> RequestBuilder:
        """New builder for a URL below this one. This builder is not changed."""
        return RequestBuilder(self.url, *paths, transport=self._transport)

    def timeout(self, timeout: Union[float, timedelta, None]) -> RequestBuilder:
        """Bound the request lifetime. 0 or None disables the timeout."""
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        self.request_timeout = timeout or None
        return self

    # =========================================================================
    # Verbs
    # =========================================================================

    def get(self) -> requests.Response:
        return self._action("GET")

    def head(self) -> requests.Response:
        return self._action("HEAD")

    def post(self) -> requests.Response:
        return self._action("POST")

    def put(self) -> requests.Response:
        return self._action("PUT")

    def patch(self) -> requests.Response:
        return self._action("PATCH")

    def delete(self) -> requests.Response:
        return self._action("DELETE")

    def decode_json(self, cls: Optional[Type[Any]] = None) -> Any:
        """
        Decode the response body as JSON.

        Args:
            cls: Optional type to validate into (pydantic model, dataclass,
                 TypedDict or container type)

        Raises:
            DecodeError: If there is no response or the body does not fit
        """
        if self.response is None:
            raise DecodeError("No response to decode", url=self.url)
        try:
            return decode_json(self.response.content, cls)
        except DecodeError as e:
            e.url = self.url
            raise

    # =========================================================================
    # Internals
    # =========================================================================

    def _read_body(self) -> Optional[bytes]:
        data = self.request_body
        if hasattr(data, "read"):
            # keep what was read so the next verb call sends it again
            data = self.request_body = data.read()
        if isinstance(data, str):
            return data.encode("utf-8")
        if data is None or isinstance(data, bytes):
            return data
        if isinstance(data, bytearray):
            return bytes(data)
        raise TypeError(
            f"Request body must be bytes, str or a file-like object, not {type(data).__name__}"
        )

    def _resolve_body(self) -> Optional[bytes]:
        if self.form_values:
            self.set_header("Content-Type", FORM_CONTENT_TYPE)
            return encode_form(self.form_values).encode("ascii")

        if self.query is not None:
            return self.query.to_json()

        return self._read_body()

    def _setup_action(self, method: str) -> requests.PreparedRequest:
        body = self._resolve_body()
        parse_url(self.url)

        headers = {key: ", ".join(values) for key, values in self.headers.items()}
        self.request = requests.Request(method, self.url, headers=headers, data=body).prepare()
        return self.request

    def _action(self, method: str) -> requests.Response:
        request = self._setup_action(method)
        transport = self._transport or get_default_transport()
        self.response = None

        logger.debug(f"Request {self.id}: {method} {self.url}")

        if self.request_timeout:
            token = CancellationToken()
            with TimeoutTimer(self.request_timeout, token):
                self.response = transport.send(request, token)
        else:
            self.response = transport.send(request)

        logger.debug(f"Response {self.id}: {self.response.status_code}")

        if self.response.status_code >= 400:
            raise UnexpectedResponseError(self.response)

        return self.response


def url(uri: str, *paths: str, transport: Optional[Transport] = None) -> RequestBuilder:
    """Create a request builder for ``uri`` joined with ``paths``."""
    return RequestBuilder(uri, *paths, transport=transport)


__all__ = ["RequestBuilder", "url", "basic_auth", "JSON_CONTENT_TYPE", "FORM_CONTENT_TYPE"]
