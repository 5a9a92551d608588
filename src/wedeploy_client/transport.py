"""
HTTP transport for request builders.

The transport sends one prepared request and returns the response. Network
failures are raised as the underlying ``requests`` exceptions. When a
cancellation token is given the call is raced against it.
"""

from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

import requests

from .cancellation import CancellationToken
from .config import ClientConfig
from .runtime.errors import RequestCancelledError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Sends a fully formed request and returns the response."""

    @abstractmethod
    def send(self, request: requests.PreparedRequest,
             token: Optional[CancellationToken] = None) -> requests.Response:
        """
        Send a request.

        Args:
            request: Prepared request
            token: Optional cancellation token to observe

        Returns:
            The response, whatever its status code

        Raises:
            requests.exceptions.RequestException: On network failures
            RequestCancelledError: If the token is cancelled first
        """

    def close(self) -> None:
        """Release resources held by the transport."""

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _close_late_response(future: Future) -> None:
    if not future.cancelled() and future.exception() is None:
        future.result().close()


class RequestsTransport(Transport):
    """
    Transport backed by a shared ``requests.Session``.

    Safe for concurrent use: the session and configuration are not changed
    after construction.
    """

    def __init__(self, config: Optional[ClientConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the transport.

        Args:
            config: Client configuration (default: ClientConfig())
            session: Optional requests.Session to send with
        """
        self.config = config or ClientConfig()
        self.config.apply_logging()
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

        logger.debug(f"Initialized requests transport (timeout: {self.config.timeout}s)")

    @property
    def session(self) -> requests.Session:
        return self._session

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers,
                    thread_name_prefix="wedeploy-transport",
                )
            return self._executor

    def _send(self, request: requests.PreparedRequest,
              token: Optional[CancellationToken] = None) -> requests.Response:
        timeout = self.config.timeout
        if token is not None:
            remaining = token.remaining()
            if token.cancelled or remaining == 0:
                # timed out while waiting for a free worker
                raise RequestCancelledError(url=request.url)
            if remaining is not None:
                timeout = min(timeout, remaining)
        return self._session.send(
            request,
            timeout=timeout,
            verify=self.config.verify_ssl,
        )

    def send(self, request: requests.PreparedRequest,
             token: Optional[CancellationToken] = None) -> requests.Response:
        """
        Send a request, racing it against ``token`` when one is given.

        A token with a deadline also caps the session timeout, so the worker
        running the call is released once the token fires.
        """
        if token is None:
            return self._send(request)

        if token.cancelled:
            raise RequestCancelledError(url=request.url)

        future = self._get_executor().submit(self._send, request, token)
        finished = threading.Event()
        future.add_done_callback(lambda _: finished.set())
        token.add_callback(finished.set)
        finished.wait()

        if not future.done():
            # the token won the race
            future.cancel()
            future.add_done_callback(_close_late_response)
            raise RequestCancelledError(url=request.url)

        return future.result()

    def close(self) -> None:
        """Shut down the worker pool and close the session if owned."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None
        if self._owns_session:
            self._session.close()
        logger.debug("Closed requests transport")


_default_transport: Optional[Transport] = None
_default_lock = threading.Lock()


def get_default_transport() -> Transport:
    """Get the process-wide default transport, creating it on first use."""
    global _default_transport
    with _default_lock:
        if _default_transport is None:
            _default_transport = RequestsTransport(ClientConfig.from_env())
        return _default_transport


def set_default_transport(transport: Optional[Transport]) -> Optional[Transport]:
    """
    Replace the process-wide default transport.

    Passing None resets it so the next use creates a fresh one.

    Returns:
        The previous default transport, if any
    """
    global _default_transport
    with _default_lock:
        previous, _default_transport = _default_transport, transport
        return previous


__all__ = [
    "Transport",
    "RequestsTransport",
    "get_default_transport",
    "set_default_transport",
]
