"""
Test the requests-backed transport and the default transport registry.
"""

import threading
import time
from unittest.mock import patch

import pytest
import requests

from helpers import make_response

from wedeploy_client import url
from wedeploy_client.cancellation import CancellationToken
from wedeploy_client.config import ClientConfig
from wedeploy_client.runtime.errors import RequestCancelledError, UnexpectedResponseError
from wedeploy_client.transport import (
    RequestsTransport,
    get_default_transport,
    set_default_transport,
)


def prepared(uri="http://example.com/url"):
    return requests.Request("GET", uri).prepare()


@pytest.fixture
def transport():
    transport = RequestsTransport(ClientConfig(timeout=5.0, verify_ssl=False))
    yield transport
    transport.close()


@patch("requests.Session.send")
def test_send_without_token(mock_send, transport):
    """Requests go straight to the session with the configured timeout."""
    request = prepared()
    mock_send.return_value = make_response(200, "ok", request=request)

    response = transport.send(request)

    assert response.text == "ok"
    mock_send.assert_called_once()
    assert mock_send.call_args[1]["timeout"] == 5.0
    assert mock_send.call_args[1]["verify"] is False


@patch("requests.Session.send")
def test_send_with_token(mock_send, transport):
    mock_send.return_value = make_response(201)

    response = transport.send(prepared(), CancellationToken())

    assert response.status_code == 201


@patch("requests.Session.send")
def test_transport_errors_are_not_wrapped(mock_send, transport):
    error = requests.exceptions.ConnectTimeout("slow")
    mock_send.side_effect = error

    with pytest.raises(requests.exceptions.ConnectTimeout) as exc_info:
        transport.send(prepared(), CancellationToken())

    assert exc_info.value is error


@patch("requests.Session.send")
def test_cancelled_token_wins_race(mock_send, transport):
    def slow_send(*args, **kwargs):
        time.sleep(0.5)
        return make_response(200)

    mock_send.side_effect = slow_send
    token = CancellationToken()
    threading.Timer(0.05, token.cancel).start()

    start = time.time()
    with pytest.raises(RequestCancelledError):
        transport.send(prepared(), token)

    assert time.time() - start < 0.5


@patch("requests.Session.send")
def test_already_cancelled_token(mock_send, transport):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(RequestCancelledError):
        transport.send(prepared(), token)

    mock_send.assert_not_called()


@patch("requests.Session.send")
def test_builder_timeout_with_requests_transport(mock_send, transport):
    def slow_send(*args, **kwargs):
        time.sleep(0.5)
        return make_response(200)

    mock_send.side_effect = slow_send
    req = url("http://example.com/url", transport=transport).timeout(0.05)

    with pytest.raises(RequestCancelledError):
        req.get()

    assert req.response is None


@patch("requests.Session.send")
def test_builder_404_with_requests_transport(mock_send, transport):
    mock_send.return_value = make_response(404, '{"error": "missing"}')
    req = url("http://example.com/url", transport=transport)

    with pytest.raises(UnexpectedResponseError) as exc_info:
        req.get()

    assert exc_info.value.response.status_code == 404
    assert req.decode_json() == {"error": "missing"}


def test_close_keeps_borrowed_session():
    session = requests.Session()
    with patch.object(session, "close") as mock_close:
        RequestsTransport(session=session).close()

    mock_close.assert_not_called()


def test_default_transport_is_shared():
    first = get_default_transport()

    assert isinstance(first, RequestsTransport)
    assert get_default_transport() is first


def test_set_default_transport_returns_previous():
    first = get_default_transport()
    replacement = RequestsTransport()

    assert set_default_transport(replacement) is first
    assert get_default_transport() is replacement
    first.close()


@patch("requests.Session.send")
def test_session_timeout_capped_by_token_deadline(mock_send, transport):
    mock_send.return_value = make_response(200)
    token = CancellationToken()
    token.set_deadline(0.5)

    transport.send(prepared(), token)

    assert 0 < mock_send.call_args[1]["timeout"] <= 0.5


@patch("requests.Session.send")
def test_timed_out_call_releases_its_worker(mock_send):
    """A request that timed out must not hold the only worker hostage."""
    timeouts = []

    def send(request, **kwargs):
        if request.url.endswith("/slow"):
            timeouts.append(kwargs["timeout"])
            # a server that never answers, so only the session timeout ends the call
            threading.Event().wait(kwargs["timeout"])
            raise requests.exceptions.ReadTimeout("read timed out")
        return make_response(200, "ok", request=request)

    mock_send.side_effect = send

    with RequestsTransport(ClientConfig(timeout=5.0, max_workers=1)) as transport:
        with pytest.raises(RequestCancelledError):
            url("http://example.com/slow", transport=transport).timeout(0.05).get()

        response = url("http://example.com/fast", transport=transport).timeout(0.5).get()

    assert response.text == "ok"
    assert timeouts[0] <= 0.05
