"""
Test bootstrap:
- Make tests/helpers importable
- Isolate every test from the process-wide default transport
"""
import sys
import pathlib

import pytest

TESTS_DIR = pathlib.Path(__file__).parent

if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from wedeploy_client.transport import set_default_transport


@pytest.fixture(autouse=True)
def _isolated_default_transport():
    """Reset the default transport around each test."""
    previous = set_default_transport(None)
    yield
    current = set_default_transport(previous)
    if current is not None:
        current.close()


@pytest.fixture
def fake_transport():
    """Provide a FakeTransport for request builder tests."""
    from helpers import FakeTransport
    return FakeTransport()
