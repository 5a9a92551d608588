from .mocks import FakeTransport, make_response

__all__ = [
    "FakeTransport",
    "make_response",
]
