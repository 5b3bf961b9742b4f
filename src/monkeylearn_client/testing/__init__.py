"""Testing helpers: a fake API server for load and error testing."""

from .fake_server import FakeAPIServer, FakeServerConfig, create_argument_parser

__all__ = [
    "FakeAPIServer",
    "FakeServerConfig",
    "create_argument_parser",
]
