import io
import logging

import pytest

from linescan import scan_str


def pytest_configure(config):
    config.addinivalue_line("markers", "property: hypothesis property-based tests")


@pytest.fixture
def hello_scanner():
    """Scanner over the single line used throughout the scenario tests."""
    scanner = scan_str("Hello, world!")
    yield scanner
    scanner.close()


@pytest.fixture
def multiline_scanner():
    """Scanner over several lines, including blank ones and a CRLF line."""
    scanner = scan_str("first line\n\n\nsecond: 2\r\nthird\n")
    yield scanner
    scanner.close()


@pytest.fixture
def binary_source():
    """Factory for an in-memory binary source."""

    def _make(data: bytes) -> io.BytesIO:
        return io.BytesIO(data)

    return _make


@pytest.fixture
def preserve_root_logger():
    """Restore root logger handlers and level after tests that call setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
