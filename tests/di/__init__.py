"""Mock providers for testing."""

from .clock import MockClockProvider
from .email import MockEmailProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockClockProvider",
    "MockEmailProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
