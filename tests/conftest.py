"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from adapters.document_store import InMemoryDocumentStore  # noqa: E402
from adapters.preference_store import InMemoryPreferenceStore  # noqa: E402
from test_fixtures import TickingClock  # noqa: E402

TODAY = date(2024, 6, 10)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Fresh in-memory document store with increasing server timestamps"""
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def preferences():
    return InMemoryPreferenceStore()


@pytest.fixture
def user_id():
    return "student-1"


@pytest.fixture
def today():
    return TODAY
