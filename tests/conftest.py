"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tether.core.models import Item, StudyPattern, new_item  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed Wednesday noon, UTC."""
    return datetime(2024, 3, 6, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_item(now):
    """
    Build items relative to the fixed clock.

    ``due_in`` is in days; negative values make the item overdue.
    """

    def _make(item_id, repetitions=0, interval=1, ease_factor=2.5, due_in=0.0, **fields):
        return Item(
            id=item_id,
            ease_factor=ease_factor,
            interval=interval,
            repetitions=repetitions,
            streak=fields.pop("streak", repetitions),
            next_review=now + timedelta(days=due_in),
            **fields,
        )

    return _make


@pytest.fixture
def fresh_item(now):
    """Provide a never-reviewed flashcard."""
    return new_item("card-001", now, front="What is the OSI model?", back="A 7-layer reference model")


@pytest.fixture
def pattern():
    """Default study pattern with no history."""
    return StudyPattern()
