import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before any domain is imported; each context's
    conftest then initializes its own domain through a DomainFixture.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def reset_collaborators():
    """Fresh fake adapters and lock registry for every test."""
    from dispatch.directory import reset_user_directory
    from shared.locking import aggregate_locks
    from shared.sink import reset_event_sink

    reset_event_sink()
    reset_user_directory()
    aggregate_locks.clear()
    yield
    reset_event_sink()
    reset_user_directory()
    aggregate_locks.clear()


@pytest.fixture()
def event_sink():
    from shared.sink import get_event_sink

    return get_event_sink()


@pytest.fixture()
def directory():
    from dispatch.directory import get_user_directory

    return get_user_directory()
