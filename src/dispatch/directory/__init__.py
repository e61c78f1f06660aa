"""User directory adapter abstraction — read-only lookup of users and roles."""

import os

_directory_instance = None


def get_user_directory():
    """Return the configured user directory adapter (singleton).

    Uses FakeUserDirectory by default. In production, configure via
    USER_DIRECTORY_ADAPTER environment variable.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("USER_DIRECTORY_ADAPTER", "fake")
        if adapter == "fake":
            from dispatch.directory.fake_adapter import FakeUserDirectory

            _directory_instance = FakeUserDirectory()
        else:
            raise ValueError(f"Unknown user directory adapter: {adapter}")
    return _directory_instance


def reset_user_directory():
    """Reset the user directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
