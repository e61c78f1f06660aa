"""Fake user directory — in-memory users for tests and development."""

from shared.errors import Unavailable

from dispatch.directory.port import Role, UserDirectoryPort


class FakeUserDirectory(UserDirectoryPort):
    """Directory backed by a dict; unknown ids return None."""

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.should_succeed = True
        self.failure_reason = "User directory unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "User directory unavailable"):
        """Configure the fake directory behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def add_user(self, user_id: str, role: str = Role.DRIVER.value, name: str | None = None) -> dict:
        user = {"id": str(user_id), "role": Role(role).value, "name": name}
        self.users[str(user_id)] = user
        return user

    def get_user(self, user_id: str) -> dict | None:
        if not self.should_succeed:
            raise Unavailable(self.failure_reason)
        user = self.users.get(str(user_id))
        return dict(user) if user else None

    def clear(self) -> None:
        self.users.clear()
