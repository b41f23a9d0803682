"""Errors raised by the user store."""


class UserStoreException(Exception):
    """Base class for user store failures."""


class InvalidIdentifier(UserStoreException, ValueError):
    """The identifier is not a well-formed ObjectId string."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid user ID format: {value!r}")


class NotFound(UserStoreException, LookupError):
    """No user document matches the identifier."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class StoreError(UserStoreException, RuntimeError):
    """The database rejected or failed to execute an operation."""
