class KeypagerError(Exception):
    """Base exception for all Keypager errors."""


class InvalidArgument(KeypagerError, ValueError):
    """Raised when a selector, token or ordering is built from an invalid value."""


class InvalidToken(KeypagerError, ValueError):
    """Raised when a continuation token string cannot be parsed."""


class ConfigurationError(KeypagerError, RuntimeError):
    """Raised when a pager is configured in a way that cannot paginate."""


class FieldNotFound(KeypagerError, LookupError):
    """Raised when a field path cannot be resolved against a record."""


class NotConnected(KeypagerError):
    """Raised when a backend needs a database connection that is not registered."""
