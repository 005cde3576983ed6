"""Exception hierarchy for the fortune service."""


class FortuneError(Exception):
    """Base exception for all fortune service errors."""


class InvalidInput(FortuneError):
    """Raised when a new fortune's text is missing or blank."""


class EmptyStore(FortuneError):
    """Raised when a random fortune is requested from an empty store."""


class BackendError(FortuneError):
    """Base class for persistent backend failures. Never leaves the store."""


class BackendUnavailable(BackendError):
    """Raised when the backend cannot be reached or a remote call fails."""


class BackendDataError(BackendError):
    """Raised when a stored entry cannot be parsed into a fortune."""
