class ProTimerError(Exception):
    """Base class for errors raised by the timer core."""


class LastGroupError(ProTimerError):
    """Raised when deleting the only remaining tab."""

    def __init__(self, message="You must have at least one tab."):
        super().__init__(message)


class UnknownGroupError(ProTimerError, KeyError):
    pass


class UnknownTimerError(ProTimerError, KeyError):
    pass


class StorageError(ProTimerError):
    """The state blob could not be written or removed."""


class CorruptStateError(ProTimerError):
    """The stored blob exists but cannot be read back as application state."""
