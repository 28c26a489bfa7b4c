"""Custom exceptions for clipmod."""


class ClipmodError(Exception):
    """Base exception class for clipmod."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {str(self.original_error)})"
        return base_msg


class HistoryFileError(ClipmodError):
    """The history file could not be read, decoded or written."""
    pass


class ClipboardError(ClipmodError):
    """A clipboard backend failed to read or write."""
    pass


class PersistenceWarning(UserWarning):
    """An accepted entry is kept in memory but could not be written to disk."""
    pass
