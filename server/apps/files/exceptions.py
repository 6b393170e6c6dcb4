"""Exceptions for files app."""


class FilesError(Exception):
    """Base class for errors reported to API clients."""

    def __init__(self, message: str) -> None:
        """Initialize FilesError.

        Args:
            message: Human readable error sent back to the client.
        """
        self.message = message
        super().__init__(message)


class InvalidArgumentError(FilesError):
    """Raised when a request is missing a field or has a bad value."""


class NotFoundError(FilesError):
    """Raised when a record or its content can't be seen by the requester.

    Used both for absent records and records owned by somebody else,
    so callers can't probe for the existence of foreign files.
    """

    def __init__(self, message: str = 'Not found') -> None:
        """Initialize NotFoundError.

        Args:
            message: Human readable error sent back to the client.
        """
        super().__init__(message)


class InvalidOperationError(FilesError):
    """Raised when an action is not allowed for the record kind."""


class InternalError(FilesError):
    """Raised when blob storage fails for reasons unrelated to the request."""

    def __init__(self, message: str = 'Internal Server Error') -> None:
        """Initialize InternalError.

        Args:
            message: Human readable error sent back to the client.
        """
        super().__init__(message)


class ThumbnailJobError(Exception):
    """Raised when a thumbnail job can't be processed and must be dropped."""
