"""Exceptions for accounts app."""


class UnauthenticatedError(Exception):
    """Raised when credentials or a token can't be verified.

    The reason is logged but never told to the client.
    """


class InvalidUserDataError(Exception):
    """Raised when a user can't be created from the given data."""
