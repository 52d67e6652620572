"""
Error kinds surfaced by the service layer.

Routers translate these into HTTP responses; the service layer never
builds HTTP responses itself.
"""


class ServiceError(Exception):
    """Base class for errors raised by services."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConflictError(ServiceError):
    """A unique value (email, username) is already taken."""


class AuthError(ServiceError):
    """Bad credentials or an invalid/expired token."""


class NotFoundError(ServiceError):
    """The requested user or record does not exist."""


class ServerError(ServiceError):
    """Storage or other unexpected failure."""
