"""Exceptions shared across services."""


class ServiceError(Exception):
    """Base class for failures that map to a client-facing error."""


class MissingInputError(ServiceError):
    """Raised when a required field is absent or blank."""
