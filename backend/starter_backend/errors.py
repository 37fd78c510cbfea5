"""Domain errors raised by managers and mapped to HTTP responses in main."""


class StarterError(Exception):
    """Base error for the starter backend."""


class DatabaseConnectionError(StarterError):
    """Raised when MongoDB is unreachable or the client is not connected."""


class UserAlreadyExistsError(StarterError):
    """Raised when registering an email that is already taken."""


class InvalidTokenError(StarterError):
    """Raised when an access token is malformed, expired or of the wrong type."""
