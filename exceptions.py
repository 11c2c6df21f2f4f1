"""Custom exceptions for the hotel reservation backend."""


class HotelError(Exception):
    """Base exception for all hotel backend errors."""
    pass


class ConfigurationError(HotelError):
    """Raised when configuration is invalid or missing."""
    pass


class NotFoundError(HotelError):
    """Raised when a referenced user, room or booking does not exist."""
    pass


class InvalidRequestError(HotelError):
    """Raised when a request is well-formed but cannot be honoured (400)."""
    pass


class ImageUploadError(HotelError):
    """Raised when a room photo cannot be uploaded to the image host."""
    pass


class InvalidTokenError(HotelError):
    """Raised when a bearer token fails signature, expiry or format checks."""
    pass
