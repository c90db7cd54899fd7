"""Exceptions raised by the dynamic QR generator."""


class DynamicQRError(Exception):
    """Base class for every error raised by this project."""


class ConfigurationError(DynamicQRError):
    """Raised when the generator or its timer is built with bad settings."""


class InvalidReferenceError(DynamicQRError):
    """Raised when a base link is not an absolute URL."""


class EncodingError(DynamicQRError):
    """Raised when the QR image codec fails to encode a payload."""
