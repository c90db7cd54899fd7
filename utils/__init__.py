"""Utility package for the dynamic QR generator.

This package exposes the link, image and timer helpers used by
:mod:`dynamic_qr`.
"""

from .errors import ConfigurationError, DynamicQRError, EncodingError, InvalidReferenceError
from .qr_generator import QRImageOptions, generate_qr_data_url
from .refresh_timer import RefreshTimer
from .unique_link import generate_unique_link

__all__ = [
    "ConfigurationError",
    "DynamicQRError",
    "EncodingError",
    "InvalidReferenceError",
    "QRImageOptions",
    "RefreshTimer",
    "generate_qr_data_url",
    "generate_unique_link",
]
