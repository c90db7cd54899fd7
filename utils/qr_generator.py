import asyncio
import base64
import io
import logging
from dataclasses import dataclass

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from PIL import Image

from .errors import ConfigurationError, EncodingError


logger = logging.getLogger(__name__)

IMAGE_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
}

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class QRImageOptions:
    """Visual profile used for every QR image.

    Defaults give a 256px wide PNG, black on white, with a single module of
    quiet zone around the code.
    """

    mime_type: str = "image/png"
    width: int = 256
    margin: int = 1
    dark: str = "#000000"
    light: str = "#FFFFFF"
    error_correction: str = "M"

    @classmethod
    def from_settings(cls, settings):
        defaults = cls()
        try:
            width = int(settings.get("qr_width", defaults.width))
            margin = int(settings.get("qr_margin", defaults.margin))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid QR size setting: {exc}") from exc
        if width <= 0 or margin < 0:
            raise ConfigurationError(f"Invalid QR size: width={width}, margin={margin}")
        return cls(
            mime_type=settings.get("qr_type", defaults.mime_type),
            width=width,
            margin=margin,
            dark=settings.get("qr_dark", defaults.dark),
            light=settings.get("qr_light", defaults.light),
            error_correction=settings.get("qr_error_correction", defaults.error_correction),
        )


DEFAULT_OPTIONS = QRImageOptions()


def render_qr_image(data: str, options: QRImageOptions = DEFAULT_OPTIONS) -> bytes:
    """Render *data* as a QR code and return the encoded image bytes.

    The code is drawn with whole-pixel modules and then resized to exactly
    ``options.width`` pixels square using nearest neighbour, so module edges
    stay sharp.
    """
    image_format = IMAGE_FORMATS.get(options.mime_type)
    if image_format is None:
        raise ValueError(f"Unsupported image type {options.mime_type!r}")
    level = ERROR_CORRECTION_LEVELS.get(options.error_correction)
    if level is None:
        raise ValueError(f"Unknown error correction level {options.error_correction!r}")

    qr = qrcode.QRCode(
        version=None,
        error_correction=level,
        box_size=1,
        border=options.margin,
    )
    qr.add_data(data)
    qr.make(fit=True)

    size = qr.modules_count + options.margin * 2
    qr.box_size = max(1, options.width // size)

    qr_img = qr.make_image(fill_color=options.dark, back_color=options.light).convert("RGB")
    if qr_img.size != (options.width, options.width):
        qr_img = qr_img.resize((options.width, options.width), Image.NEAREST)

    buffer = io.BytesIO()
    qr_img.save(buffer, format=image_format)
    return buffer.getvalue()


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    payload = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


async def generate_qr_data_url(data: str, options: QRImageOptions = None) -> str:
    """Encode *data* as a QR image and return it as a ``data:`` URL.

    Rendering runs in a worker thread. Any codec failure is raised as
    :class:`EncodingError` with the original message.
    """
    options = options or DEFAULT_OPTIONS
    if not data:
        raise EncodingError("Failed to generate QR code: payload is empty")

    try:
        image_bytes = await asyncio.to_thread(render_qr_image, data, options)
    except Exception as exc:
        raise EncodingError(f"Failed to generate QR code: {exc}") from exc

    logger.debug("Encoded %d characters into %d byte %s", len(data), len(image_bytes), options.mime_type)
    return to_data_url(image_bytes, options.mime_type)
