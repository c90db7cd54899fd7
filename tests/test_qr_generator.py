"""Tests for QR data URL encoding."""

import base64
import io
import re

import pytest
from PIL import Image

from utils.errors import EncodingError
from utils.qr_generator import QRImageOptions, generate_qr_data_url, render_qr_image


DATA_URL_RE = re.compile(r"^data:image/png;base64,[A-Za-z0-9+/=]+$")


def decode_png(data_url):
    payload = data_url.split(",", 1)[1]
    return Image.open(io.BytesIO(base64.b64decode(payload)))


@pytest.mark.asyncio
async def test_returns_png_data_url():
    data_url = await generate_qr_data_url("https://api.example.com/x?timestamp=1&uuid=abc")

    assert DATA_URL_RE.match(data_url)
    image = decode_png(data_url)
    assert image.format == "PNG"
    assert image.size == (256, 256)


@pytest.mark.asyncio
async def test_black_on_white_with_quiet_zone():
    image = decode_png(await generate_qr_data_url("hello")).convert("RGB")

    assert image.getpixel((0, 0)) == (255, 255, 255)
    colors = {color for _, color in image.getcolors(maxcolors=256)}
    assert colors == {(0, 0, 0), (255, 255, 255)}


@pytest.mark.asyncio
async def test_long_payload_still_fits_width():
    image = decode_png(await generate_qr_data_url("https://api.example.com/" + "a" * 500))
    assert image.size == (256, 256)


@pytest.mark.asyncio
async def test_custom_width():
    data_url = await generate_qr_data_url("hello", QRImageOptions(width=120))
    assert decode_png(data_url).size == (120, 120)


@pytest.mark.asyncio
async def test_empty_payload_rejected():
    with pytest.raises(EncodingError):
        await generate_qr_data_url("")


@pytest.mark.asyncio
async def test_payload_too_large_is_encoding_error():
    with pytest.raises(EncodingError) as excinfo:
        await generate_qr_data_url("x" * 5000)
    assert excinfo.value.__cause__ is not None
    assert str(excinfo.value).startswith("Failed to generate QR code:")


@pytest.mark.asyncio
async def test_unsupported_type_is_encoding_error():
    with pytest.raises(EncodingError, match="image/gif"):
        await generate_qr_data_url("hello", QRImageOptions(mime_type="image/gif"))


def test_render_returns_png_bytes():
    assert render_qr_image("hello").startswith(b"\x89PNG\r\n\x1a\n")


def test_options_from_settings():
    options = QRImageOptions.from_settings({"qr_width": "300", "qr_dark": "#112233"})
    assert options.width == 300
    assert options.dark == "#112233"
    assert options.margin == 1
    assert options.mime_type == "image/png"
