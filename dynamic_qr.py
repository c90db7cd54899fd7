"""
Dynamic link QR generator.

Keeps a QR code for an API link fresh: every refresh appends a new timestamp
and uuid to the link, so each scan gets a unique URL.
"""

import logging

from settings_store import DEFAULT_SETTINGS, load_settings
from utils.errors import ConfigurationError
from utils.qr_generator import QRImageOptions, generate_qr_data_url
from utils.refresh_timer import REFRESH_INTERVAL_MS, RefreshTimer
from utils.unique_link import TIMESTAMP_PARAM, UUID_PARAM, generate_unique_link


logger = logging.getLogger(__name__)


class DynamicLinkQRGenerator:
    def __init__(self, api_link, settings=None, interval_ms=None, settings_file=None):
        """Settings come from *settings*, else from *settings_file* when one
        is given, else DEFAULT_SETTINGS. No file is read implicitly."""
        if not isinstance(api_link, str) or not api_link.strip():
            raise ConfigurationError("API link is required")

        if settings is None:
            settings = load_settings(settings_file) if settings_file else DEFAULT_SETTINGS
        if interval_ms is None:
            try:
                interval_ms = int(settings.get("refresh_interval_ms", REFRESH_INTERVAL_MS))
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"Invalid refresh interval: {exc}") from exc

        self.api_link = api_link
        self.options = QRImageOptions.from_settings(settings)
        self.timestamp_param = settings.get("timestamp_param", TIMESTAMP_PARAM)
        self.uuid_param = settings.get("uuid_param", UUID_PARAM)
        self.current_data_url = None
        self.timer = RefreshTimer(interval_ms)

    async def generate(self):
        """Build a fresh link, encode it and store it as the current QR code."""
        unique_link = generate_unique_link(
            self.api_link,
            timestamp_param=self.timestamp_param,
            uuid_param=self.uuid_param,
        )
        data_url = await generate_qr_data_url(unique_link, self.options)
        self.current_data_url = data_url
        return data_url

    def start(self):
        """Generate now and then on every refresh interval.

        Must be called from a running event loop.
        """
        logger.info("Starting QR refresh for %s every %d ms", self.api_link, self.timer.interval_ms)
        self.timer.start(self.generate)

    def stop(self):
        self.timer.stop()

    def get_current(self):
        return self.current_data_url

    def destroy(self):
        self.timer.stop()
        self.current_data_url = None

    @staticmethod
    async def generate_once(api_link):
        """One-time generation, without storing the result or scheduling."""
        unique_link = generate_unique_link(api_link)
        return await generate_qr_data_url(unique_link)
