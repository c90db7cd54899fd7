import json
import logging
import os


logger = logging.getLogger(__name__)

SETTINGS_FILE = "qr_settings.json"


DEFAULT_SETTINGS = {
    "refresh_interval_ms": 30000,
    "qr_type": "image/png",
    "qr_width": 256,
    "qr_margin": 1,
    "qr_dark": "#000000",
    "qr_light": "#FFFFFF",
    "qr_error_correction": "M",
    "timestamp_param": "timestamp",
    "uuid_param": "uuid",
}


def load_settings(path=SETTINGS_FILE):
    """Return DEFAULT_SETTINGS updated with the JSON object stored at *path*.

    A missing file gives the defaults. An unreadable file, or one that does
    not hold a JSON object, is logged and also gives the defaults.
    """
    settings = DEFAULT_SETTINGS.copy()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as file_obj:
                data = json.load(file_obj)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            return settings
        if isinstance(data, dict):
            settings.update(data)
        else:
            logger.warning("Ignoring settings file %s: expected a JSON object", path)
    return settings
