import logging
import time
import uuid
from urllib.parse import quote_plus, unquote_plus, urlsplit, urlunsplit

from .errors import InvalidReferenceError


logger = logging.getLogger(__name__)

TIMESTAMP_PARAM = "timestamp"
UUID_PARAM = "uuid"


def current_millis() -> int:
    return time.time_ns() // 1_000_000


def new_unique_id() -> str:
    return str(uuid.uuid4())


def _split_absolute(base_link):
    if not isinstance(base_link, str) or not base_link.strip():
        raise InvalidReferenceError("Base link must be a non-empty absolute URL")
    try:
        parts = urlsplit(base_link.strip())
    except ValueError as exc:
        raise InvalidReferenceError(f"Invalid base link {base_link!r}: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise InvalidReferenceError(f"Base link is not an absolute URL: {base_link!r}")
    return parts


def _segment_key(segment):
    return unquote_plus(segment.split("=", 1)[0])


def _set_params(query, updates):
    """Replace the first segment for each key in *updates*, drop the rest,
    and append keys that were not present. Other segments are kept as is."""
    result = []
    seen = set()
    for segment in query.split("&") if query else []:
        key = _segment_key(segment)
        if key in updates:
            if key in seen:
                continue
            seen.add(key)
            result.append(f"{quote_plus(key)}={quote_plus(updates[key])}")
        else:
            result.append(segment)
    for key, value in updates.items():
        if key not in seen:
            result.append(f"{quote_plus(key)}={quote_plus(value)}")
    return "&".join(result)


def generate_unique_link(
    base_link: str,
    timestamp_param: str = TIMESTAMP_PARAM,
    uuid_param: str = UUID_PARAM,
) -> str:
    """Return *base_link* with a fresh timestamp and uuid in its query string.

    Query parameters already on the link are kept byte for byte. The two
    freshness parameters overwrite any existing values of the same name.
    """
    parts = _split_absolute(base_link)
    query = _set_params(
        parts.query,
        {
            timestamp_param: str(current_millis()),
            uuid_param: new_unique_id(),
        },
    )
    unique_link = urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
    logger.debug("Generated unique link %s", unique_link)
    return unique_link
