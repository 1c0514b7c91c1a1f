from __future__ import annotations

import logging
from urllib.parse import urlsplit

import requests

from .conf import get_setting

logger = logging.getLogger(__name__)


def find_endpoint(url: str) -> str | None:
    host = (urlsplit(url or "").hostname or "").lower()
    if not host:
        return None
    for suffix, endpoint in get_setting("OEMBED_PROVIDERS").items():
        if host == suffix or host.endswith("." + suffix):
            return endpoint
    return None


def fetch_thumbnail_url(url: str) -> str:
    """Poster image for an externally hosted video, or "" if the provider can't say."""
    endpoint = find_endpoint(url)
    if endpoint is None:
        return ""
    try:
        response = requests.get(
            endpoint,
            params={"url": url, "format": "json"},
            timeout=get_setting("OEMBED_TIMEOUT"),
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("oEmbed lookup for %s failed: %s", url, exc)
        return ""
    if not isinstance(data, dict):
        logger.warning("oEmbed lookup for %s returned an unexpected payload", url)
        return ""
    thumbnail = data.get("thumbnail_url")
    return thumbnail if isinstance(thumbnail, str) else ""
