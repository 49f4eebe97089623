"""
Retrieval of the aggregated source feed.

Supports ``http://`` and ``https://`` URLs (fetched with requests) and
``file://`` URLs read from the local filesystem, which is handy for
testing against a saved copy of the feed.
"""

import logging
from pathlib import Path
from urllib.parse import urlparse

import requests

from feed_splitter.errors import FeedFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
USER_AGENT = "feed-splitter/0.1"


def fetch_feed(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """
    Retrieve the raw bytes of a feed document.

    Args:
        url: Feed location (http, https or file scheme)
        timeout: Per-attempt timeout in seconds for network fetches

    Returns:
        Raw document bytes

    Raises:
        FeedFetchError: If the URL is unsupported or retrieval fails

    Example:
        >>> data = fetch_feed("file:///tmp/feed.xml")
    """
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise FeedFetchError(f"invalid feed URL: {exc}") from exc
    logger.debug("Reading feed %s", url)

    if parsed.scheme in ("http", "https"):
        try:
            response = requests.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout as exc:
            raise FeedFetchError(f"fetch timed out after {timeout}s: {url}") from exc
        except requests.exceptions.HTTPError as exc:
            raise FeedFetchError(f"fetch failed: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise FeedFetchError(f"fetch failed: {exc}") from exc
        return response.content

    if parsed.scheme == "file":
        path = Path(url[len("file://"):])
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FeedFetchError(f"open failed: {exc}") from exc

    raise FeedFetchError(f"invalid feed URL (unsupported scheme): {url!r}")
