"""
Assembly of per-show feed documents.

A show feed is the shared prelude with the show's edits applied, the
show's episode blocks in their original order, and the shared postlude.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Sequence

from feed_splitter.feeds.edits import plan_show_edits
from feed_splitter.ingestion.scanner import find_byte_range
from feed_splitter.models.entities import ShowFeed

logger = logging.getLogger(__name__)


PUB_DATE_BEGIN = b"<pubDate>"
PUB_DATE_END = b"</pubDate>"

# RFC 1123 with a numeric zone, e.g. "Wed, 02 Apr 2025 01:31:02 -0400"
PUB_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"
# strptime alone also accepts "Z", "-04:00" and single-digit fields
PUB_DATE_REGEXP = re.compile(
    r"[A-Z][a-z]{2}, \d{2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} [+-]\d{4}", re.ASCII
)


def concat_feed_data(prelude: bytes, items: Sequence[bytes], postlude: bytes) -> bytes:
    """Concatenate header, episode blocks (in the given order) and trailer."""
    return b"".join([prelude, *items, postlude])


def pub_date_or_now(prelude: bytes) -> datetime:
    """
    Parse the channel ``<pubDate>``, falling back to the current time.

    Args:
        prelude: Channel header

    Returns:
        Timezone-aware publish date; ``datetime.now(timezone.utc)`` if the
        element is missing or its value is malformed
    """
    off, end = find_byte_range(prelude, PUB_DATE_BEGIN, PUB_DATE_END)
    if off == -1:
        logger.debug("No <pubDate> in channel header, using current time")
        return datetime.now(timezone.utc)

    value = prelude[off:end].decode("utf-8", errors="replace")
    if PUB_DATE_REGEXP.fullmatch(value):
        try:
            return datetime.strptime(value, PUB_DATE_FORMAT)
        except ValueError:
            pass
    logger.debug("Unparseable <pubDate> %r, using current time", value)
    return datetime.now(timezone.utc)


def build_show_feed(
    name: str,
    slug: str,
    prelude: bytes,
    items: Sequence[bytes],
    postlude: bytes,
) -> ShowFeed:
    """
    Build the complete feed for one show.

    Args:
        name: Show display name, substituted into the header
        slug: Show slug (registry key and file stem)
        prelude: Shared channel header, unedited
        items: The show's episode blocks in document order
        postlude: Shared trailer

    Returns:
        Immutable ShowFeed
    """
    edited = plan_show_edits(prelude, name).apply()
    return ShowFeed(
        slug=slug,
        name=name,
        pub_date=pub_date_or_now(edited),
        data=concat_feed_data(edited, items, postlude),
        episode_count=len(items),
    )
