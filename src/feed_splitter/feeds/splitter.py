"""
Splitting of the aggregated feed into per-show feeds.

Scans the document once, classifies every episode block by show and
assembles one ShowFeed per show slug. Episodes whose title matches no
classification rule are dropped from every feed and counted.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from feed_splitter.analysis.show_titles import show_title, slugify
from feed_splitter.feeds.assembler import build_show_feed
from feed_splitter.ingestion.scanner import FeedScanner
from feed_splitter.models.entities import ShowFeed

logger = logging.getLogger(__name__)


@dataclass
class SplitResult:
    """
    Outcome of splitting one feed document.

    Attributes:
        shows: Show feeds keyed by slug
        total_episodes: Number of episode blocks found
        dropped_episodes: Episodes whose title could not be classified
    """

    shows: Dict[str, ShowFeed] = field(default_factory=dict)
    total_episodes: int = 0
    dropped_episodes: int = 0


def split_feed(document: bytes) -> SplitResult:
    """
    Split an aggregated feed document into per-show feeds.

    Display names that collapse to the same slug share one feed, named
    after the first display name seen in the document.

    Args:
        document: Raw feed bytes

    Returns:
        SplitResult with one ShowFeed per show slug

    Raises:
        CorruptFeedError: If the document structure cannot be located
    """
    scanner = FeedScanner(document)
    prelude = scanner.prelude()
    postlude = scanner.postlude()

    names: Dict[str, str] = {}
    items: Dict[str, List[bytes]] = {}
    result = SplitResult()

    for block in scanner.items():
        result.total_episodes += 1
        show = show_title(block.title)
        if not show:
            result.dropped_episodes += 1
            logger.debug("Unclassified episode title: %s", block.title)
            continue
        slug = slugify(show)
        names.setdefault(slug, show)
        items.setdefault(slug, []).append(block.data)

    scanner.raise_for_error()

    for slug, blocks in items.items():
        result.shows[slug] = build_show_feed(names[slug], slug, prelude, blocks, postlude)
        logger.debug("found show=%s sys=%s episodes=%d", names[slug], slug, len(blocks))

    return result
