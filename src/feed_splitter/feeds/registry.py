"""
Registry of the currently published show feeds.

The refresh thread builds a complete FeedSnapshot off to the side and
publishes it with ``replace()``, a single reference swap under a short
lock. Readers take the current snapshot once per request and read it
without locking; snapshots are never modified after publication.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Mapping, Optional

from feed_splitter.models.entities import ShowFeed


@dataclass(frozen=True)
class FeedSnapshot:
    """
    One complete, read-only mapping of show slug to feed.

    Attributes:
        feeds: Show feeds keyed by slug
        created_at: When the snapshot was built
        dropped_episodes: Unclassifiable episodes left out of every feed
    """

    feeds: Mapping[str, ShowFeed]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dropped_episodes: int = 0

    def __post_init__(self) -> None:
        # copy so later changes to the caller's dict cannot leak in
        object.__setattr__(self, "feeds", MappingProxyType(dict(self.feeds)))

    def slugs(self) -> List[str]:
        """Return the show slugs in sorted order."""
        return sorted(self.feeds)


class FeedRegistry:
    """Holds the current FeedSnapshot and swaps it atomically."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: Optional[FeedSnapshot] = None

    def replace(self, snapshot: FeedSnapshot) -> None:
        """Publish a new snapshot, discarding the previous one."""
        with self._lock:
            self._snapshot = snapshot

    def current(self) -> Optional[FeedSnapshot]:
        """Return the current snapshot, or None before the first publish."""
        with self._lock:
            return self._snapshot

    @property
    def is_ready(self) -> bool:
        """True once a snapshot has been published."""
        return self.current() is not None

    def lookup(self, slug: str) -> Optional[ShowFeed]:
        """Return the feed for ``slug`` from the current snapshot, if any."""
        snapshot = self.current()
        if snapshot is None:
            return None
        return snapshot.feeds.get(slug)

    def list_slugs(self) -> List[str]:
        """Return the sorted slugs of the current snapshot."""
        snapshot = self.current()
        if snapshot is None:
            return []
        return snapshot.slugs()
