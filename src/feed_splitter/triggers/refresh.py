"""
Periodic refresh of the per-show feeds.

Fetches the aggregated feed, splits it and publishes the result to the
FeedRegistry. A failed cycle (retrieval error or corrupt document) is
logged and leaves the previous snapshot in place.

Retry contract of ``FeedRefresher.run()``:

1. Until the first successful refresh, retry every ``interval`` seconds,
   logging each failure.
2. After that, refresh once per ``interval``; a failure is logged and the
   loop simply waits for the next tick.

Cycles are strictly serialized: the loop runs on a single thread and a
new cycle starts only after the previous one finished or failed.

Example:
    >>> registry = FeedRegistry()
    >>> refresher = FeedRefresher("file:///tmp/feed.xml", registry)
    >>> result = refresher.refresh_once()
    >>> print(result.to_json())
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from feed_splitter.errors import CorruptFeedError, FeedFetchError
from feed_splitter.feeds.registry import FeedRegistry, FeedSnapshot
from feed_splitter.feeds.splitter import split_feed
from feed_splitter.ingestion.fetcher import DEFAULT_TIMEOUT, fetch_feed

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 300.0


# ---------------------------------------------------------------------------
#  Data models
# ---------------------------------------------------------------------------

@dataclass
class RefreshResult:
    """
    Result of one refresh cycle.

    Attributes:
        ok: True if a new snapshot was published
        shows: Sorted slugs of the published snapshot
        total_episodes: Episode blocks found in the source feed
        dropped_episodes: Episodes left out because their show is unknown
        errors: Error messages for a failed cycle
        checked_at: ISO-8601 timestamp of the cycle
    """

    ok: bool = False
    shows: List[str] = field(default_factory=list)
    total_episodes: int = 0
    dropped_episodes: int = 0
    errors: List[str] = field(default_factory=list)
    checked_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "ok": self.ok,
            "shows": self.shows,
            "show_count": len(self.shows),
            "total_episodes": self.total_episodes,
            "dropped_episodes": self.dropped_episodes,
            "errors": self.errors,
            "checked_at": self.checked_at,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
#  Refresher
# ---------------------------------------------------------------------------

class FeedRefresher:
    """
    Keeps a FeedRegistry up to date with the source feed.

    Args:
        url: Source feed URL (http, https or file)
        registry: Registry to publish snapshots to
        interval: Seconds between refresh cycles (and between first-run retries)
        timeout: Per-attempt fetch timeout in seconds
        fetch: Retrieval function, ``fetch(url, timeout) -> bytes``
    """

    def __init__(
        self,
        url: str,
        registry: FeedRegistry,
        interval: float = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        fetch: Callable[[str, float], bytes] = fetch_feed,
    ) -> None:
        self.url = url
        self.registry = registry
        self.interval = interval
        self.timeout = timeout
        self.fetch = fetch
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def refresh_once(self) -> RefreshResult:
        """
        Run one fetch, split and publish cycle.

        Retrieval and corrupt-document errors are caught and reported in
        the result; the registry keeps its previous snapshot.
        """
        result = RefreshResult(checked_at=datetime.now(timezone.utc).isoformat())

        try:
            document = self.fetch(self.url, self.timeout)
        except FeedFetchError as exc:
            result.errors.append(f"error reading feed: {exc}")
            return result

        try:
            split = split_feed(document)
        except CorruptFeedError as exc:
            result.errors.append(f"error parsing feed: {exc}")
            return result

        snapshot = FeedSnapshot(feeds=split.shows, dropped_episodes=split.dropped_episodes)
        self.registry.replace(snapshot)

        result.ok = True
        result.shows = snapshot.slugs()
        result.total_episodes = split.total_episodes
        result.dropped_episodes = split.dropped_episodes

        logger.info(
            "Published %d show feed(s) from %d episode(s)",
            len(result.shows),
            result.total_episodes,
        )
        if result.dropped_episodes:
            logger.info(
                "Dropped %d unclassified episode(s) from feed %s",
                result.dropped_episodes,
                self.url,
            )
        return result

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Refresh until ``stop_event`` is set, following the retry contract.

        Args:
            stop_event: Event that ends the loop; defaults to this
                refresher's own event, set by ``stop()``
        """
        stop = stop_event or self._stop

        while not stop.is_set():
            result = self.refresh_once()
            if result.ok:
                break
            for err in result.errors:
                logger.error("Feed fetch failed (feed=%s, first=True): %s", self.url, err)
            if stop.wait(self.interval):
                return

        while not stop.wait(self.interval):
            result = self.refresh_once()
            for err in result.errors:
                logger.error("Feed fetch failed (feed=%s, first=False): %s", self.url, err)

    def start(self) -> threading.Thread:
        """Run the refresh loop on a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run,
            name="feed-refresher",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the refresh loop to stop and wait for the current cycle."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
