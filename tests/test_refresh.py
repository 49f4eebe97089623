"""
Tests for the feed refresh trigger.

Validates single refresh cycles, snapshot retention on failure, the
first-run retry contract and the steady-state loop, using a stubbed
fetch function instead of network access.

Covers:
- Successful refresh publishes a complete snapshot
- Retrieval and corrupt-document errors keep the previous snapshot
- Dropped (unclassified) episode counts
- RefreshResult output format and JSON serialization
- run(): retry until first success, then once per tick
- start()/stop() background thread
"""

import json
import logging
import threading
import time
from unittest.mock import MagicMock

from feed_splitter.errors import FeedFetchError
from feed_splitter.feeds.registry import FeedRegistry
from feed_splitter.ingestion.fetcher import fetch_feed
from feed_splitter.triggers.refresh import FeedRefresher, RefreshResult

from conftest import POSTLUDE, make_document


FEED_URL = "https://feed.example.com/network.xml"


def _refresher(registry, fetch, interval=0.001):
    return FeedRefresher(FEED_URL, registry, interval=interval, timeout=2.0, fetch=fetch)


# ===================================================================
# Test 1: Single refresh cycle
# ===================================================================

class TestRefreshOnce:
    """Tests for refresh_once()."""

    def test_publishes_snapshot(self, registry, two_show_document):
        """A good document produces one feed per show."""
        fetch = MagicMock(return_value=two_show_document)

        result = _refresher(registry, fetch).refresh_once()

        assert result.ok is True
        assert result.shows == ["bad-friends", "y-chromes"]
        assert result.total_episodes == 2
        assert registry.list_slugs() == ["bad-friends", "y-chromes"]
        fetch.assert_called_once_with(FEED_URL, 2.0)

    def test_each_feed_has_own_name_and_item(self, registry, two_show_document):
        """End to end: each feed carries only its item and its own name."""
        _refresher(registry, MagicMock(return_value=two_show_document)).refresh_once()

        bad_friends = registry.lookup("bad-friends").data
        y_chromes = registry.lookup("y-chromes").data

        assert b"<title>Bad Friends</title>" in bad_friends
        assert b"Y Chromes Ep. 27" not in bad_friends
        assert b"<title>Y-Chromes</title>" in y_chromes
        assert b"Bad Friends Ep. 1" not in y_chromes

    def test_fetch_error_keeps_previous_snapshot(self, registry, two_show_document):
        """A retrieval failure leaves the last good snapshot in place."""
        fetch = MagicMock(side_effect=[two_show_document, FeedFetchError("timed out")])
        refresher = _refresher(registry, fetch)

        refresher.refresh_once()
        before = registry.current()
        result = refresher.refresh_once()

        assert result.ok is False
        assert "error reading feed" in result.errors[0]
        assert registry.current() is before

    def test_corrupt_document_keeps_previous_snapshot(self, registry, two_show_document, prelude):
        """A corrupt document leaves the last good snapshot in place."""
        fetch = MagicMock(side_effect=[two_show_document, prelude + POSTLUDE])
        refresher = _refresher(registry, fetch)

        refresher.refresh_once()
        before = registry.current()
        result = refresher.refresh_once()

        assert result.ok is False
        assert "error parsing feed" in result.errors[0]
        assert registry.current() is before

    def test_failure_before_first_snapshot(self, registry):
        """No snapshot is published when the first cycle fails."""
        result = _refresher(registry, MagicMock(side_effect=FeedFetchError("down"))).refresh_once()

        assert result.ok is False
        assert registry.current() is None

    def test_full_replacement(self, registry, two_show_document):
        """A refresh replaces the snapshot rather than merging."""
        second = make_document(["MAHA News Ep. 37 - Morning Routines"])
        refresher = _refresher(registry, MagicMock(side_effect=[two_show_document, second]))

        refresher.refresh_once()
        refresher.refresh_once()

        assert registry.list_slugs() == ["maha-news"]

    def test_counts_dropped_episodes(self, registry, caplog):
        """Unclassified episodes are counted and logged, not raised."""
        document = make_document(["Bad Friends Ep. 1: a", "Trailer", "Bonus"])
        caplog.set_level(logging.INFO, logger="feed_splitter.triggers.refresh")

        result = _refresher(registry, MagicMock(return_value=document)).refresh_once()

        assert result.ok is True
        assert result.dropped_episodes == 2
        assert registry.current().dropped_episodes == 2
        assert "Dropped 2 unclassified episode(s)" in caplog.text


# ===================================================================
# Test 2: RefreshResult output format
# ===================================================================

class TestRefreshResultFormat:
    """Tests for RefreshResult dataclass and serialization."""

    def test_default_result(self):
        """Default RefreshResult is a failed, empty cycle."""
        result = RefreshResult()
        assert result.ok is False
        assert result.shows == []
        assert result.errors == []

    def test_to_dict_structure(self):
        """to_dict() returns a dictionary with all expected keys."""
        result = RefreshResult(
            ok=True,
            shows=["bad-friends", "y-chromes"],
            total_episodes=10,
            dropped_episodes=1,
            checked_at="2025-04-02T05:31:02+00:00",
        )

        d = result.to_dict()

        assert d["ok"] is True
        assert d["show_count"] == 2
        assert d["total_episodes"] == 10
        assert d["dropped_episodes"] == 1
        assert d["checked_at"] == "2025-04-02T05:31:02+00:00"

    def test_to_json_is_valid_json(self):
        """to_json() produces valid JSON that can be parsed back."""
        result = RefreshResult(errors=["error reading feed: down"])
        parsed = json.loads(result.to_json())
        assert parsed["ok"] is False
        assert parsed["errors"] == ["error reading feed: down"]


# ===================================================================
# Test 3: Retry contract
# ===================================================================

class TestRun:
    """Tests for the run() loop."""

    def test_first_run_retries_until_success(self, registry, two_show_document, caplog):
        """Failures before the first success are retried and logged."""
        stop = threading.Event()
        calls = []

        def fetch(url, timeout):
            calls.append(url)
            if len(calls) < 3:
                raise FeedFetchError("connection refused")
            stop.set()
            return two_show_document

        caplog.set_level(logging.ERROR, logger="feed_splitter.triggers.refresh")
        _refresher(registry, fetch).run(stop)

        assert len(calls) == 3
        assert registry.is_ready
        assert caplog.text.count("first=True") == 2

    def test_failures_after_success_wait_for_next_tick(self, registry, two_show_document, caplog):
        """Later failures are logged and the last good snapshot is kept."""
        stop = threading.Event()
        calls = []

        def fetch(url, timeout):
            calls.append(url)
            if len(calls) == 1:
                return two_show_document
            if len(calls) == 4:
                stop.set()
            raise FeedFetchError("timed out")

        caplog.set_level(logging.ERROR, logger="feed_splitter.triggers.refresh")
        _refresher(registry, fetch).run(stop)

        assert len(calls) == 4
        assert registry.list_slugs() == ["bad-friends", "y-chromes"]
        assert caplog.text.count("first=False") == 3
        assert "first=True" not in caplog.text

    def test_malformed_url_is_retried(self, registry, caplog):
        """An unparseable feed URL is a retrieval failure, not a crash."""
        stop = threading.Event()
        calls = []

        def fetch(url, timeout):
            calls.append(url)
            if len(calls) == 3:
                stop.set()
            return fetch_feed(url, timeout)

        caplog.set_level(logging.ERROR, logger="feed_splitter.triggers.refresh")
        FeedRefresher("http://[::1", registry, interval=0.001, fetch=fetch).run(stop)

        assert len(calls) == 3
        assert not registry.is_ready
        assert caplog.text.count("first=True") == 3

    def test_stopped_before_start(self, registry):
        """A set stop event ends the loop without fetching."""
        stop = threading.Event()
        stop.set()
        fetch = MagicMock()

        _refresher(registry, fetch).run(stop)

        fetch.assert_not_called()


# ===================================================================
# Test 4: Background thread
# ===================================================================

class TestBackgroundThread:
    """Tests for start() and stop()."""

    def test_start_and_stop(self, registry, two_show_document):
        """The background thread publishes a snapshot and stops cleanly."""
        refresher = _refresher(registry, MagicMock(return_value=two_show_document), interval=0.05)

        thread = refresher.start()
        deadline = time.monotonic() + 5
        while not registry.is_ready and time.monotonic() < deadline:
            time.sleep(0.01)
        refresher.stop(timeout=5)

        assert registry.is_ready
        assert not thread.is_alive()

    def test_start_is_idempotent(self, registry, two_show_document):
        """Starting twice reuses the running thread."""
        refresher = _refresher(registry, MagicMock(return_value=two_show_document), interval=0.05)
        try:
            assert refresher.start() is refresher.start()
        finally:
            refresher.stop(timeout=5)
