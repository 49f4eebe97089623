"""
Triggers that keep the published feeds current.

Provides the refresh loop that periodically re-fetches the aggregated
feed and replaces the registry snapshot, retrying until the first
successful refresh.
"""

from feed_splitter.triggers.refresh import FeedRefresher, RefreshResult

__all__ = ["FeedRefresher", "RefreshResult"]
