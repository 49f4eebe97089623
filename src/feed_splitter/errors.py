"""
Exceptions raised by the feed splitter.

Only CorruptFeedError and FeedFetchError are expected to reach the
refresh cycle, which logs them and keeps the previous snapshot.
"""


class FeedSplitterError(Exception):
    """Base exception for all feed splitter errors."""

    pass


class CorruptFeedError(FeedSplitterError):
    """The source document is missing a required structural boundary."""

    pass


class FeedFetchError(FeedSplitterError):
    """The source document could not be retrieved."""

    pass


class OverlappingEditsError(FeedSplitterError, ValueError):
    """Two edits in one edit set cover the same bytes."""

    pass
