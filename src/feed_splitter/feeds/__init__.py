"""
Per-show feed construction and publication.

Provides the header edit planner and applier, the show feed assembler,
the splitter that ties them together, and the snapshot registry read by
the HTTP server.
"""

from feed_splitter.feeds.assembler import build_show_feed, concat_feed_data, pub_date_or_now
from feed_splitter.feeds.edits import (
    Edit,
    EditPlan,
    apply_edits,
    fix_show_title,
    mark_feed_private,
    plan_show_edits,
)
from feed_splitter.feeds.registry import FeedRegistry, FeedSnapshot
from feed_splitter.feeds.splitter import SplitResult, split_feed

__all__ = [
    "Edit",
    "EditPlan",
    "apply_edits",
    "fix_show_title",
    "mark_feed_private",
    "plan_show_edits",
    "build_show_feed",
    "concat_feed_data",
    "pub_date_or_now",
    "FeedRegistry",
    "FeedSnapshot",
    "SplitResult",
    "split_feed",
]
