"""
Ingestion module for retrieving and scanning the aggregated feed.

Provides feed retrieval over http(s) and file URLs and the byte-level
scanner that locates the channel header, episode blocks and trailer.
"""

from feed_splitter.ingestion.fetcher import fetch_feed
from feed_splitter.ingestion.scanner import EpisodeBlock, FeedScanner, find_byte_range

__all__ = ["fetch_feed", "EpisodeBlock", "FeedScanner", "find_byte_range"]
