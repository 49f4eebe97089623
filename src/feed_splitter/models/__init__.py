"""
Data models for assembled show feeds.
"""

from feed_splitter.models.entities import ShowFeed, ShowSummary

__all__ = ["ShowFeed", "ShowSummary"]
