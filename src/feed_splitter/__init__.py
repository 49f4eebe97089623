"""
Feed Splitter

Splits an aggregated multi-show podcast RSS feed into per-show feeds and
serves them over HTTP. The split works on raw bytes: episode blocks are
copied verbatim and only a few channel header fields are rewritten.
"""

__version__ = "0.1.0"
__author__ = "Feed Splitter Team"

from feed_splitter.config import Config

__all__ = ["Config", "__version__"]
