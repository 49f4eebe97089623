"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- The reference podbean channel header (byte-exact copy of the live feed)
- Builders for episode blocks and complete aggregated documents
- An empty feed registry
"""

from pathlib import Path
from typing import Iterable

import pytest

from feed_splitter.feeds.registry import FeedRegistry

FIXTURES_DIR = Path(__file__).parent / "fixtures"

POSTLUDE = b"\n</channel>\n</rss>\n"


def load_prelude() -> bytes:
    """Return the reference channel header, ending with ``</image>``."""
    return (FIXTURES_DIR / "podbean_prelude.xml").read_bytes()


def make_item(title: str, guid: str = "guid-1") -> bytes:
    """
    Build one episode block the way podbean lays it out.

    ``title`` is inserted verbatim, so it must already be XML-escaped.
    """
    return (
        "\n    <item>"
        f"\n        <title>{title}</title>"
        f"\n        <link>https://badlandsmedia.podbean.com/e/{guid}/</link>"
        f"\n        <guid isPermaLink=\"false\">{guid}</guid>"
        "\n        <pubDate>Tue, 01 Apr 2025 22:00:00 -0400</pubDate>"
        f"\n        <enclosure url=\"https://mcdn.podbean.com/{guid}.mp3\" length=\"1024\" type=\"audio/mpeg\"/>"
        "\n    </item>"
    ).encode("utf-8")


def make_document(titles: Iterable[str], prelude: bytes = None) -> bytes:
    """Build an aggregated feed document with one item per title."""
    if prelude is None:
        prelude = load_prelude()
    items = [make_item(title, guid=f"guid-{i}") for i, title in enumerate(titles)]
    return prelude + b"".join(items) + POSTLUDE


@pytest.fixture
def prelude() -> bytes:
    """Reference podbean channel header."""
    return load_prelude()


@pytest.fixture
def two_show_document() -> bytes:
    """Document with one Bad Friends and one Y-Chromes episode."""
    return make_document([
        "Bad Friends Ep. 1: In the Beginning Was the Word... and a Lot of Chaos",
        "Y Chromes Ep. 27: Hobby Horses, Third Titties, and the Devil on Drums",
    ])


@pytest.fixture
def registry() -> FeedRegistry:
    """Empty feed registry."""
    return FeedRegistry()
