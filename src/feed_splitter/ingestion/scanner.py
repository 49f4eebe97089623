"""
Byte-level scanner for the aggregated podcast feed.

Locates the shared channel header (prelude), the repeated ``<item>``
episode blocks and the trailer (postlude) by literal tag search. No XML
parser is involved: every region is a slice of the original bytes, so
episode blocks can be copied into per-show feeds byte for byte.

Example:
    >>> scanner = FeedScanner(document)
    >>> prelude = scanner.prelude()
    >>> postlude = scanner.postlude()
    >>> blocks = list(scanner.items())
    >>> scanner.raise_for_error()
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from feed_splitter.errors import CorruptFeedError

logger = logging.getLogger(__name__)


ITEM_BEGIN = b"<item>"
ITEM_END = b"</item>"
TITLE_BEGIN = b"<title>"
TITLE_END = b"</title>"


def find_byte_range(buf: bytes, begin: bytes, end: bytes) -> Tuple[int, int]:
    """
    Find the text between the first ``begin`` tag and the ``end`` tag after it.

    Args:
        buf: Buffer to search
        begin: Opening tag, e.g. ``b"<title>"``
        end: Closing tag, e.g. ``b"</title>"``

    Returns:
        ``(off, end)`` half-open range of the element body, or ``(-1, -1)``
        if either tag is missing
    """
    i = buf.find(begin)
    if i == -1:
        return -1, -1
    off = i + len(begin)
    j = buf.find(end, off)
    if j == -1:
        return -1, -1
    return off, j


@dataclass(frozen=True)
class EpisodeBlock:
    """
    One ``<item>...</item>`` region exactly as it appeared in the source.

    Attributes:
        data: Raw bytes of the block, including any whitespace that
            preceded the opening tag
        title: Text of the block's first ``<title>`` element, still
            XML-escaped
    """

    data: bytes
    title: str


class FeedScanner:
    """
    Single-use scanner over one feed document.

    Errors are not raised from the accessors. A corrupt document puts the
    scanner into a permanent error state in which every accessor returns
    an empty result; check ``error`` (or call ``raise_for_error()``) once
    iteration is over.
    """

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.error: Optional[CorruptFeedError] = None
        self._consumed = False

    def _fail(self, reason: str) -> None:
        if self.error is None:
            logger.debug("Corrupt feed: %s", reason)
            self.error = CorruptFeedError(f"corrupt feed: {reason}")

    def _prelude_end(self) -> int:
        i = self.data.find(ITEM_BEGIN)
        if i == -1:
            self._fail("no <item> element")
            return -1
        # the newline before the first <item> belongs to the first block
        j = self.data.rfind(b">", 0, i)
        if j == -1:
            self._fail("no tag before the first <item>")
            return -1
        return j + 1

    def prelude(self) -> bytes:
        """Return the channel header up to the last ``>`` before the first item."""
        if self.error is not None:
            return b""
        end = self._prelude_end()
        if end == -1:
            return b""
        return self.data[:end]

    def postlude(self) -> bytes:
        """Return everything after the last ``</item>``."""
        if self.error is not None:
            return b""
        i = self.data.rfind(ITEM_END)
        if i == -1:
            self._fail("no </item> element")
            return b""
        return self.data[i + len(ITEM_END):]

    def items(self) -> Iterator[EpisodeBlock]:
        """
        Yield episode blocks left to right.

        The scan runs once per scanner; a second call yields nothing.

        Yields:
            EpisodeBlock for each ``<item>`` in document order
        """
        if self.error is not None or self._consumed:
            return
        self._consumed = True

        off = self._prelude_end()
        if off == -1:
            return

        while True:
            i = self.data.find(ITEM_END, off)
            if i == -1:
                last = self.data.rfind(ITEM_END)
                if last == -1 or off != last + len(ITEM_END):
                    self._fail("unterminated episode block")
                return

            end = i + len(ITEM_END)
            block = self.data[off:end]
            title_off, title_end = find_byte_range(block, TITLE_BEGIN, TITLE_END)
            if title_off == -1:
                self._fail(f"episode block at offset {off} has no <title>")
                return

            yield EpisodeBlock(
                data=block,
                title=block[title_off:title_end].decode("utf-8", errors="replace"),
            )
            off = end

    def raise_for_error(self) -> None:
        """Raise the recorded CorruptFeedError, if any."""
        if self.error is not None:
            raise self.error
