"""
Byte-range edits on the shared channel header.

Every per-show feed starts from the same prelude. Instead of
re-serializing XML, the show-specific changes are expressed as edits
(half-open byte ranges plus replacement text) computed against one
specific buffer and spliced in with ``apply_edits``.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
from xml.sax.saxutils import escape

from feed_splitter.errors import OverlappingEditsError
from feed_splitter.ingestion.scanner import TITLE_BEGIN, TITLE_END, find_byte_range

logger = logging.getLogger(__name__)


IMAGE_BEGIN = b"<image>"
IMAGE_END = b"</image>"
ITUNES_NAME_BEGIN = b"<itunes:name>"
ITUNES_NAME_END = b"</itunes:name>"
ITUNES_BLOCK_BEGIN = b"<itunes:block>"
ITUNES_BLOCK_END = b"</itunes:block>"

PRIVATE_MARKER = "Yes"


@dataclass(frozen=True)
class Edit:
    """Replace ``buf[offset:end]`` with ``text`` (UTF-8 encoded)."""

    offset: int
    end: int
    text: str


@dataclass(frozen=True)
class EditPlan:
    """
    A set of non-overlapping edits bound to the buffer they were computed on.

    Attributes:
        source: Buffer the edit offsets refer to
        edits: Edits against ``source``
    """

    source: bytes
    edits: Tuple[Edit, ...] = field(default_factory=tuple)

    def apply(self) -> bytes:
        """Apply the edits to ``source`` and return the new buffer."""
        return apply_edits(self.source, self.edits)


def apply_edits(buf: bytes, edits: Iterable[Edit]) -> bytes:
    """
    Splice edits into a buffer.

    Edits are applied in ascending offset order regardless of the order
    given. The input buffer is not modified.

    Args:
        buf: Source buffer
        edits: Non-overlapping edits computed against ``buf``

    Returns:
        New buffer with the edits applied, or ``buf`` itself if there are
        no edits

    Raises:
        OverlappingEditsError: If two edits cover the same bytes or an
            edit range is out of bounds
    """
    ordered = sorted(edits, key=lambda e: e.offset)
    if not ordered:
        return buf

    prev_end = 0
    for e in ordered:
        if e.offset < prev_end or e.end < e.offset or e.end > len(buf):
            raise OverlappingEditsError(
                f"edit [{e.offset}, {e.end}) overlaps or exceeds buffer "
                f"(previous edit ends at {prev_end}, buffer is {len(buf)} bytes)"
            )
        prev_end = e.end

    parts = []
    end = 0
    for e in ordered:
        parts.append(buf[end:e.offset])
        parts.append(e.text.encode("utf-8"))
        end = e.end
    parts.append(buf[end:])
    return b"".join(parts)


def fix_show_title(prelude: bytes, name: str) -> List[Edit]:
    """
    Plan the edits that rename the channel after one show.

    The channel ``<title>`` is only replaced when it can be confirmed to
    lie outside the ``<image>`` block, whose own ``<title>`` names the
    logo. Without an ``<image>`` block the title edit is skipped.
    The ``<itunes:name>`` owner name is replaced when present.

    Args:
        prelude: Shared channel header
        name: Show display name (unescaped)

    Returns:
        Edits against ``prelude``, with the name XML-escaped
    """
    name = escape(name)
    edits: List[Edit] = []

    image_off, image_end = find_byte_range(prelude, IMAGE_BEGIN, IMAGE_END)
    if image_off != -1:
        off, end = find_byte_range(prelude, TITLE_BEGIN, TITLE_END)
        if off != -1 and (end < image_off or off > image_end):
            edits.append(Edit(offset=off, end=end, text=name))
        else:
            logger.debug("Channel <title> not confirmed outside <image>, skipping")

    off, end = find_byte_range(prelude, ITUNES_NAME_BEGIN, ITUNES_NAME_END)
    if off != -1:
        edits.append(Edit(offset=off, end=end, text=name))

    return edits


def mark_feed_private(prelude: bytes) -> Optional[Edit]:
    """Plan the edit that sets ``<itunes:block>`` to the private marker."""
    off, end = find_byte_range(prelude, ITUNES_BLOCK_BEGIN, ITUNES_BLOCK_END)
    if off == -1:
        return None
    return Edit(offset=off, end=end, text=PRIVATE_MARKER)


def plan_show_edits(prelude: bytes, name: str) -> EditPlan:
    """Combine title, owner-name and visibility edits for one show."""
    edits = fix_show_title(prelude, name)
    private = mark_feed_private(prelude)
    if private is not None:
        edits.append(private)
    return EditPlan(source=prelude, edits=tuple(edits))
