"""
Title analysis: show classification and slug normalization.
"""

from feed_splitter.analysis.show_titles import (
    TITLE_RULES,
    TitleRule,
    classify_title,
    show_title,
    slugify,
)

__all__ = ["TITLE_RULES", "TitleRule", "classify_title", "show_title", "slugify"]
