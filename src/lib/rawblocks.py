"""
Raw block stashing

Heredoc-style blocks (<<<EOT ... EOT;) hold literal text that no
minification stage may touch. They are swapped for placeholders before any
text pass runs and spliced back verbatim afterwards.

The same two functions serve both the code comment transformer and the
orchestrator's fallback path, so placeholder numbering is identical no
matter which side produced the block list.
"""

import re
from typing import List, Optional

from ..config import appsettings, AppSettings
from ..models.minifier import StashedContent


RAWBLOCK_PATTERN = re.compile(r"<<<([A-Za-z]+)(?![A-Za-z0-9_]).*?\1\s*;", re.IGNORECASE | re.DOTALL)


def rawblocks_extract(
    content: Optional[str], settings: AppSettings = appsettings
) -> StashedContent:
    """
    Replace raw blocks with placeholders

    A block opens with <<< and a letters-only identifier (not continued by a
    digit or underscore) and ends at the first later occurrence of the same
    identifier followed by optional whitespace and a semicolon. An opener
    without such a closer is left in place.

    Args:
        content: Template text (None is treated as empty)
        settings: Settings providing the placeholder marker

    Returns:
        StashedContent with placeholders substituted and blocks recorded

    Example:
        >>> stashed = rawblocks_extract("<?php $a = <<<EOT\\nhi\\nEOT;")
        >>> stashed.content
        '<?php $a = __MINIFIED_HEREDOC__0'
        >>> stashed.blocks
        ['<<<EOT\\nhi\\nEOT;']
    """
    blocks: List[str] = []
    if not content:
        return StashedContent(content="", blocks=blocks)

    def stash(match: re.Match[str]) -> str:
        blocks.append(match.group(0))
        return settings.placeHolder_make(len(blocks) - 1)

    stashed = RAWBLOCK_PATTERN.sub(stash, content)
    return StashedContent(content=stashed, blocks=blocks)


def rawblocks_restore(
    content: str, blocks: Optional[List[str]], settings: AppSettings = appsettings
) -> str:
    """
    Splice stashed raw blocks back into content

    Args:
        content: Text containing placeholders
        blocks: Raw block text indexed by placeholder number
        settings: Settings providing the placeholder marker

    Returns:
        Content with every known placeholder replaced by its block
    """
    if not content or not blocks:
        return content or ""

    def restore(match: re.Match[str]) -> str:
        index = settings.blockIndex_extract(match.group(0))
        if index is None or index >= len(blocks):
            return match.group(0)  # Not one of ours
        return blocks[index]

    return settings.placeHolder_pattern().sub(restore, content)
