"""
Minifier-specific data models

Type-safe structures passed between the raw block stasher, the code
comment transformer, the whitespace pipeline and the orchestrator.
"""

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass
class StashedContent:
    """
    Result of replacing raw (heredoc-style) blocks with placeholders

    Returned by rawblocks_extract(). The blocks list is indexed to match the
    placeholders left in content (__MINIFIED_HEREDOC__0 → blocks[0]).

    Attributes:
        content: Text with every raw block replaced by its placeholder
        blocks: Verbatim raw block text in discovery order

    Example:
        Input: "<?php $a = <<<EOT\\nx\\nEOT;\\n?>"
        Result: StashedContent(
            content="<?php $a = __MINIFIED_HEREDOC__0\\n?>",
            blocks=["<<<EOT\\nx\\nEOT;"]
        )
    """
    content: str
    blocks: List[str] = field(default_factory=list)


class TransformFailure(Enum):
    """Reasons the code comment transformer can give up"""
    UNPARSEABLE = "unparseable"
    NESTING_TOO_DEEP = "nesting too deep"


@dataclass
class TransformOk:
    """
    Successful code comment transformation

    Attributes:
        text: Content with single-line code comments removed; raw blocks are
              still represented by placeholders
        delayed_blocks: Raw blocks the caller must restore after the
                        whitespace pipeline has run
    """
    text: str
    delayed_blocks: List[str] = field(default_factory=list)


@dataclass
class TransformErr:
    """
    Failed code comment transformation

    Attributes:
        reason: Failure category
        detail: Human-readable description for logging
    """
    reason: TransformFailure
    detail: str = ""


TransformResult = Union[TransformOk, TransformErr]


class BodyState(Enum):
    """
    Whether a position lies inside a protected element body

    OUTSIDE is the initial state; a protected opening tag enters the
    matching INSIDE_* state and its closing tag leaves it again.
    """
    OUTSIDE = "outside"
    INSIDE_TEXTAREA = "textarea"
    INSIDE_PRE = "pre"
    INSIDE_SCRIPT = "script"

    @classmethod
    def for_tag(cls, name: str) -> "BodyState":
        """Map a protected element name to its INSIDE_* state"""
        return cls(name.lower())


class Strategy(Enum):
    """Which comment stripping path produced a minified template"""
    TOKENIZED = "tokenized"
    FALLBACK = "fallback"


@dataclass
class MinifyResult:
    """
    Outcome of minifying one template

    Attributes:
        source: Canonical path of the source template
        target: Absolute path of the written minified copy
        strategy: Comment stripping path taken
        raw_blocks: Number of raw blocks stashed and restored
        size_in: Source length in characters
        size_out: Minified length in characters
    """
    source: Path
    target: Path
    strategy: Strategy
    raw_blocks: int
    size_in: int
    size_out: int
