"""
Protected body detection

Answers "is this position inside a <pre>, <textarea> or <script> body?" for
the whitespace pipeline. The tag positions are collected once per text; a
position is inside a body when the first opening-or-closing tag of a watched
element at or after it is a closing tag. Nothing else about the markup is
parsed, so stray or unbalanced tags are taken at face value.

Example:
    >>> scanner = TagScanner("<pre> a </pre> b", ["pre"])
    >>> scanner.state_at(6)
    <BodyState.INSIDE_PRE: 'pre'>
    >>> scanner.state_at(15)
    <BodyState.OUTSIDE: 'outside'>
"""

import re
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models.minifier import BodyState


@dataclass
class TagMark:
    """
    One opening or closing tag of a watched element

    Attributes:
        position: Offset of the '<'
        name: Element name as written
        closing: True for </name
    """
    position: int
    name: str
    closing: bool


class TagScanner:
    """
    Position index of protected element tags in one text

    Args:
        text: Text to index
        names: Watched element names
        ignore_case: Match tag names case-insensitively
    """

    def __init__(self, text: str, names: Iterable[str], ignore_case: bool = False) -> None:
        alternatives = "|".join(re.escape(name) for name in names)
        flags = re.IGNORECASE if ignore_case else 0
        self.pattern = re.compile(r"<(/?)(" + alternatives + r")\b", flags)
        self.marks: List[TagMark] = [
            TagMark(position=m.start(), name=m.group(2), closing=bool(m.group(1)))
            for m in self.pattern.finditer(text)
        ]
        self.positions: List[int] = [mark.position for mark in self.marks]

    def mark_next(self, position: int) -> Optional[TagMark]:
        """First watched tag starting at or after position"""
        index = bisect_left(self.positions, position)
        if index == len(self.marks):
            return None
        return self.marks[index]

    def state_at(self, position: int) -> BodyState:
        """Body state of a position"""
        mark = self.mark_next(position)
        if mark is None or not mark.closing:
            return BodyState.OUTSIDE
        return BodyState.for_tag(mark.name)

    def is_protected(self, position: int) -> bool:
        """True when position lies inside a watched element body"""
        return self.state_at(position) is not BodyState.OUTSIDE

    def protectedEnd_find(self, lower: int, upper: int) -> Optional[int]:
        """
        Largest position in [lower, upper] that is inside a body

        Protection only changes at tag positions, so the candidates are
        upper itself and every tag start in between.

        Args:
            lower: Smallest acceptable position
            upper: Largest acceptable position

        Returns:
            The position, or None if the whole range is outside
        """
        if self.is_protected(upper):
            return upper
        index = bisect_left(self.positions, upper) - 1
        while index >= 0 and self.positions[index] >= lower:
            if self.marks[index].closing:
                return self.positions[index]
            index -= 1
        return None
