"""
Whitespace pipeline for hybrid HTML/PHP templates

Six text passes, always run in this order, each consuming the output of
the previous one:

1. scriptCodeComments_strip: drop "// ... <?php ... ?> ..." lines in <script>
2. scriptLineComments_strip: drop "// ..." comments in <script>
3. whitespace_collapse: squeeze whitespace runs outside <pre>, <textarea>, <script>
4. emptyTagSpaces_remove: "> <" becomes "><" unless an inline element precedes
5. codeTrailingSpace_collapse: one space after non-output "<?php ... ?>" blocks
6. closingTagSpaces_remove: drop whitespace before closing tags

Whitespace is the ASCII set only; a non-breaking space is content.

Example:
    >>> WhitespacePipeline().run("<div>  hello   </div>")
    '<div> hello</div>'
"""

import re
from functools import reduce
from typing import Callable, List, Optional

from ..config import appsettings
from .log import LOG
from .scanner import TagScanner


WHITESPACE = " \t\n\r\f\v"
WS = r"[ \t\n\r\f\v]"

PROTECTED_TAGS = ("textarea", "pre", "script")
SCRIPT_TAGS = ("script",)

# Keywords that start an output or control block; whitespace after such a
# block may be rendered, so it is left alone
OUTPUT_KEYWORDS = ("echo", "print", "if", "elseif", "else")

CODE_COMMENT_START = re.compile(r"(?<![:\\])//")
CODE_OPEN = re.compile(r"<\?(?:php|=)")
CODE_CLOSE = re.compile(r"[ \t\f\v]\?>")

LINE_COMMENT_START = re.compile(
    r"(?<![:\\'\"/])//(?!/)"
    r"(?!" + WS + r"*<!\[)"
    r"(?!" + WS + r"*\]\]>)"
)
SCRIPT_OPEN_PREFIX = re.compile(r"<script\b[^>]*>(" + WS + r"*)$")
LINE_END = re.compile(r"[\n\r]")

WHITESPACE_RUN = re.compile(WS + r"+")
EMPTY_TAG_SPACE = re.compile(r"> <")
CODE_TRAILING_SPACE = re.compile(
    r"(<\?php" + WS + r"+(?!" + WS + r")"
    r"(?!" + "|".join(OUTPUT_KEYWORDS) + r")"
    r"[^?]*\?>)" + WS + r"+"
)
CLOSING_TAG_SPACE = re.compile(r"(?<!\]\]>)" + WS + r"+(?=</)")


def lineEnd_find(content: str, position: int) -> int:
    """Offset of the next line break at or after position, or len(content)"""
    match = LINE_END.search(content, position)
    return match.start() if match else len(content)


def lineBreak_length(content: str, position: int) -> int:
    """Length of the line break at position (2 for CRLF, 0 at end of text)"""
    if content.startswith("\r\n", position):
        return 2
    return 1 if position < len(content) else 0


class WhitespacePipeline:
    """
    Ordered whitespace and comment stripping passes

    Each stage is a pure str -> str method and can be run on its own.

    Args:
        inline_tags: Element names after which "> <" keeps its space
                     (defaults to the configured list)
    """

    def __init__(self, inline_tags: Optional[List[str]] = None) -> None:
        self.inline_tags: List[str] = list(
            appsettings.inline_tags if inline_tags is None else inline_tags
        )

    @property
    def stages(self) -> List[Callable[[str], str]]:
        return [
            self.scriptCodeComments_strip,
            self.scriptLineComments_strip,
            self.whitespace_collapse,
            self.emptyTagSpaces_remove,
            self.codeTrailingSpace_collapse,
            self.closingTagSpaces_remove,
        ]

    def run(self, content: Optional[str]) -> str:
        """
        Run all six stages in order

        Args:
            content: Template text (None is treated as empty)

        Returns:
            Whitespace-reduced text
        """
        if not content:
            return ""

        def stage_apply(text: str, stage: Callable[[str], str]) -> str:
            result = stage(text)
            LOG(f"{stage.__name__}: {len(text)} -> {len(result)} chars", level=3)
            return result

        return reduce(stage_apply, self.stages, content)

    def scriptCodeComments_strip(self, content: str) -> str:
        """
        Remove commented-out single-line PHP blocks inside <script> bodies

        Matches "//", then "<?php" or "<?=", then " ?>" on the same line. The
        removed span runs to the end of the line, or to the last position on
        the line still inside the script body. A "//" preceded by ":" or a
        backslash is taken for a URL or an escape and kept.

        Example:
            '<script>var a; // <?php echo $b ?> old\\n</script>'
            becomes
            '<script>var a; \\n</script>'
        """
        scanner = TagScanner(content, SCRIPT_TAGS)
        parts: List[str] = []
        pos = 0
        search_from = 0

        while True:
            match = CODE_COMMENT_START.search(content, search_from)
            if not match:
                break
            start = match.start()
            line_end = lineEnd_find(content, start)

            code_open = CODE_OPEN.search(content, match.end(), line_end)
            code_close = CODE_CLOSE.search(content, code_open.end(), line_end) if code_open else None
            end = scanner.protectedEnd_find(code_close.end(), line_end) if code_close else None
            if end is None:
                search_from = start + 1
                continue

            parts.append(content[pos:start])
            pos = search_from = end

        parts.append(content[pos:])
        return "".join(parts)

    def scriptLineComments_strip(self, content: str) -> str:
        """
        Remove "//" line comments inside <script> bodies

        Kept when preceded by ":", a backslash, a quote or another "/"
        (URL, escape, string or regex literal), when followed by a third
        "/", and when the comment wraps a CDATA marker ("//<![CDATA[" and
        "//]]>"). A comment that is alone on its line, or that directly
        follows the <script> opening tag, takes its line break with it.

        Example:
            '<script>// setup\\nvar x=1;</script>'
            becomes
            '<script>var x=1;</script>'
        """
        scanner = TagScanner(content, SCRIPT_TAGS)
        parts: List[str] = []
        pos = 0
        search_from = 0

        while True:
            match = LINE_COMMENT_START.search(content, search_from)
            if not match:
                break
            start = match.start()
            line_end = lineEnd_find(content, start)

            end = scanner.protectedEnd_find(match.end(), line_end)
            if end is None:
                search_from = start + 1
                continue

            if end == line_end and line_end < len(content):
                line_start = max(content.rfind("\n", 0, start), content.rfind("\r", 0, start)) + 1
                prefix = content[line_start:start]
                opener = SCRIPT_OPEN_PREFIX.search(prefix)
                if not prefix.strip(WHITESPACE):
                    start = max(line_start, pos)
                    end = line_end + lineBreak_length(content, line_end)
                elif opener:
                    start = max(line_start + opener.start(1), pos)
                    end = line_end + lineBreak_length(content, line_end)

            parts.append(content[pos:start])
            pos = search_from = end

        parts.append(content[pos:])
        return "".join(parts)

    def whitespace_collapse(self, content: str) -> str:
        """
        Collapse whitespace runs to a single space outside protected bodies

        A run is left alone when it already is a single space, or when it
        ends inside a <textarea>, <pre> or <script> body (tag names matched
        case-insensitively).
        """
        scanner = TagScanner(content, PROTECTED_TAGS, ignore_case=True)

        def collapse(match: re.Match[str]) -> str:
            run = match.group(0)
            if run == " " or scanner.is_protected(match.end()):
                return run
            return " "

        return WHITESPACE_RUN.sub(collapse, content)

    def emptyTagSpaces_remove(self, content: str) -> str:
        """
        Turn "> <" into "><" unless the text before ">" ends with an inline name

        "<span>x</span> <span>y</span>" keeps its space, "<div>x</div> <div>y</div>"
        loses it. The check is a plain suffix test, so "?" covers "?> <".
        """
        inline_tags = tuple(self.inline_tags)

        def remove(match: re.Match[str]) -> str:
            if inline_tags and content.endswith(inline_tags, 0, match.start()):
                return match.group(0)
            return "><"

        return EMPTY_TAG_SPACE.sub(remove, content)

    def codeTrailingSpace_collapse(self, content: str) -> str:
        """
        Reduce whitespace after a "<?php ... ?>" block to one space

        Only for blocks that do not start with echo/print/if/elseif/else
        and contain no "?" before their closing marker. Never reduces to
        zero characters, so the block cannot fuse with following text.
        """
        return CODE_TRAILING_SPACE.sub(r"\1 ", content)

    def closingTagSpaces_remove(self, content: str) -> str:
        """
        Drop whitespace in front of "</"

        Whitespace following "]]>" keeps its first character, and whitespace
        inside a <textarea>, <pre> or <script> body is never touched.
        """
        scanner = TagScanner(content, PROTECTED_TAGS, ignore_case=True)

        def remove(match: re.Match[str]) -> str:
            if scanner.is_protected(match.end()):
                return match.group(0)
            return ""

        return CLOSING_TAG_SPACE.sub(remove, content)
