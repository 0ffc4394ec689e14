"""
Code-aware comment stripping for embedded PHP

Tokenizes a template with the Pygments PHP lexer and drops single-line
comments ("// ..." and "# ...") from the PHP regions. Markup outside
<?php ... ?> comes through as opaque text and is never modified here.

Raw (heredoc-style) blocks are stashed before lexing and reported back as
delayed blocks: they stay as placeholders in the returned text until the
caller has finished its own passes. Heredocs the letters-only stash does not
take (nowdocs, quoted or underscored identifiers) are recognized by the lexer
and delayed the same way.

The transformer never raises on bad input. Code it cannot follow (error
tokens, unbalanced brackets, a heredoc opener without closer, nesting
beyond the configured limit) yields a TransformErr so the caller can fall
back to a text-only strategy.
"""

from typing import List, Optional

from pygments.lexers import PhpLexer
from pygments.token import Comment, Error, Operator, Punctuation, String

from ..config import appsettings, AppSettings
from ..models.minifier import TransformErr, TransformFailure, TransformOk, TransformResult
from .log import LOG
from .rawblocks import rawblocks_extract


BRACKET_PAIRS = {")": "(", "]": "[", "}": "{"}
CODE_CLOSE = "?>"
HEREDOC_OPEN = "<<<"


class CodeCommentTransformer:
    """
    Remove single-line PHP comments from a template

    Args:
        settings: Settings providing the placeholder marker and nesting limit

    Example:
        >>> result = CodeCommentTransformer().transform("<?php $a = 1; // one\\n?>")
        >>> result.text
        '<?php $a = 1; \\n?>'
    """

    def __init__(self, settings: AppSettings = appsettings) -> None:
        self.settings = settings
        self.lexer = PhpLexer(startinline=False, funcnamehighlighting=False)

    def transform(self, text: str) -> TransformResult:
        """
        Strip single-line comments from PHP regions

        Args:
            text: Full template content

        Returns:
            TransformOk with the stripped text and the stashed raw blocks, or
            TransformErr when the PHP code could not be followed
        """
        stashed = rawblocks_extract(text, self.settings)
        source = stashed.content

        # The lexer only recognizes a line comment by its line break
        terminated = source.endswith("\n")
        if not terminated:
            source += "\n"

        parts: List[str] = []
        brackets: List[str] = []
        blocks: List[str] = list(stashed.blocks)
        heredoc: Optional[List[str]] = None
        delimiters = 0
        offset = 0

        while offset < len(source):
            restart = None
            for index, token, value in self.lexer.get_tokens_unprocessed(source[offset:]):
                if token in Error:
                    return TransformErr(
                        TransformFailure.UNPARSEABLE,
                        f"unexpected {value!r} at offset {offset + index}",
                    )

                if heredoc is not None:
                    # <<< [quote] ID body ID [;] : the trailing ";" belongs to the block
                    if delimiters < 2 or (token in Punctuation and value == ";"):
                        heredoc.append(value)
                        if token in String.Delimiter:
                            delimiters += 1
                        continue
                    parts.append(self.rawBlock_delay("".join(heredoc), blocks))
                    heredoc = None
                    delimiters = 0

                if token is String and value == HEREDOC_OPEN:
                    heredoc = [value]
                    continue

                if token in Operator and HEREDOC_OPEN in value:
                    return TransformErr(
                        TransformFailure.UNPARSEABLE,
                        f"unterminated heredoc at offset {offset + index}",
                    )

                if token in Comment.Single:
                    close = value.find(CODE_CLOSE)
                    if close >= 0:
                        # "?>" ends the comment and the PHP region; resume in markup
                        restart = offset + index + close
                        break
                    parts.append(value[len(value.rstrip("\r\n")):])
                    continue

                if token in Punctuation:
                    for char in value:
                        if char in "([{":
                            brackets.append(char)
                            if len(brackets) > self.settings.max_nesting_level:
                                return TransformErr(
                                    TransformFailure.NESTING_TOO_DEEP,
                                    f"nesting deeper than {self.settings.max_nesting_level}",
                                )
                        elif char in BRACKET_PAIRS:
                            if not brackets or brackets.pop() != BRACKET_PAIRS[char]:
                                return TransformErr(
                                    TransformFailure.UNPARSEABLE,
                                    f"unbalanced {char!r} at offset {offset + index}",
                                )

                parts.append(value)

            if restart is None:
                break
            offset = restart

        if brackets:
            return TransformErr(TransformFailure.UNPARSEABLE, f"unclosed {brackets[-1]!r}")

        result = "".join(parts)
        if not terminated:
            result = result[:-1]

        LOG(
            f"Stripped PHP comments: {len(source)} -> {len(result)} chars, "
            f"{len(blocks)} delayed raw blocks",
            level=3,
        )
        return TransformOk(text=result, delayed_blocks=blocks)

    def rawBlock_delay(self, block: str, blocks: List[str]) -> str:
        """Record a lexed heredoc and return the placeholder standing in for it"""
        blocks.append(block)
        return self.settings.placeHolder_make(len(blocks) - 1)
