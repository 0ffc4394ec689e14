"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PHTMLMIN_ prefix (e.g., PHTMLMIN_MAX_NESTING_LEVEL=500).

List settings are given as JSON (e.g., PHTMLMIN_INLINE_TAGS='["a", "span"]').
Settings can also be loaded from a .env file in the project root.
"""

import re
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Inline HTML elements: a single space after one of these is visible
DEFAULT_INLINE_TAGS: List[str] = [
    "b",
    "big",
    "i",
    "small",
    "tt",
    "abbr",
    "acronym",
    "cite",
    "code",
    "dfn",
    "em",
    "kbd",
    "strong",
    "samp",
    "var",
    "a",
    "bdo",
    "br",
    "img",
    "map",
    "object",
    "q",
    "span",
    "sub",
    "sup",
    "button",
    "input",
    "label",
    "select",
    "textarea",
    "?",
]


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PHTMLMIN_ prefix.

    Examples:
        PHTMLMIN_PLACEHOLDER_MARKER=__STASHED_BLOCK__
        PHTMLMIN_MATERIALIZATION_DIR=var/cache/templates
        PHTMLMIN_MAX_NESTING_LEVEL=500
    """

    model_config = SettingsConfigDict(
        env_prefix="PHTMLMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Raw block configuration
    placeholder_marker: str = Field(
        default="__MINIFIED_HEREDOC__",
        description="Prefix for raw block placeholders (must lex as a PHP identifier)",
    )

    # Whitespace pipeline configuration
    inline_tags: List[str] = Field(
        default_factory=lambda: list(DEFAULT_INLINE_TAGS),
        description="Element names after which a '> <' boundary keeps its space",
    )

    # Code transformer configuration
    max_nesting_level: int = Field(
        default=3000,
        description="Bracket nesting depth above which comment stripping falls back",
    )

    # Cache configuration
    materialization_dir: str = Field(
        default="var/view_preprocessed",
        description="Directory (relative to the root) holding minified templates",
    )

    template_glob: str = Field(
        default="**/*.phtml",
        description="Glob pattern selecting templates to minify from the CLI",
    )

    def placeHolder_make(self, index: int) -> str:
        """
        Generate a placeholder string for a stashed raw block at given index.

        Args:
            index: Zero-based index of the raw block in discovery order

        Returns:
            Placeholder string (e.g., "__MINIFIED_HEREDOC__0")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make(0)
            '__MINIFIED_HEREDOC__0'
        """
        return f"{self.placeholder_marker}{index}"

    def placeHolder_pattern(self) -> "re.Pattern[str]":
        """Compiled pattern matching any placeholder, index in group 1"""
        return re.compile(re.escape(self.placeholder_marker) + r"(\d+)")

    def blockIndex_extract(self, placeholder: str) -> int | None:
        """
        Extract raw block index from a placeholder string.

        Args:
            placeholder: Placeholder string to parse

        Returns:
            Block index if valid placeholder, None otherwise

        Example:
            >>> settings = AppSettings()
            >>> settings.blockIndex_extract('__MINIFIED_HEREDOC__3')
            3
        """
        if not placeholder.startswith(self.placeholder_marker):
            return None

        content = placeholder[len(self.placeholder_marker):]

        try:
            return int(content)
        except ValueError:
            return None


# Singleton instance - import this in your code
appsettings = AppSettings()
