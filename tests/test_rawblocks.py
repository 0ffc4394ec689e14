"""
Raw block tests - heredoc stashing and restoration

Tests that heredoc-style blocks are swapped for numbered placeholders in
discovery order and spliced back byte-for-byte.
"""

import pytest

from phtmlmin.config import AppSettings
from phtmlmin.lib.rawblocks import rawblocks_extract, rawblocks_restore


class TestExtract:
    """Test locating and stashing raw blocks"""

    def test_single_block(self):
        """A heredoc is replaced by placeholder 0"""
        stashed = rawblocks_extract("<?php $a = <<<EOT\nhello  world\nEOT;\n?>")

        assert stashed.content == "<?php $a = __MINIFIED_HEREDOC__0\n?>"
        assert stashed.blocks == ["<<<EOT\nhello  world\nEOT;"]

    def test_blocks_numbered_in_discovery_order(self):
        """Several heredocs get increasing indexes"""
        source = "<<<ONE\nfirst\nONE;\n<p>x</p>\n<<<TWO\nsecond\nTWO;"
        stashed = rawblocks_extract(source)

        assert stashed.content == "__MINIFIED_HEREDOC__0\n<p>x</p>\n__MINIFIED_HEREDOC__1"
        assert stashed.blocks == ["<<<ONE\nfirst\nONE;", "<<<TWO\nsecond\nTWO;"]

    def test_first_reappearance_closes_block(self):
        """The match is non-greedy: the first closer ends the block"""
        stashed = rawblocks_extract("<<<A\nx\nA;\ny\nA;")

        assert stashed.blocks == ["<<<A\nx\nA;"]
        assert stashed.content == "__MINIFIED_HEREDOC__0\ny\nA;"

    def test_whitespace_before_semicolon(self):
        """Whitespace is allowed between the closing identifier and ';'"""
        stashed = rawblocks_extract("<<<EOT\nx\nEOT \n;")

        assert stashed.blocks == ["<<<EOT\nx\nEOT \n;"]

    def test_identifier_case_insensitive(self):
        """The closing identifier is matched case-insensitively"""
        stashed = rawblocks_extract("<<<eot\nx\nEOT;")

        assert stashed.blocks == ["<<<eot\nx\nEOT;"]

    def test_unclosed_block_left_in_place(self):
        """A heredoc without closer is not stashed"""
        source = "<?php $a = <<<EOT\nno closer here"
        stashed = rawblocks_extract(source)

        assert stashed.content == source
        assert stashed.blocks == []

    def test_identifier_with_digits_not_recognized(self):
        """Only letters-only identifiers open a raw block"""
        source = "<<<EOT1\nx\nEOT1;"
        stashed = rawblocks_extract(source)

        assert stashed.content == source
        assert stashed.blocks == []

    def test_identifier_with_underscore_not_recognized(self):
        """An identifier continued by an underscore is not cut short"""
        source = "<<<EOT_HTML\n$code;\nEOT_HTML;"
        stashed = rawblocks_extract(source)

        assert stashed.content == source
        assert stashed.blocks == []

    @pytest.mark.parametrize("source", ["", None])
    def test_empty_content(self, source):
        """Empty or absent content yields empty content and no blocks"""
        stashed = rawblocks_extract(source)

        assert stashed.content == ""
        assert stashed.blocks == []

    def test_custom_marker(self):
        """Placeholder marker comes from settings"""
        settings = AppSettings(placeholder_marker="__RAW__")
        stashed = rawblocks_extract("<<<X\n1\nX;", settings)

        assert stashed.content == "__RAW__0"


class TestRestore:
    """Test splicing blocks back"""

    def test_restore_after_extract(self):
        """Extract then restore returns the original text"""
        source = "<div>\n<?php echo <<<HTML\n  <b>  spaced  </b>\nHTML;\n?>\n</div>"
        stashed = rawblocks_extract(source)

        assert rawblocks_restore(stashed.content, stashed.blocks) == source

    def test_restore_multidigit_index(self):
        """Index 10 is not confused with index 1"""
        blocks = [f"block{i}" for i in range(11)]
        content = "__MINIFIED_HEREDOC__10 __MINIFIED_HEREDOC__1"

        assert rawblocks_restore(content, blocks) == "block10 block1"

    def test_unknown_index_left_alone(self):
        """A placeholder-looking token without a block is kept"""
        assert rawblocks_restore("x __MINIFIED_HEREDOC__5", ["only"]) == "x __MINIFIED_HEREDOC__5"

    def test_no_blocks(self):
        """Nothing to restore returns content unchanged"""
        assert rawblocks_restore("<p>a</p>", []) == "<p>a</p>"
        assert rawblocks_restore("<p>a</p>", None) == "<p>a</p>"

    def test_block_text_not_rescanned(self):
        """Restored block text containing a marker is not expanded again"""
        blocks = ["<<<A\n__MINIFIED_HEREDOC__1\nA;", "second"]
        content = "__MINIFIED_HEREDOC__0|__MINIFIED_HEREDOC__1"

        assert rawblocks_restore(content, blocks) == "<<<A\n__MINIFIED_HEREDOC__1\nA;|second"

    def test_custom_marker_restored(self):
        """Placeholders built from a configured marker are restored"""
        settings = AppSettings(placeholder_marker="__RAW__")

        assert rawblocks_restore("a __RAW__0 b __RAW__7", ["X"], settings) == "a X b __RAW__7"
