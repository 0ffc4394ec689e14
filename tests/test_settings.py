"""
Settings tests - defaults, environment overrides and placeholder helpers
"""

from phtmlmin.config import AppSettings, DEFAULT_INLINE_TAGS


class TestDefaults:
    """Test default configuration"""

    def test_defaults(self):
        """Out of the box values"""
        settings = AppSettings()

        assert settings.placeholder_marker == "__MINIFIED_HEREDOC__"
        assert settings.max_nesting_level == 3000
        assert settings.materialization_dir == "var/view_preprocessed"
        assert settings.template_glob == "**/*.phtml"

    def test_inline_tags(self):
        """Inline list holds inline elements and the PHP close marker"""
        settings = AppSettings()

        assert "span" in settings.inline_tags
        assert "?" in settings.inline_tags
        assert "div" not in settings.inline_tags

    def test_inline_tags_not_shared(self):
        """Each instance gets its own list"""
        settings = AppSettings()
        settings.inline_tags.append("div")

        assert "div" not in DEFAULT_INLINE_TAGS
        assert "div" not in AppSettings().inline_tags


class TestEnvironment:
    """Test PHTMLMIN_ environment overrides"""

    def test_scalar_override(self, monkeypatch):
        """Scalar settings come from the environment"""
        monkeypatch.setenv("PHTMLMIN_MAX_NESTING_LEVEL", "10")
        monkeypatch.setenv("PHTMLMIN_MATERIALIZATION_DIR", "var/cache")

        settings = AppSettings()

        assert settings.max_nesting_level == 10
        assert settings.materialization_dir == "var/cache"

    def test_list_override(self, monkeypatch):
        """List settings are read as JSON"""
        monkeypatch.setenv("PHTMLMIN_INLINE_TAGS", '["a", "span"]')

        assert AppSettings().inline_tags == ["a", "span"]


class TestPlaceholders:
    """Test placeholder generation and parsing"""

    def test_make(self):
        """Marker followed by the decimal index"""
        settings = AppSettings()

        assert settings.placeHolder_make(0) == "__MINIFIED_HEREDOC__0"
        assert settings.placeHolder_make(12) == "__MINIFIED_HEREDOC__12"

    def test_extract(self):
        """Index parsed back, anything else rejected"""
        settings = AppSettings()

        assert settings.blockIndex_extract("__MINIFIED_HEREDOC__3") == 3
        assert settings.blockIndex_extract("__MINIFIED_HEREDOC__x") is None
        assert settings.blockIndex_extract("__OTHER__3") is None

    def test_pattern(self):
        """Pattern finds every placeholder with its index"""
        pattern = AppSettings(placeholder_marker="__RAW.").placeHolder_pattern()

        assert [m.group(1) for m in pattern.finditer("__RAW.1 __RAWx2 __RAW.10")] == ["1", "10"]
