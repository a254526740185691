"""Tests for serif font selection and text measuring."""
import os

import pytest

import book_compiler
from book_compiler.document_builder.font_manager import FontManager


class TestFontSelection:
    """Tests for FontManager font registration."""

    def test_default_is_times_roman(self):
        """Should use the built-in Times-Roman without a Unicode font."""
        assert FontManager().font_name == "Times-Roman"

    def test_only_system_font_paths(self):
        """Should only look for fonts at absolute system paths."""
        package_dir = os.path.dirname(os.path.dirname(os.path.abspath(book_compiler.__file__)))

        for path in FontManager.SERIF_FONT_PATHS:
            assert os.path.isabs(path)
            assert not os.path.abspath(path).startswith(package_dir)

    def test_falls_back_when_no_font_installed(self, monkeypatch):
        """Should keep Times-Roman when no serif font file exists."""
        monkeypatch.setattr(os.path, "exists", lambda path: False)

        assert FontManager(unicode_font=True).font_name == "Times-Roman"


class TestStringWidth:
    """Tests for FontManager.string_width()."""

    def test_width_scales_with_size(self):
        """Should measure wider text at a larger font size."""
        fonts = FontManager()

        assert fonts.string_width("word", 24) == pytest.approx(2 * fonts.string_width("word", 12))
        assert fonts.string_width("", 12) == 0
