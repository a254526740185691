"""Tests for page size resolution and placement helpers."""
import pytest

from book_compiler.document_builder import page_geometry
from book_compiler.document_builder.page_geometry import PageDimensions


class TestResolve:
    """Tests for resolve()."""

    @pytest.mark.parametrize("token, expected", [
        ("A4", (595.28, 841.89)),
        ("A5", (419.53, 595.28)),
        ("Letter", (612.0, 792.0)),
    ])
    def test_known_sizes(self, token, expected):
        """Should return the fixed dimensions of known tokens."""
        assert page_geometry.resolve(token) == expected

    @pytest.mark.parametrize("token", ["Custom", "B5", "a4", "", None])
    def test_fallback_to_letter(self, token):
        """Should fall back to Letter for Custom and unknown tokens."""
        assert page_geometry.resolve(token) == (612.0, 792.0)

    def test_dimensions_are_positive(self):
        """Should always produce strictly positive dimensions."""
        dims = page_geometry.resolve("A5")

        assert dims.width > 0 and dims.height > 0


class TestPlacement:
    """Tests for content width and placement helpers."""

    def test_content_width(self):
        """Should subtract both margins from the page width."""
        assert page_geometry.content_width(PageDimensions(612, 792), 50) == 512

    def test_centered_x(self):
        """Should center an item horizontally."""
        assert page_geometry.centered_x(PageDimensions(612, 792), 100) == 256.0

    def test_page_number_position(self):
        """Should anchor page numbers at bottom-center inside the margin."""
        assert page_geometry.page_number_position(PageDimensions(612, 792), 50) == (306.0, 25.0)
