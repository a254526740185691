"""Tests for word wrapping, pagination and placement in the text flow engine.

Pages are 300x400pt with 50pt margins and a fixed-width font of 10pt per
character, so every line holds at most 20 characters.
"""
import pytest

from book_compiler.document_builder.content_adapter import Heading, ImageRef, Paragraph
from book_compiler.document_builder.text_flow import (
    HEADING,
    IMAGE,
    PAGE_NUMBER,
    TEXT,
    TITLE,
    TextFlowEngine,
    layout,
)

WIDTH = 300
HEIGHT = 400
MARGIN = 50
FONT_SIZE = 10
IMAGE_URL = "https://img.example.com/cat.png"


@pytest.fixture
def engine(metrics):
    return TextFlowEngine(WIDTH, HEIGHT, MARGIN, metrics, font_size=FONT_SIZE)


def all_lines(pages):
    return [cmd.text for page in pages for cmd in page.commands_of(TEXT)]


class TestWordWrap:
    """Tests for greedy word wrapping."""

    def test_wraps_at_content_width(self, engine):
        """Should break before the word that overflows the line."""
        pages = engine.layout([Paragraph("aaaa bbbb cccc dddd eeee")])

        assert all_lines(pages) == ["aaaa bbbb cccc dddd", "eeee"]

    def test_lines_start_at_top_margin(self, engine):
        """Should place lines at the left margin, one line height apart."""
        lines = engine.layout([Paragraph("aaaa bbbb cccc dddd eeee")])[0].commands_of(TEXT)

        assert (lines[0].x, lines[0].y) == (MARGIN, HEIGHT - MARGIN)
        assert lines[1].y == pytest.approx(HEIGHT - MARGIN - 1.2 * FONT_SIZE)

    def test_no_line_exceeds_max_width(self, engine, metrics):
        """Should never emit a line wider than the content box."""
        text = " ".join(["lorem", "ipsum", "dolorsitametconsectetur", "adipiscing", "elit"] * 10)
        pages = engine.layout([Paragraph(text)])

        for line in all_lines(pages):
            assert metrics.string_width(line, FONT_SIZE) <= WIDTH - 2 * MARGIN

    def test_overlong_word_is_split(self, engine):
        """Should hard-split a word wider than the content box."""
        pages = engine.layout([Paragraph("x" * 45)])

        assert all_lines(pages) == ["x" * 20, "x" * 20, "x" * 5]

    def test_word_order_preserved(self, engine):
        """Should keep every word in its original order."""
        words = [f"w{i}" for i in range(200)]
        pages = engine.layout([Paragraph(" ".join(words))])

        assert " ".join(all_lines(pages)).split() == words


class TestPagination:
    """Tests for physical page breaks."""

    def test_new_page_below_bottom_margin(self, engine):
        """Should start a new page once the cursor drops below the margin."""
        # 15-character words never share a 20-character line
        words = [f"word{i:011d}" for i in range(30)]
        pages = engine.layout([Paragraph(" ".join(words))])

        assert len(pages) == 2
        assert len(pages[0].commands_of(TEXT)) == 26
        assert len(pages[1].commands_of(TEXT)) == 4
        assert pages[1].commands_of(TEXT)[0].y == HEIGHT - MARGIN

    def test_no_text_below_bottom_margin(self, engine):
        """Should keep every text line at or above the bottom margin."""
        pages = engine.layout([Paragraph(" ".join(["word"] * 500))])

        for page in pages:
            for cmd in page.commands_of(TEXT):
                assert cmd.y >= MARGIN

    def test_page_numbers_run_continuously(self, engine):
        """Should number physical pages from first_page_number."""
        words = [f"word{i:011d}" for i in range(60)]
        pages = engine.layout([Paragraph(" ".join(words))], first_page_number=5)

        numbers = [page.commands_of(PAGE_NUMBER)[0].text for page in pages]
        assert numbers == ["5", "6", "7"]

    def test_page_number_position(self, engine):
        """Should draw one page number per page at bottom-center."""
        page = engine.layout([Paragraph("hello")])[0]
        numbers = page.commands_of(PAGE_NUMBER)

        assert len(numbers) == 1
        assert (numbers[0].x, numbers[0].y) == (WIDTH / 2, MARGIN / 2)

    def test_empty_blocks_yield_one_page(self, engine):
        """Should still produce one numbered page with no content."""
        pages = engine.layout([])

        assert len(pages) == 1
        assert [cmd.kind for cmd in pages[0].commands] == [PAGE_NUMBER]


class TestTitleAndHeadings:
    """Tests for title and heading placement."""

    def test_title_on_first_page(self, engine):
        """Should draw the title at double size and advance three lines."""
        pages = engine.layout([Paragraph("body")], title="My Book")
        title = pages[0].commands_of(TITLE)[0]
        first_line = pages[0].commands_of(TEXT)[0]

        assert title.text == "My Book"
        assert title.font_size == 2 * FONT_SIZE
        assert (title.x, title.y) == (MARGIN, HEIGHT - MARGIN)
        assert first_line.y == pytest.approx(HEIGHT - MARGIN - 3 * 1.2 * FONT_SIZE)

    def test_title_only_once(self, engine):
        """Should not repeat the title on later pages."""
        words = [f"word{i:011d}" for i in range(60)]
        pages = engine.layout([Paragraph(" ".join(words))], title="My Book")

        titles = [cmd for page in pages for cmd in page.commands_of(TITLE)]
        assert len(titles) == 1

    @pytest.mark.parametrize("level, expected", [(1, 15.0), (2, 13.0), (3, 11.0), (6, 5.0)])
    def test_heading_font_size(self, engine, level, expected):
        """Should shrink headings by 0.2x body size per level."""
        assert engine.heading_font_size(level) == pytest.approx(expected)

    def test_heading_advances_two_lines(self, engine):
        """Should place the body two line heights below a heading."""
        page = engine.layout([Heading(1, "Chapter"), Paragraph("body")])[0]
        heading = page.commands_of(HEADING)[0]
        line = page.commands_of(TEXT)[0]

        assert heading.font_size == pytest.approx(15.0)
        assert line.y == pytest.approx(heading.y - 2 * 1.2 * FONT_SIZE)


class TestImages:
    """Tests for fixed-slot image placement."""

    def test_image_slot(self, engine):
        """Should draw images at half size, centered, above the bottom margin."""
        page = engine.layout([ImageRef(IMAGE_URL)], image_sizes={IMAGE_URL: (200, 100)})[0]
        image = page.commands_of(IMAGE)[0]

        assert (image.width, image.height) == (100, 50)
        assert image.x == WIDTH / 2 - 50
        assert image.y == 2 * MARGIN
        assert image.image_url == IMAGE_URL

    def test_missing_image_is_skipped(self, engine):
        """Should emit nothing for an image that failed to fetch."""
        page = engine.layout([ImageRef(IMAGE_URL)], image_sizes={})[0]

        assert page.commands_of(IMAGE) == []
        assert not page.has_image

    def test_one_image_per_page(self, engine):
        """Should draw at most one image per physical page."""
        other = "https://img.example.com/dog.png"
        page = engine.layout(
            [ImageRef(IMAGE_URL), ImageRef(other)],
            image_sizes={IMAGE_URL: (200, 100), other: (100, 100)},
        )[0]

        assert len(page.commands_of(IMAGE)) == 1


class TestLayoutHelper:
    """Tests for the module-level layout() helper."""

    def test_matches_engine(self, metrics):
        """Should produce the same layout as a TextFlowEngine."""
        blocks = [Heading(2, "H"), Paragraph("aaaa bbbb cccc dddd eeee")]
        engine = TextFlowEngine(WIDTH, HEIGHT, MARGIN, metrics, font_size=FONT_SIZE)

        assert layout(blocks, WIDTH, HEIGHT, MARGIN, metrics, font_size=FONT_SIZE) == engine.layout(blocks)
