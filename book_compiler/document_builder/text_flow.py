"""Text Flow Engine Module

Turns layout blocks into positioned draw commands bound to physical pages:
- Greedy word wrapping against the content box width
- Pagination when the cursor drops below the bottom margin
- Fixed-size headings and an oversized title on the first physical page
- Fixed-slot image placement and bottom-center page numbers

Coordinates are ReportLab points with the origin at the bottom-left corner.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import (
    DEFAULT_FONT_SIZE,
    LINE_HEIGHT_FACTOR,
    TITLE_SCALE,
    TITLE_ADVANCE_LINES,
    HEADING_BASE_SCALE,
    HEADING_LEVEL_STEP,
    HEADING_ADVANCE_LINES,
    IMAGE_SCALE,
    IMAGE_SLOT_MARGINS,
)
from .content_adapter import Heading, ImageRef, LayoutBlock, Paragraph
from . import page_geometry


# Draw command kinds
TITLE = "title"
HEADING = "heading"
TEXT = "text"
IMAGE = "image"
PAGE_NUMBER = "page_number"


@dataclass
class DrawCommand:
    """One positioned drawing operation on a physical page."""

    kind: str
    x: float
    y: float
    font_size: float = 0.0
    text: str = ""
    image_url: Optional[str] = None
    width: float = 0.0
    height: float = 0.0


@dataclass
class PageLayout:
    """Ordered draw commands for one physical page."""

    number: int
    width: float
    height: float
    commands: List[DrawCommand] = field(default_factory=list)

    @property
    def has_image(self) -> bool:
        return any(command.kind == IMAGE for command in self.commands)

    def commands_of(self, kind: str) -> List[DrawCommand]:
        """Return the commands of one kind, in drawing order."""
        return [command for command in self.commands if command.kind == kind]


@dataclass
class _Cursor:
    pages: List[PageLayout]
    y: float
    next_number: int

    @property
    def page(self) -> PageLayout:
        return self.pages[-1]


class TextFlowEngine:
    """Lays out text, headings and images onto fixed-size physical pages.

    Font metrics are supplied by any object exposing
    ``string_width(text, font_size) -> float`` (see FontManager).
    """

    def __init__(self, page_width: float, page_height: float, margin: float,
                 font_metrics, font_size: float = DEFAULT_FONT_SIZE):
        """
        Initialize the flow engine for one page geometry.

        Args:
            page_width: Physical page width in points
            page_height: Physical page height in points
            margin: Margin on all sides in points
            font_metrics: Object with string_width(text, font_size)
            font_size: Body text font size in points
        """
        self.dimensions = page_geometry.PageDimensions(page_width, page_height)
        self.margin = margin
        self.font_metrics = font_metrics
        self.font_size = font_size
        self.line_height = LINE_HEIGHT_FACTOR * font_size
        self.max_width = page_geometry.content_width(self.dimensions, margin)
        self.top = page_height - margin

    def heading_font_size(self, level: int) -> float:
        """Level 1 is 1.5x body size; each further level shrinks by 0.2x."""
        return self.font_size * (HEADING_BASE_SCALE - (level - 1) * HEADING_LEVEL_STEP)

    def measure(self, text: str) -> float:
        """Width of body text at the configured font size."""
        return self.font_metrics.string_width(text, self.font_size)

    def layout(
        self,
        blocks: Sequence[LayoutBlock],
        image_sizes: Optional[Dict[str, Tuple[float, float]]] = None,
        title: Optional[str] = None,
        first_page_number: int = 1,
    ) -> List[PageLayout]:
        """
        Flow blocks onto one or more physical pages.

        Args:
            blocks: Normalized layout blocks for one book page
            image_sizes: Natural (width, height) of successfully fetched images,
                         keyed by URL. Image blocks whose URL is missing are skipped.
            title: Book title; drawn oversized on the first physical page
            first_page_number: Number printed on the first physical page

        Returns:
            List of PageLayout, one per physical page, each ending with a page number
        """
        cursor = _Cursor(pages=[], y=self.top, next_number=first_page_number)
        self._new_page(cursor)

        if title:
            self._place_title(cursor, title)

        for block in blocks:
            if isinstance(block, Heading):
                self._place_heading(cursor, block)
            elif isinstance(block, Paragraph):
                self._place_paragraph(cursor, block.text)
            elif isinstance(block, ImageRef):
                self._place_image(cursor, block, image_sizes or {})

        for page in cursor.pages:
            x, y = page_geometry.page_number_position(self.dimensions, self.margin)
            page.commands.append(DrawCommand(
                kind=PAGE_NUMBER, x=x, y=y, font_size=self.font_size, text=str(page.number),
            ))
        return cursor.pages

    def _new_page(self, cursor: _Cursor):
        cursor.pages.append(PageLayout(
            number=cursor.next_number,
            width=self.dimensions.width,
            height=self.dimensions.height,
        ))
        cursor.next_number += 1
        cursor.y = self.top

    def _ensure_space(self, cursor: _Cursor):
        """Start a new physical page once the cursor is below the bottom margin."""
        if cursor.y < self.margin:
            self._new_page(cursor)

    def _place_title(self, cursor: _Cursor, title: str):
        cursor.page.commands.append(DrawCommand(
            kind=TITLE, x=self.margin, y=cursor.y,
            font_size=self.font_size * TITLE_SCALE, text=title,
        ))
        cursor.y -= self.line_height * TITLE_ADVANCE_LINES

    def _place_heading(self, cursor: _Cursor, heading: Heading):
        self._ensure_space(cursor)
        cursor.page.commands.append(DrawCommand(
            kind=HEADING, x=self.margin, y=cursor.y,
            font_size=self.heading_font_size(heading.level), text=heading.text,
        ))
        cursor.y -= self.line_height * HEADING_ADVANCE_LINES

    def _emit_line(self, cursor: _Cursor, line: str):
        self._ensure_space(cursor)
        cursor.page.commands.append(DrawCommand(
            kind=TEXT, x=self.margin, y=cursor.y, font_size=self.font_size, text=line,
        ))
        cursor.y -= self.line_height

    def _place_paragraph(self, cursor: _Cursor, text: str):
        """
        Greedy word wrap.

        The next word is appended to the candidate line; when the candidate
        overflows the content width, the line before the word is emitted and
        the word starts the next line.
        """
        line = ""
        for word in self._split_words(text):
            candidate = f"{line} {word}" if line else word
            if line and self.measure(candidate) > self.max_width:
                self._emit_line(cursor, line)
                line = word
            else:
                line = candidate
        if line:
            self._emit_line(cursor, line)

    def _split_words(self, text: str) -> List[str]:
        """Whitespace-delimited words, with overlong words split into fitting chunks."""
        words = []
        for word in text.split():
            if self.measure(word) <= self.max_width:
                words.append(word)
                continue
            chunk = ""
            for char in word:
                if chunk and self.measure(chunk + char) > self.max_width:
                    words.append(chunk)
                    chunk = char
                else:
                    chunk += char
            if chunk:
                words.append(chunk)
        return words

    def _place_image(self, cursor: _Cursor, block: ImageRef, image_sizes: Dict[str, Tuple[float, float]]):
        """Fixed slot above the bottom margin, centered, 50% of natural size; one per page."""
        size = image_sizes.get(block.url)
        if not size or cursor.page.has_image:
            return
        width = size[0] * IMAGE_SCALE
        height = size[1] * IMAGE_SCALE
        cursor.page.commands.append(DrawCommand(
            kind=IMAGE,
            x=page_geometry.centered_x(self.dimensions, width),
            y=self.margin * IMAGE_SLOT_MARGINS,
            image_url=block.url,
            width=width,
            height=height,
        ))


def layout(
    blocks: Sequence[LayoutBlock],
    page_width: float,
    page_height: float,
    margin: float,
    font_metrics,
    font_size: float = DEFAULT_FONT_SIZE,
    image_sizes: Optional[Dict[str, Tuple[float, float]]] = None,
    title: Optional[str] = None,
    first_page_number: int = 1,
) -> List[PageLayout]:
    """
    Helper function to lay out blocks without keeping an engine around.

    Returns:
        List of PageLayout for the given blocks
    """
    engine = TextFlowEngine(page_width, page_height, margin, font_metrics, font_size=font_size)
    return engine.layout(blocks, image_sizes=image_sizes, title=title,
                         first_page_number=first_page_number)
