"""PDF Renderer Module

Renders book pages into a single paginated PDF buffer on a ReportLab canvas.
"""
import io
from typing import Dict, List, Optional, Sequence, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdfcanvas

from ..compilation_options import CompilationOptions
from ..exceptions import RenderingError
from ..utils import format_file_size
from . import page_geometry
from .content_adapter import normalize_page
from .font_manager import FontManager
from .image_fetcher import FetchedImage, ImageFetcher
from .text_flow import (
    HEADING,
    IMAGE,
    PAGE_NUMBER,
    TEXT,
    TITLE,
    DrawCommand,
    PageLayout,
    TextFlowEngine,
)


class PDFRenderer:
    """Builds the PDF artifact for a book.

    This class handles:
    - Page ordering and content normalisation
    - Parallel image fetching ahead of layout
    - Text flow with a continuous physical page counter
    - Drawing the laid-out commands onto a ReportLab canvas

    The canvas runs in invariant mode, so identical input gives
    byte-identical output.
    """

    def __init__(
        self,
        options: Optional[CompilationOptions] = None,
        font_manager: Optional[FontManager] = None,
        image_fetcher: Optional[ImageFetcher] = None,
    ):
        """
        Initialize PDFRenderer.

        Args:
            options: Compilation options (margins, font size, image limits)
            font_manager: Font registration and metrics (created from options if None)
            image_fetcher: Image downloader (created from options if None)
        """
        self.options = options or CompilationOptions()
        self.font_manager = font_manager or FontManager(unicode_font=self.options.unicode_font)
        self.image_fetcher = image_fetcher or ImageFetcher(
            timeout=self.options.image_timeout,
            max_workers=self.options.image_workers,
            max_bytes=self.options.max_image_bytes,
        )

    def render(self, title: str, pages: Sequence, page_size_token: Optional[str]) -> bytes:
        """
        Render pages into one PDF buffer.

        Args:
            title: Book title, drawn on the first physical page only
            pages: Book pages (any order; rendered by ascending page number)
            page_size_token: "A4", "A5", "Letter" or "Custom"

        Returns:
            Complete PDF bytes

        Raises:
            RenderingError: If the canvas cannot be drawn or saved
        """
        dimensions = page_geometry.resolve(page_size_token)
        ordered = sorted(pages, key=lambda page: page.page_number)

        images = self.image_fetcher.fetch_all(page.image_url for page in ordered)
        layouts = self.layout_pages(title, ordered, dimensions, images)

        buffer = io.BytesIO()
        try:
            pdf = pdfcanvas.Canvas(buffer, pagesize=dimensions, invariant=1)
            pdf.setTitle(title)
            pdf.setAuthor(self.options.platform_name)
            pdf.setCreator(self.options.platform_name)

            for layout in layouts:
                self._draw_page(pdf, layout, images)
                pdf.showPage()

            pdf.save()
        except Exception as e:
            raise RenderingError(f"Failed to render PDF: {e}")

        data = buffer.getvalue()
        print(f"DEBUG: Rendered PDF with {len(layouts)} pages ({format_file_size(len(data))})")
        return data

    def layout_pages(
        self,
        title: str,
        ordered_pages: Sequence,
        dimensions: page_geometry.PageDimensions,
        images: Dict[str, FetchedImage],
    ) -> List[PageLayout]:
        """
        Lay out every book page, numbering physical pages continuously.

        A book without pages still gets one physical page carrying the title.
        """
        engine = TextFlowEngine(
            dimensions.width,
            dimensions.height,
            self.options.margin,
            self.font_manager,
            font_size=self.options.font_size,
        )
        image_sizes: Dict[str, Tuple[float, float]] = {
            url: image.size for url, image in images.items()
        }

        if not ordered_pages:
            return engine.layout([], title=title)

        layouts: List[PageLayout] = []
        for index, page in enumerate(ordered_pages):
            layouts.extend(engine.layout(
                normalize_page(page),
                image_sizes=image_sizes,
                title=title if index == 0 else None,
                first_page_number=len(layouts) + 1,
            ))
        return layouts

    def _draw_page(self, pdf, layout: PageLayout, images: Dict[str, FetchedImage]):
        pdf.setPageSize((layout.width, layout.height))
        for command in layout.commands:
            if command.kind in (TITLE, HEADING, TEXT):
                pdf.setFont(self.font_manager.font_name, command.font_size)
                pdf.drawString(command.x, command.y, command.text)
            elif command.kind == PAGE_NUMBER:
                pdf.setFont(self.font_manager.font_name, command.font_size)
                pdf.drawCentredString(command.x, command.y, command.text)
            elif command.kind == IMAGE:
                self._draw_image(pdf, command, images.get(command.image_url))

    def _draw_image(self, pdf, command: DrawCommand, image: Optional[FetchedImage]):
        if image is None:
            return
        try:
            reader = ImageReader(io.BytesIO(image.data))
            pdf.drawImage(
                reader, command.x, command.y,
                width=command.width, height=command.height,
                mask='auto' if image.kind == "png" else None,
            )
        except Exception as e:
            # A corrupt image is omitted like an unreachable one
            print(f"Warning: Could not draw image {command.image_url}: {e}")


def render_pdf(
    title: str,
    pages: Sequence,
    page_size_token: Optional[str],
    options: Optional[CompilationOptions] = None,
) -> bytes:
    """
    Helper function to render a PDF with default collaborators.

    Returns:
        PDF bytes
    """
    return PDFRenderer(options).render(title, pages, page_size_token)
