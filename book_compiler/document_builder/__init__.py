"""Document Builder Package

This package provides the components that turn book pages into export artifacts:

Core Classes:
- PDFRenderer: Paginated PDF output (from pdf_renderer.py)
- EPUBPackager: EPUB archive output
- DOCXPackager: Word document output
- TextFlowEngine: Word wrapping and pagination for the PDF
- FontManager: Serif font registration and text metrics
- ImageFetcher: Remote page image retrieval

Utilities:
- content_adapter: Page markup normalisation into layout blocks
- page_geometry: Page size resolution and placement helpers
- archive_utils: Deterministic ZIP re-packing

Helper Functions:
- render_pdf: Render a PDF with default collaborators
- package_epub: Package an EPUB with default options
- package_docx: Package a DOCX with default options
"""

# Import core classes
from .pdf_renderer import PDFRenderer, render_pdf
from .epub_packager import EPUBPackager, package_epub
from .docx_packager import DOCXPackager, package_docx
from .text_flow import TextFlowEngine, PageLayout, DrawCommand, layout
from .font_manager import FontManager
from .image_fetcher import ImageFetcher, FetchedImage, image_kind
from .content_adapter import Heading, Paragraph, ImageRef, normalize, normalize_page
from . import content_adapter
from . import page_geometry
from . import archive_utils

# Expose public API
__all__ = [
    # Format builders
    'PDFRenderer',
    'EPUBPackager',
    'DOCXPackager',

    # Helper functions
    'render_pdf',
    'package_epub',
    'package_docx',
    'layout',
    'normalize',
    'normalize_page',
    'image_kind',

    # Component classes
    'TextFlowEngine',
    'PageLayout',
    'DrawCommand',
    'FontManager',
    'ImageFetcher',
    'FetchedImage',
    'Heading',
    'Paragraph',
    'ImageRef',

    # Utility modules
    'content_adapter',
    'page_geometry',
    'archive_utils',
]
