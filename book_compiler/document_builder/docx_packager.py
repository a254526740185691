"""DOCX Packager Module

Packages book pages into a Word document using python-docx:
- Title paragraph
- Per page: "Page N" heading, extracted headings, one plain-text body run
- Explicit page breaks between pages
"""
import io
from datetime import datetime
from typing import Optional, Sequence

from docx import Document

from ..compilation_options import CompilationOptions
from ..utils import format_file_size
from .archive_utils import normalize_zip
from .content_adapter import normalize_page, split_blocks

FIXED_TIMESTAMP = datetime(2000, 1, 1, 0, 0, 0)


class DOCXPackager:
    """Builds the DOCX artifact for a book.

    Images are not embedded in the DOCX output.
    """

    def __init__(self, options: Optional[CompilationOptions] = None):
        self.options = options or CompilationOptions()

    def package(self, title: str, pages: Sequence) -> bytes:
        """
        Package pages into one DOCX buffer.

        Args:
            title: Book title (title paragraph and core properties)
            pages: Book pages (any order; packaged by ascending page number)

        Returns:
            DOCX package bytes
        """
        ordered = sorted(pages, key=lambda page: page.page_number)

        doc = Document()
        self._set_properties(doc, title)

        doc.add_heading(title, level=0)

        for index, page in enumerate(ordered):
            if index > 0:
                doc.add_page_break()

            doc.add_heading(f"Page {page.page_number}", level=1)

            headings, body, _ = split_blocks(normalize_page(page))
            for heading in headings:
                doc.add_heading(heading.text, level=heading.level)

            # One body paragraph per page, empty when the page has no text
            paragraph = doc.add_paragraph()
            paragraph.add_run(body)

        buffer = io.BytesIO()
        doc.save(buffer)

        data = normalize_zip(buffer.getvalue())
        print(f"DEBUG: Packaged DOCX with {len(ordered)} pages ({format_file_size(len(data))})")
        return data

    def _set_properties(self, doc, title: str):
        props = doc.core_properties
        props.title = title
        props.author = self.options.platform_name
        props.last_modified_by = self.options.platform_name
        props.comments = f"Generated by {self.options.platform_name}"
        props.revision = 1
        props.created = FIXED_TIMESTAMP
        props.modified = FIXED_TIMESTAMP
        props.last_printed = FIXED_TIMESTAMP


def package_docx(title: str, pages: Sequence, options: Optional[CompilationOptions] = None) -> bytes:
    """Helper function to package a DOCX with default options."""
    return DOCXPackager(options).package(title, pages)
