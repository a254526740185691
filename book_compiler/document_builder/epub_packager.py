"""EPUB Packager Module

Packages book pages into an EPUB archive using ebooklib, one XHTML
document per page.
"""
import hashlib
import html
import io
import re
import uuid
from typing import Optional, Sequence

from ebooklib import epub

from ..compilation_options import CompilationOptions
from ..config import FIXED_MODIFIED_STAMP
from ..utils import format_file_size
from .archive_utils import normalize_zip

DEFAULT_CSS = b"""
body { font-family: Georgia, "Times New Roman", serif; line-height: 1.5; margin: 1em; }
h1, h2, h3, h4, h5, h6 { margin-top: 1.2em; }
p { margin: 0.5em 0; }
.page-image { text-align: center; margin: 1em 0; }
.page-image img { max-width: 100%; }
"""

_MODIFIED_RE = re.compile(rb'(<meta property="dcterms:modified">)[^<]*(</meta>)')


def _pin_modified_stamp(name: str, content: bytes) -> bytes:
    if not name.endswith(".opf"):
        return content
    return _MODIFIED_RE.sub(
        rb"\g<1>" + FIXED_MODIFIED_STAMP.encode("ascii") + rb"\g<2>", content
    )


def book_identifier(title: str, pages: Sequence = ()) -> str:
    """
    Stable EPUB identifier derived from the title and the page contents.

    Two books sharing a title get different identifiers unless their pages
    (number, content and image, in page order) are identical too.
    """
    digest = hashlib.sha256((title or "").encode("utf-8"))
    for page in sorted(pages, key=lambda page: page.page_number):
        digest.update(f"\x00{page.page_number}\x00{page.content or ''}\x00{page.image_url or ''}".encode("utf-8"))
    return f"urn:uuid:{uuid.uuid5(uuid.NAMESPACE_URL, digest.hexdigest())}"


def page_markup(content: Optional[str], image_url: Optional[str]) -> str:
    """
    Build the XHTML body of one page document.

    The page markup is kept as-is; an image, when present, is appended as a
    centered block. An empty page yields an empty paragraph.
    """
    markup = content if content and content.strip() else "<p></p>"
    if image_url:
        src = html.escape(image_url, quote=True)
        markup += f'<div class="page-image" style="text-align: center;"><img src="{src}" alt="" /></div>'
    return markup


class EPUBPackager:
    """Builds the EPUB artifact for a book."""

    def __init__(self, options: Optional[CompilationOptions] = None):
        self.options = options or CompilationOptions()

    def package(self, title: str, pages: Sequence) -> bytes:
        """
        Package pages into one EPUB buffer.

        Args:
            title: Book title (EPUB metadata)
            pages: Book pages (any order; packaged by ascending page number)

        Returns:
            EPUB archive bytes
        """
        ordered = sorted(pages, key=lambda page: page.page_number)

        book = epub.EpubBook()
        book.set_identifier(book_identifier(title, ordered))
        book.set_title(title)
        book.set_language(self.options.language)
        book.add_author(self.options.platform_name)
        book.add_metadata("DC", "publisher", self.options.platform_name)

        style = epub.EpubItem(
            uid="style",
            file_name="style/default.css",
            media_type="text/css",
            content=DEFAULT_CSS,
        )
        book.add_item(style)

        chapters = []
        for page in ordered:
            chapter = epub.EpubHtml(
                uid=f"page_{page.page_number}",
                title=f"Page {page.page_number}",
                file_name=f"page_{page.page_number}.xhtml",
                lang=self.options.language,
            )
            chapter.content = page_markup(page.content, page.image_url)
            chapter.add_item(style)
            book.add_item(chapter)
            chapters.append(chapter)

        book.toc = chapters
        book.spine = ["nav"] + chapters
        book.add_item(epub.EpubNcx())
        book.add_item(epub.EpubNav())

        buffer = io.BytesIO()
        epub.write_epub(buffer, book, {})

        data = normalize_zip(buffer.getvalue(), transform=_pin_modified_stamp)
        print(f"DEBUG: Packaged EPUB with {len(chapters)} pages ({format_file_size(len(data))})")
        return data


def package_epub(title: str, pages: Sequence, options: Optional[CompilationOptions] = None) -> bytes:
    """Helper function to package an EPUB with default options."""
    return EPUBPackager(options).package(title, pages)
