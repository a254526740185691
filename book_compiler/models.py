"""Domain Models

Read-only inputs (Book, Page) consumed by the compiler, and the
CompiledArtifact produced by each format packager.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import FORMAT_PDF
from .exceptions import InvalidPageError
from .utils import content_type_for


def _pick(record: Dict[str, Any], *keys, default=None):
    """Return the first present key of a store record (camelCase or snake_case)."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


@dataclass(frozen=True)
class Page:
    """One unit of book content (not a physical PDF page).

    Attributes:
        page_number: Positive integer, unique within a book; defines reading order
        content: Semi-structured markup (paragraphs, headings h1-h6)
        image_url: Optional remote image reference
        id: Optional store identifier
    """

    page_number: int
    content: str = ""
    image_url: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        """Validate page number and normalise empty fields."""
        if isinstance(self.page_number, bool) or not isinstance(self.page_number, int):
            raise InvalidPageError(
                f"page_number must be an integer, got {self.page_number!r}"
            )
        if self.page_number < 1:
            raise InvalidPageError(
                f"page_number must be positive, got {self.page_number}"
            )
        # frozen dataclass: normalise through object.__setattr__
        if self.content is None:
            object.__setattr__(self, "content", "")
        if not self.image_url:
            object.__setattr__(self, "image_url", None)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Page":
        """Build a Page from a page store record.

        Accepts both the store's camelCase keys ({id, pageNumber, content, imageUrl})
        and snake_case keys.
        """
        page_number = _pick(record, "pageNumber", "page_number")
        if page_number is None:
            raise InvalidPageError(f"Page record has no page number: {record!r}")
        return cls(
            page_number=int(page_number),
            content=_pick(record, "content", default=""),
            image_url=_pick(record, "imageUrl", "image_url"),
            id=_pick(record, "id"),
        )


@dataclass
class Book:
    """Book record as seen by the compiler.

    Attributes:
        id: Book identifier (used in artifact paths)
        title: Book title (PDF title page, EPUB/DOCX metadata)
        format: Requested export format: "PDF", "EPUB" or "DOCX"
        page_size: Page size token: "A4", "A5", "Letter" or "Custom"
        status: Book status owned by the repository ("draft", "generating", "completed")
        pdf_url / epub_url / docx_url: Persisted artifact URLs
    """

    id: Any
    title: str
    format: str = FORMAT_PDF
    page_size: str = "A4"
    status: str = "draft"
    pdf_url: Optional[str] = None
    epub_url: Optional[str] = None
    docx_url: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Book":
        """Build a Book from a book store record (camelCase or snake_case keys)."""
        return cls(
            id=_pick(record, "id"),
            title=_pick(record, "title", default=""),
            format=_pick(record, "format", default=FORMAT_PDF),
            page_size=_pick(record, "pageSize", "page_size", default="A4"),
            status=_pick(record, "status", default="draft"),
            pdf_url=_pick(record, "pdfUrl", "pdf_url"),
            epub_url=_pick(record, "epubUrl", "epub_url"),
            docx_url=_pick(record, "docxUrl", "docx_url"),
        )


@dataclass(frozen=True)
class CompiledArtifact:
    """A complete compiled byte buffer in one export format."""

    name: str
    format: str  # "pdf", "epub" or "docx"
    data: bytes

    @property
    def content_type(self) -> str:
        """MIME type of the artifact."""
        return content_type_for(self.format)

    @property
    def size(self) -> int:
        return len(self.data)
