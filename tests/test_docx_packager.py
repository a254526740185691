"""Tests for DOCX packaging."""
import io
import zipfile

import pytest
from docx import Document

from book_compiler.document_builder.docx_packager import DOCXPackager
from book_compiler.models import Page


@pytest.fixture
def pages():
    return [
        Page(2, "<p>Second body</p>"),
        Page(1, "<h2>Chapter One</h2><p>First   body</p>", "https://img.example.com/cat.png"),
    ]


def read_docx(data: bytes):
    return Document(io.BytesIO(data))


def has_page_break(paragraph) -> bool:
    return 'w:type="page"' in paragraph._p.xml


class TestPackage:
    """Tests for DOCXPackager.package()."""

    def test_structure(self, pages):
        """Should write title, page headings, extracted headings and bodies in order."""
        doc = read_docx(DOCXPackager().package("My Book", pages))
        content = [(p.style.name, p.text) for p in doc.paragraphs if not has_page_break(p)]

        assert content == [
            ("Title", "My Book"),
            ("Heading 1", "Page 1"),
            ("Heading 2", "Chapter One"),
            ("Normal", "First body"),
            ("Heading 1", "Page 2"),
            ("Normal", "Second body"),
        ]

    def test_page_breaks_between_pages(self, pages):
        """Should separate pages with one explicit page break."""
        doc = read_docx(DOCXPackager().package("My Book", pages))

        assert sum(1 for p in doc.paragraphs if has_page_break(p)) == 1

    def test_empty_page_keeps_empty_body(self):
        """Should emit an empty body paragraph when the page has no text."""
        doc = read_docx(DOCXPackager().package("Book", [Page(1, "")]))

        assert [p.text for p in doc.paragraphs] == ["Book", "Page 1", ""]

    def test_images_not_embedded(self, pages):
        """Should not embed page images."""
        archive = zipfile.ZipFile(io.BytesIO(DOCXPackager().package("My Book", pages)))

        assert not any(name.startswith("word/media/") for name in archive.namelist())

    def test_core_properties(self, pages):
        """Should set title, author and description metadata."""
        props = read_docx(DOCXPackager().package("My Book", pages)).core_properties

        assert props.title == "My Book"
        assert props.author == "Prompt2Book"
        assert props.comments == "Generated by Prompt2Book"

    def test_deterministic_output(self, pages):
        """Should produce byte-identical packages for identical input."""
        packager = DOCXPackager()

        assert packager.package("My Book", pages) == packager.package("My Book", pages)
