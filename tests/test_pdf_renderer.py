"""Tests for PDF rendering."""
import re

import pytest

from book_compiler.compilation_options import CompilationOptions
from book_compiler.document_builder.pdf_renderer import PDFRenderer
from book_compiler.document_builder.text_flow import IMAGE, PAGE_NUMBER, TITLE
from book_compiler.document_builder import page_geometry
from book_compiler.models import Page
from conftest import StubImageFetcher

IMAGE_URL = "https://img.example.com/cat.png"


def count_pages(data: bytes) -> int:
    return len(re.findall(rb"/Type /Page[^s]", data))


@pytest.fixture
def renderer(stub_fetcher):
    return PDFRenderer(CompilationOptions(), image_fetcher=stub_fetcher)


class TestRender:
    """Tests for PDFRenderer.render()."""

    def test_produces_pdf(self, renderer):
        """Should return a complete PDF buffer."""
        data = renderer.render("My Book", [Page(1, "<p>Hello</p>")], "A4")

        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")
        assert count_pages(data) == 1

    def test_one_physical_page_per_short_page(self, renderer):
        """Should render each short book page on its own physical page."""
        pages = [Page(1, "<p>One</p>"), Page(2, "<p>Two</p>"), Page(3, "<p>Three</p>")]

        assert count_pages(renderer.render("Book", pages, "Letter")) == 3

    def test_long_page_overflows(self, renderer):
        """Should split a long book page over several physical pages."""
        text = " ".join(["paragraph"] * 2000)

        assert count_pages(renderer.render("Book", [Page(1, text)], "A5")) > 1

    def test_deterministic_output(self, renderer):
        """Should produce byte-identical output for identical input."""
        pages = [Page(1, "<h1>Intro</h1><p>Hello world</p>", IMAGE_URL), Page(2, "More")]

        assert renderer.render("Book", pages, "A4") == renderer.render("Book", pages, "A4")

    def test_unreachable_image_omitted(self):
        """Should render the page without its image when the fetch failed."""
        renderer = PDFRenderer(CompilationOptions(), image_fetcher=StubImageFetcher())

        data = renderer.render("Book", [Page(1, "<p>Text</p>", "https://gone.example.com/x.png")], "A4")

        assert count_pages(data) == 1

    def test_no_pages_renders_title_page(self, renderer):
        """Should still produce a one-page PDF without book pages."""
        assert count_pages(renderer.render("Empty", [], "A4")) == 1

    def test_images_fetched_up_front(self, renderer, stub_fetcher):
        """Should request every page image before drawing."""
        renderer.render("Book", [Page(1, "a", IMAGE_URL), Page(2, "b")], "A4")

        assert stub_fetcher.requested == [IMAGE_URL]


class TestLayoutPages:
    """Tests for PDFRenderer.layout_pages()."""

    def test_pages_sorted_and_numbered(self, renderer, stub_fetcher):
        """Should number physical pages continuously across book pages."""
        dims = page_geometry.resolve("A4")
        pages = [Page(1, " ".join(["word"] * 2000)), Page(2, "tail")]

        layouts = renderer.layout_pages("Book", pages, dims, {})

        numbers = [int(layout.commands_of(PAGE_NUMBER)[0].text) for layout in layouts]
        assert numbers == list(range(1, len(layouts) + 1))
        assert len(layouts) >= 3

    def test_title_only_on_first_physical_page(self, renderer):
        """Should draw the title once, on the first physical page."""
        dims = page_geometry.resolve("Letter")
        pages = [Page(1, "one"), Page(2, "two")]

        layouts = renderer.layout_pages("Book", pages, dims, {})

        assert [len(layout.commands_of(TITLE)) for layout in layouts] == [1, 0]

    def test_image_placed_from_fetched_size(self, renderer, stub_fetcher):
        """Should place fetched images at half their natural size."""
        dims = page_geometry.resolve("A4")
        images = stub_fetcher.fetch_all([IMAGE_URL])

        layouts = renderer.layout_pages("Book", [Page(1, "text", IMAGE_URL)], dims, images)

        image = layouts[0].commands_of(IMAGE)[0]
        assert (image.width, image.height) == (100, 50)
