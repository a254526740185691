"""Shared fixtures for book compiler tests."""
import io

import pytest
from PIL import Image

from book_compiler.document_builder.image_fetcher import FetchedImage


class FixedWidthMetrics:
    """Every character is `char_width` points wide, regardless of font size."""

    def __init__(self, char_width: float = 10.0):
        self.char_width = char_width

    def string_width(self, text: str, font_size: float) -> float:
        return len(text) * self.char_width


class StubImageFetcher:
    """Image fetcher double returning pre-built images without network access."""

    def __init__(self, images=None):
        self.images = images or {}
        self.requested = []

    def fetch_all(self, urls):
        urls = [url for url in urls if url]
        self.requested.extend(urls)
        return {url: self.images[url] for url in urls if url in self.images}


def make_png(width: int = 40, height: int = 20) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def make_jpeg(width: int = 40, height: int = 20) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (30, 30, 200)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def metrics():
    """Fixed-width font metrics (10pt per character)."""
    return FixedWidthMetrics()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def stub_fetcher():
    """Fetcher with one reachable PNG image."""
    url = "https://img.example.com/cat.png"
    image = FetchedImage(url=url, kind="png", data=make_png(200, 100), width=200, height=100)
    return StubImageFetcher({url: image})
