"""Image Fetcher Module

Fetches remote page images for the PDF renderer:
- Image kind sniffing from the URL suffix
- Streaming HTTP GET with a total deadline and size limit
- Natural size decoding with Pillow
- Parallel fetching of all page images
"""
import io
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import requests
from PIL import Image

from ..config import DEFAULT_IMAGE_TIMEOUT, DEFAULT_IMAGE_WORKERS, MAX_IMAGE_SIZE_MB
from ..exceptions import ImageFetchError

CHUNK_SIZE = 8 * 1024

# Pillow format name expected for each sniffed kind
_PIL_FORMATS = {
    "jpeg": "JPEG",
    "png": "PNG",
}


def image_kind(url: Optional[str]) -> Optional[str]:
    """
    Sniff the image kind from the URL suffix.

    The match is a case-sensitive suffix test; query strings or uppercase
    extensions are not recognised.

    Examples:
        >>> image_kind("https://cdn.example.com/cover.jpg")
        'jpeg'
        >>> image_kind("https://cdn.example.com/cover.PNG") is None
        True
    """
    if not url:
        return None
    if url.endswith(".jpg") or url.endswith(".jpeg"):
        return "jpeg"
    if url.endswith(".png"):
        return "png"
    return None


@dataclass(frozen=True)
class FetchedImage:
    """Downloaded image bytes with natural pixel size."""

    url: str
    kind: str
    data: bytes
    width: int
    height: int

    @property
    def size(self):
        return self.width, self.height


class ImageFetcher:
    """Downloads page images over plain HTTP GET.

    Failures never propagate: fetch() returns None and prints a warning.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_IMAGE_TIMEOUT,
        max_workers: int = DEFAULT_IMAGE_WORKERS,
        max_bytes: int = MAX_IMAGE_SIZE_MB * 1024 * 1024,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize ImageFetcher.

        Args:
            timeout: Total time budget per image, in seconds
            max_workers: Number of parallel downloads
            max_bytes: Largest accepted response body
            session: Optional requests session (shared connection pool)
        """
        self.timeout = timeout
        self.max_workers = max_workers
        self.max_bytes = max_bytes
        self.session = session or requests.Session()

    def fetch(self, url: str) -> Optional[FetchedImage]:
        """
        Fetch and decode one image within the total time budget.

        Args:
            url: Remote image URL

        Returns:
            FetchedImage, or None when the image is unsupported, unreachable
            or not complete before the deadline
        """
        return self._fetch_with_deadline([url]).get(url)

    def fetch_all(self, urls: Iterable[Optional[str]]) -> Dict[str, FetchedImage]:
        """
        Fetch unique image URLs in parallel.

        Each worker slot gets the per-image timeout; URLs still in flight
        once the combined budget runs out count as failures and their
        responses are closed.

        Args:
            urls: Image URLs (None and duplicates are ignored)

        Returns:
            Dictionary of successfully fetched images keyed by URL
        """
        unique = sorted({url for url in urls if url})
        if not unique:
            return {}

        images = self._fetch_with_deadline(unique)
        print(f"DEBUG: Fetched {len(images)}/{len(unique)} images")
        return images

    def _fetch_with_deadline(self, urls: List[str]) -> Dict[str, FetchedImage]:
        open_responses: Dict[str, requests.Response] = {}
        lock = threading.Lock()
        budget = self.timeout * math.ceil(len(urls) / self.max_workers)

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        futures = {
            executor.submit(self._fetch_or_none, url, open_responses, lock): url
            for url in urls
        }
        done, pending = wait(futures, timeout=budget)
        # Stragglers keep running in the background; nothing waits for them
        executor.shutdown(wait=False, cancel_futures=True)

        for future in pending:
            url = futures[future]
            print(f"Warning: {ImageFetchError(url, f'timed out after {self.timeout}s')}")
            with lock:
                response = open_responses.pop(url, None)
            if response is not None:
                response.close()

        images = {}
        for future in done:
            image = future.result()
            if image is not None:
                images[futures[future]] = image
        return images

    def _fetch_or_none(self, url: str, open_responses, lock) -> Optional[FetchedImage]:
        try:
            return self._fetch(url, open_responses, lock)
        except ImageFetchError as e:
            print(f"Warning: {e}")
            return None

    def _fetch(self, url: str, open_responses=None, lock=None) -> FetchedImage:
        kind = image_kind(url)
        if kind is None:
            raise ImageFetchError(url, "unsupported image extension")

        data = self._download(url, open_responses, lock)

        try:
            with Image.open(io.BytesIO(data)) as img:
                pil_format = img.format
                width, height = img.size
        except Exception as e:
            raise ImageFetchError(url, f"cannot decode image: {e}")

        if pil_format != _PIL_FORMATS[kind]:
            raise ImageFetchError(url, f"expected {kind} data, got {pil_format}")

        return FetchedImage(url=url, kind=kind, data=data, width=width, height=height)

    def _download(self, url: str, open_responses=None, lock=None) -> bytes:
        """Stream the body, enforcing the total deadline and size limit."""
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise ImageFetchError(url, str(e))

        if open_responses is not None:
            with lock:
                open_responses[url] = response

        try:
            response.raise_for_status()
            buffer = io.BytesIO()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise ImageFetchError(url, f"timed out after {self.timeout}s")
                buffer.write(chunk)
                if buffer.tell() > self.max_bytes:
                    raise ImageFetchError(url, f"larger than {self.max_bytes} bytes")
            return buffer.getvalue()
        except requests.RequestException as e:
            raise ImageFetchError(url, str(e))
        finally:
            if open_responses is not None:
                with lock:
                    open_responses.pop(url, None)
            response.close()
