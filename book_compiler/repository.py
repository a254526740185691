"""Book Repository Module

Book and page records consumed by the compiler and its recompile flow.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional

from .exceptions import BookNotFoundError
from .models import Book, Page


class BookRepository(ABC):
    """Read/update access to book records and their pages."""

    @abstractmethod
    def get_book(self, book_id) -> Optional[Book]:
        """Return the book, or None when it does not exist."""

    @abstractmethod
    def get_book_pages(self, book_id) -> List[Page]:
        """Return the book's pages ordered by page number."""

    @abstractmethod
    def update_book(self, book_id, **changes) -> Book:
        """
        Apply field changes to a book record.

        Raises:
            BookNotFoundError: If the book does not exist
        """


class InMemoryBookRepository(BookRepository):
    """Dictionary-backed repository with incrementing IDs."""

    def __init__(self):
        self._books: Dict[int, Book] = {}
        self._pages: Dict[int, List[Page]] = {}
        self._next_book_id = 1
        self._next_page_id = 1
        self._lock = threading.Lock()

    def create_book(self, title: str, format: str = "PDF", page_size: str = "A4") -> Book:
        with self._lock:
            book = Book(id=self._next_book_id, title=title, format=format, page_size=page_size)
            self._books[book.id] = book
            self._pages[book.id] = []
            self._next_book_id += 1
        return book

    def create_book_page(self, book_id, page_number: int, content: str = "",
                         image_url: Optional[str] = None) -> Page:
        with self._lock:
            if book_id not in self._books:
                raise BookNotFoundError(book_id)
            page = Page(page_number=page_number, content=content,
                        image_url=image_url, id=self._next_page_id)
            self._pages[book_id].append(page)
            self._next_page_id += 1
        return page

    def get_book(self, book_id) -> Optional[Book]:
        return self._books.get(book_id)

    def get_book_pages(self, book_id) -> List[Page]:
        return sorted(self._pages.get(book_id, []), key=lambda page: page.page_number)

    def update_book(self, book_id, **changes) -> Book:
        with self._lock:
            book = self._books.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)
            book = replace(book, **changes)
            self._books[book_id] = book
        return book
