"""Utilities Module

Helper functions for the book compiler.
"""
from .config import CONTENT_TYPES


def format_file_size(size_bytes: int) -> str:
    """Format an artifact size for log lines, e.g. "45.3 KB"."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = size_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def artifact_path(book_id, extension: str) -> str:
    """
    Build the storage path of a book artifact, e.g. "42/book.pdf".

    Args:
        book_id: Book identifier
        extension: Artifact extension without dot ("pdf", "epub", "docx")

    Returns:
        Path relative to the storage bucket
    """
    return f"{book_id}/book.{extension}"


def content_type_for(extension: str) -> str:
    """Return the MIME type for an artifact extension."""
    return CONTENT_TYPES.get(extension, "application/octet-stream")
