"""Custom Exception Hierarchy

Exception hierarchy for the book compiler, giving each failure scenario of
the compilation pipeline its own exception type.
"""


class BookCompilerError(Exception):
    """Base exception for all book compiler errors.

    This is the root of the exception hierarchy. Catching this exception
    will catch all custom exceptions raised by the compiler.
    """
    pass


# Validation Errors
class ValidationError(BookCompilerError):
    """Raised when input validation fails."""
    pass


class InvalidPageError(ValidationError):
    """Raised when a page record is malformed (e.g. non-positive page number)."""
    pass


class InvalidConfigurationError(ValidationError, ValueError):
    """Raised when configuration parameters are invalid."""
    pass


# Rendering Errors
class RenderingError(BookCompilerError):
    """Base class for document rendering errors."""
    pass


class ImageFetchError(RenderingError):
    """Raised when a page image cannot be fetched or decoded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch image '{url}': {reason}")


# Packaging Errors
class PackagingError(BookCompilerError):
    """Raised when one export format fails to compile.

    This wraps the underlying exception while preserving the format context.
    """

    def __init__(self, format_name: str, original_exception: Exception):
        self.format_name = format_name
        self.original_exception = original_exception
        super().__init__(
            f"{format_name} compilation failed: {str(original_exception)}"
        )


# Storage Errors
class ArtifactStoreError(BookCompilerError):
    """Raised when an artifact cannot be persisted to the artifact store."""

    def __init__(self, bucket: str, path: str, reason: str):
        self.bucket = bucket
        self.path = path
        super().__init__(f"Failed to store '{bucket}/{path}': {reason}")


class BookNotFoundError(BookCompilerError):
    """Raised when a book ID is not present in the repository."""

    def __init__(self, book_id):
        self.book_id = book_id
        super().__init__(f"Book '{book_id}' not found")
