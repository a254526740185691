"""Book Compilation Pipeline

Main orchestration logic for compiling a book into its export artifacts.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, Union

from .artifact_store import ArtifactStore
from .compilation_options import CompilationOptions
from .compilation_result import CompilationResult, CompilationState
from .config import FORMAT_DOCX, FORMAT_EPUB, PROGRESS_STEPS, STORAGE_BUCKETS
from .document_builder import DOCXPackager, EPUBPackager, PDFRenderer
from .exceptions import BookNotFoundError, PackagingError
from .models import Book, CompiledArtifact, Page
from .repository import BookRepository
from .utils import artifact_path


class BookCompiler:
    """Book compilation orchestrator.

    This class orchestrates the complete compilation workflow:
    1. Normalisation - convert page records and sort by page number
    2. Format selection - PDF always, EPUB/DOCX when the book asks for them
    3. Rendering - each format builds its buffer and uploads it
    4. Result - one URL per successful format

    Each format runs in isolation: a failing format only nulls its own URL.

    Attributes:
        artifact_store: Destination for compiled artifacts
        options: Compilation options shared by all formats
        progress_callback: Optional callback for progress updates (progress, desc)
    """

    def __init__(
        self,
        artifact_store: ArtifactStore,
        options: Optional[CompilationOptions] = None,
        pdf_renderer: Optional[PDFRenderer] = None,
        epub_packager: Optional[EPUBPackager] = None,
        docx_packager: Optional[DOCXPackager] = None,
        progress_callback: Optional[Callable[[float, str], None]] = None,
    ):
        """Initialize the compiler with an artifact store and optional format builders.

        Args:
            artifact_store: Store that persists artifacts and returns public URLs
            options: Compilation options (defaults used when None)
            pdf_renderer: PDF renderer (created from options if None)
            epub_packager: EPUB packager (created from options if None)
            docx_packager: DOCX packager (created from options if None)
            progress_callback: Optional function(progress: float, desc: str) for progress updates
        """
        self.artifact_store = artifact_store
        self.options = options or CompilationOptions()
        self.pdf_renderer = pdf_renderer or PDFRenderer(self.options)
        self.epub_packager = epub_packager or EPUBPackager(self.options)
        self.docx_packager = docx_packager or DOCXPackager(self.options)
        self.progress = progress_callback or (lambda p, d: None)

    def compile(self, book: Book, pages: Sequence[Union[Page, dict]]) -> CompilationResult:
        """Compile a book into its export artifacts.

        Args:
            book: Book record (title, requested format, page size)
            pages: Book pages in any order (Page objects or store records)

        Returns:
            CompilationResult with artifact URLs and per-format errors

        Raises:
            Does not raise - all errors are captured in CompilationResult
        """
        result = CompilationResult(
            status=CompilationState.COMPILING,
            status_message="Compiling book...",
        )

        try:
            # Step 1: Normalise page records
            self.progress(PROGRESS_STEPS["START"], "Preparing pages...")
            ordered = self._prepare_pages(pages)

            if not ordered:
                self.progress(PROGRESS_STEPS["COMPLETE"], "Complete!")
                result.status = CompilationState.COMPLETED
                result.status_message = "No pages to compile"
                return result

            # Step 2: Select formats
            self.progress(PROGRESS_STEPS["NORMALIZE"], f"Compiling {len(ordered)} pages...")
            formats = self.requested_formats(book)

            # Step 3: Build and upload each format
            self._run_formats(book, ordered, formats, result)

            self.progress(PROGRESS_STEPS["COMPLETE"], "Complete!")

            result.status = CompilationState.COMPLETED
            if result.errors:
                result.status_message = f"Compiled with errors in: {', '.join(result.failed_formats)}"
            else:
                result.status_message = "✅ Compilation complete!"
            return result

        except Exception as e:
            print(f"Warning: Compilation of book '{book.id}' failed: {e}")
            result.status = CompilationState.FAILED
            result.status_message = f"Compilation failed: {str(e)}"
            result.error = str(e)
            return result

    @staticmethod
    def requested_formats(book: Book) -> List[str]:
        """PDF is always produced; EPUB or DOCX only when the book requests it."""
        formats = ["pdf"]
        if book.format == FORMAT_EPUB:
            formats.append("epub")
        elif book.format == FORMAT_DOCX:
            formats.append("docx")
        return formats

    def _prepare_pages(self, pages: Sequence[Union[Page, dict]]) -> List[Page]:
        """Convert store records to Page objects and sort by page number.

        Raises:
            InvalidPageError: If a page record is malformed
        """
        converted = [page if isinstance(page, Page) else Page.from_dict(page) for page in pages]
        return sorted(converted, key=lambda page: page.page_number)

    def _run_formats(self, book: Book, pages: List[Page], formats: List[str], result: CompilationResult):
        start = PROGRESS_STEPS["RENDER_START"]
        span = PROGRESS_STEPS["RENDER_END"] - start
        self.progress(start, f"Rendering {', '.join(fmt.upper() for fmt in formats)}...")

        outcomes = {}
        if self.options.parallel_formats and len(formats) > 1:
            with ThreadPoolExecutor(max_workers=len(formats)) as executor:
                futures = {
                    executor.submit(self._run_format, fmt, book, pages): fmt
                    for fmt in formats
                }
                for done, future in enumerate(as_completed(futures), start=1):
                    fmt = futures[future]
                    outcomes[fmt] = future.result()
                    self.progress(start + span * done / len(formats), f"{fmt.upper()} finished")
        else:
            for done, fmt in enumerate(formats, start=1):
                outcomes[fmt] = self._run_format(fmt, book, pages)
                self.progress(start + span * done / len(formats), f"{fmt.upper()} finished")

        for fmt in formats:
            artifact, url, error = outcomes[fmt]
            result.set_url(fmt, url)
            if artifact is not None:
                result.artifacts[fmt] = artifact
            if error is not None:
                result.errors[fmt] = str(error)

    def _run_format(self, fmt: str, book: Book, pages: List[Page]):
        """Build and upload one format.

        Returns:
            Tuple of (artifact or None, url or None, PackagingError or None)
        """
        try:
            data = self._build(fmt, book, pages)
            artifact = CompiledArtifact(name=f"book.{fmt}", format=fmt, data=data)
            url = self.artifact_store.upload(
                STORAGE_BUCKETS[fmt],
                artifact_path(book.id, fmt),
                artifact.data,
                artifact.content_type,
            )
            return artifact, url, None
        except Exception as e:
            error = PackagingError(fmt.upper(), e)
            print(f"Warning: {error}")
            return None, None, error

    def _build(self, fmt: str, book: Book, pages: List[Page]) -> bytes:
        if fmt == "pdf":
            return self.pdf_renderer.render(book.title, pages, book.page_size)
        if fmt == "epub":
            return self.epub_packager.package(book.title, pages)
        if fmt == "docx":
            return self.docx_packager.package(book.title, pages)
        raise ValueError(f"Unknown format: {fmt}")


def compile_book(
    book: Union[Book, dict],
    pages: Sequence[Union[Page, dict]],
    artifact_store: ArtifactStore,
    options: Optional[CompilationOptions] = None,
) -> Dict[str, Optional[str]]:
    """
    Compile a book and return its artifact URLs.

    Args:
        book: Book record (Book or store record dict)
        pages: Book pages (Page objects or store record dicts)
        artifact_store: Store that persists artifacts
        options: Compilation options

    Returns:
        {"pdfUrl": ..., "epubUrl": ..., "docxUrl": ...}; a URL is None when
        the format was not requested or failed
    """
    if not isinstance(book, Book):
        book = Book.from_dict(book)
    result = BookCompiler(artifact_store, options).compile(book, pages)
    return result.to_dict()


def recompile_book(book_id, repository: BookRepository, compiler: BookCompiler) -> CompilationResult:
    """
    Recompile a stored book and persist the new artifact URLs.

    The book is marked "generating" while compiling and "completed" with the
    new URLs afterwards. If compilation fails outright, the previous status
    and URLs are restored.

    Raises:
        BookNotFoundError: If the book does not exist
    """
    book = repository.get_book(book_id)
    if book is None:
        raise BookNotFoundError(book_id)

    previous_status = book.status
    book = repository.update_book(book_id, status="generating")
    pages = repository.get_book_pages(book_id)

    result = compiler.compile(book, pages)

    if result.is_failed:
        repository.update_book(book_id, status=previous_status)
        return result

    repository.update_book(
        book_id,
        status="completed",
        pdf_url=result.pdf_url,
        epub_url=result.epub_url,
        docx_url=result.docx_url,
    )
    return result
