"""Compilation Result Dataclass

Result outputs from the book compilation pipeline.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .models import CompiledArtifact


class CompilationState(str, Enum):
    """Compilation request states: pending -> compiling -> {completed, failed}."""

    PENDING = "pending"
    COMPILING = "compiling"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class CompilationResult:
    """Result from the book compilation pipeline.

    Attributes:
        status: Compilation state (completed even when some or all formats failed)
        status_message: Human-readable status message

        # Artifact URLs (None when the format was not requested or failed)
        pdf_url: Public URL of the PDF artifact
        epub_url: Public URL of the EPUB artifact
        docx_url: Public URL of the DOCX artifact

        # Error Handling
        errors: Per-format failure messages, keyed by "pdf"/"epub"/"docx"
        error: Error message if the whole compilation failed

        # Buffers produced in this run
        artifacts: Compiled artifacts keyed by format
    """

    # Status
    status: CompilationState = CompilationState.PENDING
    status_message: str = ""

    # Artifact URLs
    pdf_url: Optional[str] = None
    epub_url: Optional[str] = None
    docx_url: Optional[str] = None

    # Error Handling
    errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    # Buffers
    artifacts: Dict[str, CompiledArtifact] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """True if compilation reached the completed state."""
        return self.status == CompilationState.COMPLETED

    @property
    def is_failed(self) -> bool:
        """True if compilation failed outside of any single format."""
        return self.status == CompilationState.FAILED

    @property
    def failed_formats(self) -> List[str]:
        return sorted(self.errors)

    def set_url(self, format_name: str, url: Optional[str]):
        """Record the artifact URL for "pdf", "epub" or "docx"."""
        setattr(self, f"{format_name}_url", url)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to the wire shape persisted onto the Book record.

        Returns:
            {"pdfUrl": ..., "epubUrl": ..., "docxUrl": ...}
        """
        return {
            "pdfUrl": self.pdf_url,
            "epubUrl": self.epub_url,
            "docxUrl": self.docx_url,
        }
