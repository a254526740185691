"""Compilation Options Dataclass

Configuration options for the book compilation pipeline.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .config import (
    DEFAULT_MARGIN,
    DEFAULT_FONT_SIZE,
    DEFAULT_IMAGE_TIMEOUT,
    DEFAULT_IMAGE_WORKERS,
    DEFAULT_LANGUAGE,
    MAX_IMAGE_SIZE_MB,
    PLATFORM_NAME,
)
from .exceptions import InvalidConfigurationError


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class CompilationOptions:
    """Configuration options for the book compilation pipeline.

    This dataclass encapsulates all configuration parameters needed to
    compile a book into PDF, EPUB and DOCX artifacts.

    Attributes:
        # PDF Layout Options
        margin: Page margin in points (all sides)
        font_size: Body text font size in points
        unicode_font: If True, try to register a TrueType serif font with wide
                      Unicode coverage instead of the built-in Times-Roman

        # Image Fetching Options
        image_timeout: Total time budget in seconds for fetching one image
        image_workers: Number of parallel image fetches
        max_image_mb: Largest image body accepted, in MB

        # Orchestration Options
        parallel_formats: If True, run the format packagers concurrently

        # Metadata
        platform_name: Author/publisher stamped into document metadata
        language: EPUB language code
    """

    # PDF Layout Options
    margin: float = DEFAULT_MARGIN
    font_size: float = DEFAULT_FONT_SIZE
    unicode_font: bool = False

    # Image Fetching Options
    image_timeout: float = DEFAULT_IMAGE_TIMEOUT
    image_workers: int = DEFAULT_IMAGE_WORKERS
    max_image_mb: float = MAX_IMAGE_SIZE_MB

    # Orchestration Options
    parallel_formats: bool = True

    # Metadata
    platform_name: str = PLATFORM_NAME
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self):
        """Validate configuration options after initialization."""
        if self.margin <= 0:
            raise InvalidConfigurationError(f"margin must be positive, got {self.margin}")
        if self.font_size <= 0:
            raise InvalidConfigurationError(f"font_size must be positive, got {self.font_size}")
        if self.image_timeout <= 0:
            raise InvalidConfigurationError(
                f"image_timeout must be positive, got {self.image_timeout}"
            )
        if self.image_workers < 1:
            raise InvalidConfigurationError(
                f"image_workers must be at least 1, got {self.image_workers}"
            )
        if self.max_image_mb <= 0:
            raise InvalidConfigurationError(
                f"max_image_mb must be positive, got {self.max_image_mb}"
            )

    @property
    def max_image_bytes(self) -> int:
        return int(self.max_image_mb * 1024 * 1024)

    @classmethod
    def from_env(cls) -> "CompilationOptions":
        """Build options from BOOK_COMPILER_* environment variables (.env supported)."""
        load_dotenv()
        return cls(
            margin=float(os.getenv("BOOK_COMPILER_MARGIN", DEFAULT_MARGIN)),
            font_size=float(os.getenv("BOOK_COMPILER_FONT_SIZE", DEFAULT_FONT_SIZE)),
            unicode_font=_env_bool("BOOK_COMPILER_UNICODE_FONT", False),
            image_timeout=float(os.getenv("BOOK_COMPILER_IMAGE_TIMEOUT", DEFAULT_IMAGE_TIMEOUT)),
            image_workers=int(os.getenv("BOOK_COMPILER_IMAGE_WORKERS", DEFAULT_IMAGE_WORKERS)),
            max_image_mb=float(os.getenv("BOOK_COMPILER_MAX_IMAGE_MB", MAX_IMAGE_SIZE_MB)),
            parallel_formats=_env_bool("BOOK_COMPILER_PARALLEL_FORMATS", True),
            platform_name=os.getenv("BOOK_COMPILER_PLATFORM_NAME", PLATFORM_NAME),
            language=os.getenv("BOOK_COMPILER_LANGUAGE", DEFAULT_LANGUAGE),
        )
