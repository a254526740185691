"""Font Manager Module

Handles serif font registration, Unicode font fallback and text measuring.
"""
import os
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from ..config import DEFAULT_FONT_NAME


class FontManager:
    """Manages the single serif font used for PDF output.

    This class handles:
    - The built-in Times-Roman standard font (default, no embedding needed)
    - Optional TrueType serif registration for wide Unicode coverage
      (DejaVu Serif → Liberation Serif → Times-Roman fallback chain)
    - Text width measurement for line wrapping

    Attributes:
        font_name: Name of the registered font (e.g., 'Times-Roman' or 'DejaVuSerif')
    """

    UNICODE_FONT_NAME = 'DejaVuSerif'

    # System serif fonts, in order of preference
    SERIF_FONT_PATHS = [
        '/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf',
        '/usr/share/fonts/dejavu/DejaVuSerif.ttf',
        '/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf',
    ]

    def __init__(self, unicode_font: bool = False):
        """
        Initialize FontManager.

        Args:
            unicode_font: If True, try to register a TrueType serif font that
                          covers Cyrillic and other non-Latin scripts
        """
        self.font_name = DEFAULT_FONT_NAME
        if unicode_font:
            self._setup_unicode_font()

    def _setup_unicode_font(self):
        """
        Register a serif TrueType font with wide Unicode coverage.

        Tries multiple font paths in order of preference:
        1. DejaVu Serif (Linux system paths)
        2. Liberation Serif (Linux)

        Falls back to Times-Roman if no fonts are found.
        WARNING: Times-Roman only covers Latin-1 characters!
        """
        for font_path in self.SERIF_FONT_PATHS:
            if os.path.exists(font_path):
                try:
                    pdfmetrics.registerFont(TTFont(self.UNICODE_FONT_NAME, font_path))
                    self.font_name = self.UNICODE_FONT_NAME
                    print(f"DEBUG: Registered serif font from: {font_path}")
                    return
                except Exception as e:
                    print(f"DEBUG: Failed to register font {font_path}: {e}")
                    continue

        print("WARNING: No Unicode serif font found, using Times-Roman fallback")

    def string_width(self, text: str, font_size: float) -> float:
        """
        Measure rendered text width.

        Args:
            text: Text to measure
            font_size: Font size in points

        Returns:
            Width in points
        """
        return pdfmetrics.stringWidth(text, self.font_name, font_size)
