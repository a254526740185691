"""Page Geometry Utilities

This module provides pure utility functions for page geometry used by the
PDF renderer:

- Page size token resolution (A4, A5, Letter, Custom) to points
- Content box width from margins
- Horizontal centering and page-number placement

All coordinates follow ReportLab conventions: points (1/72 inch) with the
origin at the bottom-left corner of the page.
"""

from typing import NamedTuple, Optional, Tuple

from ..config import PAGE_SIZES, FALLBACK_PAGE_SIZE


class PageDimensions(NamedTuple):
    """Physical page size in points; both values are strictly positive."""

    width: float
    height: float


def resolve(page_size_token: Optional[str]) -> PageDimensions:
    """
    Resolve a page size token to physical dimensions in points.

    Lookup table:
    - A4: 595.28 x 841.89
    - A5: 419.53 x 595.28
    - Letter: 612 x 792

    "Custom" and any unrecognised token fall back to Letter. Custom
    dimensions entered by users are not plumbed through to the compiler,
    so this fallback is the documented behaviour rather than an error.

    Args:
        page_size_token: Page size token from the book record

    Returns:
        PageDimensions(width, height)

    Examples:
        >>> resolve("A5")
        PageDimensions(width=419.53, height=595.28)
        >>> resolve("Custom")
        PageDimensions(width=612.0, height=792.0)
    """
    width, height = PAGE_SIZES.get(page_size_token or "", PAGE_SIZES[FALLBACK_PAGE_SIZE])
    return PageDimensions(float(width), float(height))


def content_width(dimensions: PageDimensions, margin: float) -> float:
    """
    Width available to text between the left and right margins.

    Examples:
        >>> content_width(PageDimensions(612, 792), 50)
        512
    """
    return dimensions.width - 2 * margin


def centered_x(dimensions: PageDimensions, item_width: float) -> float:
    """
    X coordinate that centers an item of the given width on the page.

    Examples:
        >>> centered_x(PageDimensions(612, 792), 100)
        256.0
    """
    return dimensions.width / 2 - item_width / 2


def page_number_position(dimensions: PageDimensions, margin: float) -> Tuple[float, float]:
    """
    Bottom-center anchor for the page number, halfway into the bottom margin.

    Examples:
        >>> page_number_position(PageDimensions(612, 792), 50)
        (306.0, 25.0)
    """
    return dimensions.width / 2, margin / 2
