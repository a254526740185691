"""Configuration Constants

Constants for the book compilation pipeline.
"""

# Platform name stamped into EPUB/DOCX/PDF metadata
PLATFORM_NAME = "Prompt2Book"

# Page Sizes (points, 1/72 inch)
PAGE_SIZES = {
    "A4": (595.28, 841.89),
    "A5": (419.53, 595.28),
    "Letter": (612.0, 792.0),
}
# "Custom" and unknown tokens fall back to Letter (custom dimensions are not plumbed through)
FALLBACK_PAGE_SIZE = "Letter"

# PDF Layout Defaults
DEFAULT_MARGIN = 50.0  # points
DEFAULT_FONT_SIZE = 12.0  # body text, points
LINE_HEIGHT_FACTOR = 1.2  # lineHeight = 1.2 x fontSize
TITLE_SCALE = 2.0  # book title drawn at 2 x fontSize
TITLE_ADVANCE_LINES = 3  # title consumes 3 line heights
HEADING_BASE_SCALE = 1.5  # level 1 heading = 1.5 x fontSize
HEADING_LEVEL_STEP = 0.2  # each level below 1 shrinks by 0.2
HEADING_ADVANCE_LINES = 2  # headings consume 2 line heights
IMAGE_SCALE = 0.5  # images drawn at 50% of natural size
IMAGE_SLOT_MARGINS = 2  # image bottom edge sits at 2 x margin

# Serif font used by the PDF renderer
DEFAULT_FONT_NAME = "Times-Roman"

# Image Fetching
DEFAULT_IMAGE_TIMEOUT = 10.0  # seconds, total per image
DEFAULT_IMAGE_WORKERS = 4
MAX_IMAGE_SIZE_MB = 20

# Export formats (book.format tokens -> artifact format)
FORMAT_PDF = "PDF"
FORMAT_EPUB = "EPUB"
FORMAT_DOCX = "DOCX"
SUPPORTED_FORMATS = (FORMAT_PDF, FORMAT_EPUB, FORMAT_DOCX)

# Artifact storage buckets
STORAGE_BUCKETS = {
    "pdf": "pdf",
    "epub": "epub",
    "docx": "docx",
}

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "epub": "application/epub+zip",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# Fixed timestamp for archive entries and document metadata (reproducible output)
FIXED_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FIXED_MODIFIED_STAMP = "2000-01-01T00:00:00Z"

# Progress Steps (for progress callback reporting)
PROGRESS_STEPS = {
    "START": 0.0,
    "NORMALIZE": 0.05,
    "RENDER_START": 0.10,
    "RENDER_END": 0.90,
    "COMPLETE": 1.0,
}

# Default EPUB language
DEFAULT_LANGUAGE = "en"
