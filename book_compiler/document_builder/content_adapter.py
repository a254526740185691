"""Content Model Adapter Module

Normalizes page markup into layout-agnostic blocks:
- Heading extraction (h1-h6) in document order
- Markup stripping and whitespace collapsing for body text
- Trailing image reference when the page carries an image
"""
import html
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


# Any tag, or an unterminated "<..." fragment running to the end of input
_TAG_RE = re.compile(r"</?[^>]+(?:>|$)")
_HEADING_OPEN_RE = re.compile(r"<h([1-6])(?:\s[^>]*)?>$", re.IGNORECASE)
_HEADING_CLOSE_RE = re.compile(r"</h([1-6])\s*>$", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6


@dataclass(frozen=True)
class Heading:
    """Heading block; level is clamped to 1-6."""

    level: int
    text: str

    def __post_init__(self):
        clamped = max(MIN_HEADING_LEVEL, min(MAX_HEADING_LEVEL, int(self.level)))
        object.__setattr__(self, "level", clamped)


@dataclass(frozen=True)
class Paragraph:
    """Plain-text body block."""

    text: str


@dataclass(frozen=True)
class ImageRef:
    """Reference to a remote page image."""

    url: str


LayoutBlock = Union[Heading, Paragraph, ImageRef]

Token = Tuple[str, str]  # ("tag" | "text", value)


def _tokenize(markup: str) -> List[Token]:
    """Split markup into alternating tag and text tokens."""
    tokens: List[Token] = []
    pos = 0
    for match in _TAG_RE.finditer(markup):
        if match.start() > pos:
            tokens.append(("text", markup[pos:match.start()]))
        tokens.append(("tag", match.group(0)))
        pos = match.end()
    if pos < len(markup):
        tokens.append(("text", markup[pos:]))
    return tokens


def _collapse(text: str) -> str:
    """Decode entities, collapse whitespace runs and trim."""
    return _WHITESPACE_RE.sub(" ", html.unescape(text)).strip()


def _heading_open_level(token: Token) -> Optional[int]:
    kind, value = token
    if kind != "tag":
        return None
    match = _HEADING_OPEN_RE.match(value)
    return int(match.group(1)) if match else None


def _find_heading_close(tokens: List[Token], start: int, level: int) -> Optional[int]:
    """Index of the first closing tag of the given heading level at or after start."""
    for index in range(start, len(tokens)):
        kind, value = tokens[index]
        if kind != "tag":
            continue
        match = _HEADING_CLOSE_RE.match(value)
        if match and int(match.group(1)) == level:
            return index
    return None


def _scan(markup: str) -> Tuple[List[Heading], str]:
    """
    Scan markup once, separating heading elements from the body remainder.

    Headings run from an opening <hN> tag to the first matching </hN>; they do
    not overlap. Tags inside a heading are dropped without a separator. An
    opening heading tag with no matching close is treated as ordinary markup,
    so its text stays in the body.

    Args:
        markup: Raw page content

    Returns:
        Tuple of (headings in document order, plain-text body)
    """
    tokens = _tokenize(markup)
    headings: List[Heading] = []
    body_parts: List[str] = []

    index = 0
    while index < len(tokens):
        level = _heading_open_level(tokens[index])
        if level is not None:
            close = _find_heading_close(tokens, index + 1, level)
            if close is not None:
                inner = "".join(
                    value for kind, value in tokens[index + 1:close] if kind == "text"
                )
                text = _collapse(inner)
                if text:
                    headings.append(Heading(level, text))
                body_parts.append(" ")
                index = close + 1
                continue

        kind, value = tokens[index]
        # Each tag becomes a word boundary in the body text
        body_parts.append(" " if kind == "tag" else value)
        index += 1

    return headings, _collapse("".join(body_parts))


def extract_headings(markup: Optional[str]) -> List[Heading]:
    """Return the h1-h6 headings of the markup in document order."""
    return _scan(markup or "")[0]


def html_to_plain_text(markup: Optional[str]) -> str:
    """
    Strip all markup, keeping heading text, and collapse whitespace.

    Example:
        >>> html_to_plain_text("<h1>Intro</h1><p>Hello <b>world</b></p>")
        'Intro Hello world'
    """
    return _collapse(_TAG_RE.sub(" ", markup or ""))


def normalize(content: Optional[str], image_url: Optional[str] = None) -> List[LayoutBlock]:
    """
    Normalize page markup into an ordered sequence of layout blocks.

    Block order is: all headings (document order), then one paragraph with
    the remaining plain text (if any), then a single image reference when
    the page has an image. Images always follow the body text, wherever
    they might have appeared in the markup.

    Malformed markup never raises; it degrades to plain text.

    Args:
        content: Page markup (paragraphs, headings h1-h6)
        image_url: Optional page image URL

    Returns:
        List of Heading, Paragraph and ImageRef blocks

    Example:
        >>> normalize("<h1>Intro</h1><p>Hello   world</p>")
        [Heading(level=1, text='Intro'), Paragraph(text='Hello world')]
    """
    headings, body = _scan(content or "")

    blocks: List[LayoutBlock] = list(headings)
    if body:
        blocks.append(Paragraph(body))
    if image_url:
        blocks.append(ImageRef(image_url))
    return blocks


def normalize_page(page) -> List[LayoutBlock]:
    """Normalize a Page (content + optional image) into layout blocks."""
    return normalize(page.content, page.image_url)


def split_blocks(blocks: List[LayoutBlock]) -> Tuple[List[Heading], str, Optional[str]]:
    """
    Split normalized blocks back into (headings, body text, image url).

    Used by the packagers that do not run the text flow engine.
    """
    headings = [block for block in blocks if isinstance(block, Heading)]
    body = " ".join(block.text for block in blocks if isinstance(block, Paragraph))
    image_url = next((block.url for block in blocks if isinstance(block, ImageRef)), None)
    return headings, body, image_url
