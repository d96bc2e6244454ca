"""Assign a semantic type to each line."""

import logging
import math
import re

from pdf2mdx.models import ClassifiedElement, ElementType, Line, MarkerKind
from pdf2mdx.options import ConversionOptions

logger = logging.getLogger(__name__)

DEFAULT_BULLET = "*"

# Well-formed roman numerals only, so words like "civil." stay prose.
ROMAN_LOWER = r"(?=[ivxlcdm])m{0,3}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})"
ROMAN_UPPER = r"(?=[IVXLCDM])M{0,3}(?:CM|CD|D?C{0,3})(?:XC|XL|L?X{0,3})(?:IX|IV|V?I{0,3})"

# Leading list marker followed by whitespace. Roman numerals are tried before
# single letters so "iv." is read as one marker.
LIST_ITEM_PATTERN = re.compile(
    r"^\s*(?:"
    rf"(?P<ordered>\d+[.)]|{ROMAN_LOWER}[.)]|{ROMAN_UPPER}[.)]|[a-zA-Z][.)])"
    r"|(?P<bullet>[•●○◦▪▸►‣⁃–—*-])"
    r")\s+"
)


def match_list_marker(text: str) -> tuple[str, MarkerKind, int] | None:
    """Detect a leading list marker.

    Args:
        text: Line text.

    Returns:
        Tuple of (marker, kind, length of the matched prefix), or None.
    """
    match = LIST_ITEM_PATTERN.match(text)
    if not match:
        return None

    if match.group("ordered"):
        return match.group("ordered"), MarkerKind.ORDERED, match.end()

    marker = (match.group("bullet") or "").strip() or DEFAULT_BULLET
    return marker, MarkerKind.BULLET, match.end()


Segment = tuple[str, bool, bool, str | None]


def _segments(line: Line) -> list[Segment]:
    return [(item.text.strip(), item.is_bold, item.is_italic, item.url) for item in line.items if item.text.strip()]


def _drop_prefix(segments: list[Segment], length: int) -> list[Segment]:
    """Remove the first ``length`` characters of the space-joined segments."""
    result = []
    for text, bold, italic, url in segments:
        if length > 0:
            if length >= len(text):
                # The joining space after a consumed segment is consumed too.
                length = max(length - len(text) - 1, 0)
                continue
            text = text[length:].lstrip()
            length = 0
            if not text:
                continue
        result.append((text, bold, italic, url))
    return result


def _inline_links(segments: list[Segment], links: bool = True) -> list[tuple[str, bool, bool]]:
    """Merge consecutive segments sharing a URL into one inline Markdown link."""
    result: list[tuple[str, bool, bool]] = []
    index = 0
    while index < len(segments):
        text, bold, italic, url = segments[index]
        if not links or url is None:
            result.append((text, bold, italic))
            index += 1
            continue

        group = [segments[index]]
        index += 1
        while index < len(segments) and segments[index][3] == url:
            group.append(segments[index])
            index += 1
        label = " ".join(segment[0] for segment in group)
        result.append(
            (
                f"[{label}]({url})",
                all(segment[1] for segment in group),
                all(segment[2] for segment in group),
            )
        )
    return result


def format_segments(segments: list[tuple[str, bool, bool]], emphasis: bool = True) -> str:
    """Join text segments, wrapping runs of equal style in emphasis markup.

    Args:
        segments: Tuples of (text, is_bold, is_italic) in reading order.
        emphasis: Whether to emit bold/italic markup.

    Returns:
        The formatted text.
    """
    if not emphasis:
        return " ".join(text for text, _, _ in segments)

    runs: list[tuple[list[str], bool, bool]] = []
    for text, bold, italic in segments:
        if runs and runs[-1][1] == bold and runs[-1][2] == italic:
            runs[-1][0].append(text)
        else:
            runs.append(([text], bold, italic))

    parts = []
    for texts, bold, italic in runs:
        text = " ".join(texts)
        if bold and italic:
            text = f"***{text}***"
        elif bold:
            text = f"**{text}**"
        elif italic:
            text = f"*{text}*"
        parts.append(text)
    return " ".join(parts)


class ElementClassifier:
    """Classifies lines as headings, list items, links or paragraphs."""

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()

    def classify(self, lines: list[Line]) -> list[ClassifiedElement]:
        """Classify lines in order.

        Args:
            lines: Ordered lines of one or more pages.

        Returns:
            One ClassifiedElement per non-empty line, in the same order.
        """
        margins: dict[int, float] = {}
        for line in lines:
            if line.items:
                margins[line.page_num] = min(margins.get(line.page_num, line.x), line.x)

        elements = []
        for line in lines:
            if not line.text:
                continue
            elements.append(self.classify_line(line, margins.get(line.page_num, line.x)))
        return elements

    def classify_line(self, line: Line, left_margin: float = 0.0) -> ClassifiedElement:
        """Classify a single line.

        Args:
            line: Line to classify.
            left_margin: Smallest x of the line's page, used by the indentation fallback.

        Returns:
            The classified element.
        """
        text = line.text
        indent_x = line.x
        indent_level = int(math.floor(indent_x / self.options.indent_unit))
        base = {"line": line, "indent_x": indent_x, "indent_level": indent_level}

        if self.options.preserve_hyperlinks and line.url:
            return ClassifiedElement(type=ElementType.LINK, text=text, url=line.url, **base)

        if self.options.detect_headings:
            level = self.detect_heading_level(line.font_size, line.is_bold)
            if level:
                return ClassifiedElement(type=ElementType.HEADING, text=text, level=level, **base)

        segments = _segments(line)
        emphasis = self.options.detect_bold_italic
        links = self.options.preserve_hyperlinks

        if self.options.detect_lists:
            marker = match_list_marker(text)
            if marker:
                marker_text, kind, prefix_length = marker
                content = format_segments(_inline_links(_drop_prefix(segments, prefix_length), links), emphasis)
                return ClassifiedElement(
                    type=ElementType.LIST_ITEM,
                    text=content,
                    marker=marker_text,
                    marker_kind=kind,
                    **base,
                )

            if self.options.detect_indented_lists and indent_x - left_margin >= self.options.indented_list_min_offset:
                logger.debug("Indented line without marker read as bullet: %r", text[:40])
                return ClassifiedElement(
                    type=ElementType.LIST_ITEM,
                    text=format_segments(_inline_links(segments, links), emphasis),
                    marker=DEFAULT_BULLET,
                    marker_kind=MarkerKind.BULLET,
                    **base,
                )

        text = format_segments(_inline_links(segments, links), emphasis)
        return ClassifiedElement(type=ElementType.PARAGRAPH, text=text, **base)

    def detect_heading_level(self, font_size: float, is_bold: bool = False) -> int | None:
        """Detect heading level based on font size.

        Args:
            font_size: Largest font size of the line.
            is_bold: Whether every item of the line is bold.

        Returns:
            Heading level (1-3) or None if not a heading.
        """
        if font_size >= self.options.h1_font_size:
            return 1
        elif font_size >= self.options.h2_font_size:
            return 2
        elif font_size >= self.options.h3_font_size:
            return 3
        elif is_bold and font_size >= self.options.bold_heading_font_size:
            return 3
        return None
