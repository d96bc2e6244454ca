"""Turn a page's raw text runs into normalized positioned items."""

import logging
from dataclasses import replace
from numbers import Real

from pdf2mdx.exceptions import PageExtractionError
from pdf2mdx.models import PositionedItem
from pdf2mdx.reader import LinkRect, PageHandle, TextRun

logger = logging.getLogger(__name__)


def is_bold_font(font_name: str) -> bool:
    return "bold" in font_name.lower()


def is_italic_font(font_name: str) -> bool:
    font_lower = font_name.lower()
    return "italic" in font_lower or "oblique" in font_lower


def font_size_from_transform(transform) -> float:
    """Derive the font size from the diagonal scale of a run's transform matrix.

    Args:
        transform: Six-element matrix ``[a, b, c, d, e, f]``.

    Returns:
        The font size in layout units.
    """
    size = abs(transform[0]) or abs(transform[3])
    return float(size)


def boxes_intersect(box1: tuple, box2: tuple) -> bool:
    """Check whether two (x0, y0, x1, y1) boxes share a non-empty area."""
    x0_1, y0_1, x1_1, y1_1 = box1
    x0_2, y0_2, x1_2, y1_2 = box2

    return x0_1 < x1_2 and x0_2 < x1_1 and y0_1 < y1_2 and y0_2 < y1_1


def normalize_link_rect(link: LinkRect, viewport_height: float) -> tuple[float, float, float, float]:
    """Convert a bottom-left origin link rectangle to a top-left origin box."""
    x1, y1, x2, y2 = link.rect
    return (
        min(x1, x2),
        viewport_height - max(y1, y2),
        max(x1, x2),
        viewport_height - min(y1, y2),
    )


def _validate_run(run: TextRun, page_number: int) -> None:
    if not isinstance(run, TextRun):
        raise PageExtractionError(
            f"Text run on page {page_number} has unexpected type {type(run).__name__}", page_number=page_number
        )
    transform = run.transform
    if not isinstance(run.text, str):
        raise PageExtractionError(f"Text run on page {page_number} has non-text content", page_number=page_number)
    if transform is None or len(transform) != 6 or not all(isinstance(v, Real) for v in transform):
        raise PageExtractionError(
            f"Text run on page {page_number} has a malformed transform: {transform!r}", page_number=page_number
        )
    if not isinstance(run.width, Real) or not isinstance(run.height, Real):
        raise PageExtractionError(
            f"Text run on page {page_number} has malformed dimensions: {run.width!r} x {run.height!r}",
            page_number=page_number,
        )


def extract_page_items(page: PageHandle, page_num: int, preserve_hyperlinks: bool = True) -> list[PositionedItem]:
    """Extract positioned items from one page.

    Args:
        page: Page handle from the document reader.
        page_num: Zero-based page number used to tag the items.
        preserve_hyperlinks: Whether to attach link annotation URLs to items.

    Returns:
        List of PositionedItem objects in source order.

    Raises:
        PageExtractionError: If the page cannot be read or a run is malformed.
    """
    page_number = page_num + 1
    try:
        viewport = page.get_viewport()
        runs = page.get_text_runs()
        links = page.get_link_rects() if preserve_hyperlinks else []
        link_boxes = [(normalize_link_rect(link, viewport.height), link.url) for link in links or []]
    except PageExtractionError:
        raise
    except Exception as e:
        raise PageExtractionError(
            f"Could not read text of page {page_number}: {e}", page_number=page_number, original_error=e
        ) from e

    items = []
    for run in runs or []:
        _validate_run(run, page_number)
        if not run.text.strip():
            continue

        try:
            item = _build_item(run, viewport.height, page_num, link_boxes)
        except (TypeError, ValueError, AttributeError) as e:
            raise PageExtractionError(
                f"Text run on page {page_number} is malformed: {e}", page_number=page_number, original_error=e
            ) from e
        items.append(item)

    logger.debug("Extracted %d items and %d links from page %d", len(items), len(link_boxes), page_number)
    return items


def _build_item(run: TextRun, viewport_height: float, page_num: int, link_boxes: list) -> PositionedItem:
    item = PositionedItem(
        text=run.text,
        x=float(run.transform[4]),
        y=viewport_height - float(run.transform[5]),
        width=float(run.width),
        height=float(run.height),
        font_size=font_size_from_transform(run.transform),
        font_name=run.font_name or "",
        is_bold=is_bold_font(run.font_name or ""),
        is_italic=is_italic_font(run.font_name or ""),
        page_num=page_num,
    )

    # First overlapping link rectangle wins.
    for box, url in link_boxes:
        if boxes_intersect(item.bbox, box):
            return replace(item, url=url)
    return item
