"""Group positioned items into lines."""

from pdf2mdx.models import Line, PositionedItem


def group_lines(items: list[PositionedItem], line_height_threshold: float = 5.0) -> list[Line]:
    """Cluster items into lines by vertical proximity.

    Items are sorted by page, then top to bottom, then left to right. An item
    joins the current line while its vertical distance to the previous item
    stays under the threshold and the page is unchanged.

    Args:
        items: Items of one or more pages.
        line_height_threshold: Maximum vertical delta between items of a line.

    Returns:
        Lines ordered top to bottom, each with its items ordered left to right.
    """
    if not items:
        return []

    sorted_items = sorted(items, key=lambda item: (item.page_num, item.y, item.x))

    lines = []
    current = [sorted_items[0]]
    for prev, item in zip(sorted_items, sorted_items[1:]):
        if item.page_num != prev.page_num or abs(item.y - prev.y) >= line_height_threshold:
            lines.append(current)
            current = []
        current.append(item)
    lines.append(current)

    return [Line(items=sorted(line_items, key=lambda item: item.x)) for line_items in lines]
