"""Serialize a structure tree to MDX text."""

import re

from pdf2mdx.models import Heading, Link, ListItem, MarkerKind, Paragraph, StructureNode
from pdf2mdx.options import ConversionOptions

NUMERIC_MARKER = re.compile(r"^\d+[.)]?$")
# An empty wrapper stands alone between whitespace, unlike the closing and
# opening markers of two adjacent emphasis spans.
EMPTY_EMPHASIS = re.compile(r"(?:^|(?<=\s))(\*{2,3})[ \t]*\1(?=\s|$)", re.MULTILINE)
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")

INDENT = "  "


def clean_up(markdown: str) -> str:
    """Normalize rendered MDX.

    Removes empty emphasis wrappers, trailing whitespace, and collapses runs
    of blank lines to a single blank line.

    Args:
        markdown: Rendered MDX.

    Returns:
        Cleaned MDX.
    """
    markdown = EMPTY_EMPHASIS.sub("", markdown)
    markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))
    return EXCESS_BLANK_LINES.sub("\n\n", markdown)


class MarkdownRenderer:
    """Renders structure nodes as MDX."""

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()

    def render(self, nodes: list[StructureNode]) -> str:
        """Render a top-level node sequence.

        Consecutive top-level list items form one list: their lines follow
        each other directly and the group ends with a blank line.

        Args:
            nodes: Top-level structure nodes.

        Returns:
            MDX text.
        """
        parts = []
        list_group: list[ListItem] = []

        for node in nodes:
            if isinstance(node, ListItem):
                list_group.append(node)
                continue
            if list_group:
                parts.append("\n".join(self._render_list(list_group, 0)) + "\n\n")
                list_group = []
            parts.append(self.render_node(node))

        if list_group:
            parts.append("\n".join(self._render_list(list_group, 0)) + "\n\n")

        return clean_up("".join(parts))

    def render_node(self, node: StructureNode, depth: int = 0) -> str:
        """Render one node (and its children) at the given list depth."""
        if isinstance(node, Heading):
            return f"{'#' * node.level} {node.text}\n\n"
        if isinstance(node, Paragraph):
            return self._render_paragraph(node.text, depth) + "\n\n"
        if isinstance(node, Link):
            return f"[{node.text}]({node.url})\n\n"
        if isinstance(node, ListItem):
            return "\n".join(self._render_list([node], depth)) + "\n"
        raise TypeError(f"Unknown structure node: {type(node).__name__}")

    def _render_paragraph(self, text: str, depth: int) -> str:
        # Keep a leading hash from being read as a heading.
        if text.startswith("#"):
            text = "\\" + text
        if depth == 0:
            return text
        indent = INDENT * depth
        return "\n".join(indent + line for line in text.split("\n"))

    def _render_list(self, items: list[ListItem], depth: int) -> list[str]:
        lines = []
        for position, item in enumerate(items, 1):
            if NUMERIC_MARKER.match(item.marker):
                marker = f"{position}."
            elif item.marker_kind == MarkerKind.BULLET and self.options.bullet_marker:
                marker = self.options.bullet_marker
            else:
                marker = item.marker
            lines.append(f"{INDENT * depth}{marker} {item.text}")
            lines.extend(self._render_list(item.children, depth + 1))
        return lines
