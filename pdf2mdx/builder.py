"""Build the document structure tree from classified elements."""

import logging
import re
from dataclasses import dataclass, field

from pdf2mdx.models import (
    ClassifiedElement,
    ElementType,
    Heading,
    Link,
    ListItem,
    MarkerKind,
    Paragraph,
    StructureNode,
)
from pdf2mdx.options import ConversionOptions

logger = logging.getLogger(__name__)

HYPHENATED_END = re.compile(r"[^\W\d_]-$")


@dataclass
class _ListContext:
    """An open list nesting level anchored at the x position of its item."""

    anchor: float
    node: ListItem


@dataclass
class _BuildState:
    """Mutable state of one build pass."""

    nodes: list[StructureNode] = field(default_factory=list)
    paragraph: list[str] = field(default_factory=list)
    pending_link: Link | None = None
    stack: list[_ListContext] = field(default_factory=list)
    previous: ClassifiedElement | None = None


class StructureBuilder:
    """Turns an ordered stream of classified elements into structure nodes.

    Paragraph lines are merged until a soft paragraph break or a different
    element, consecutive links to one URL are merged, and list items are
    nested by indentation using a stack of open list contexts.
    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()

    def build(self, elements: list[ClassifiedElement]) -> list[StructureNode]:
        """Build the top-level node sequence.

        Args:
            elements: Classified elements in reading order.

        Returns:
            Ordered top-level nodes. List items carry their nested children.
        """
        state = _BuildState()

        for element in elements:
            if element.type == ElementType.PARAGRAPH:
                self._add_paragraph(state, element)
            elif element.type == ElementType.HEADING:
                self._flush_paragraph(state)
                self._flush_link(state)
                state.stack.clear()
                state.nodes.append(Heading(level=element.level or 1, text=element.text.strip()))
            elif element.type == ElementType.LINK:
                self._flush_paragraph(state)
                state.stack.clear()
                self._add_link(state, element)
            elif element.type == ElementType.LIST_ITEM:
                self._flush_paragraph(state)
                self._flush_link(state)
                self._add_list_item(state, element)
            else:
                raise TypeError(f"Unknown element type: {element.type!r}")
            state.previous = element

        self._flush_paragraph(state)
        self._flush_link(state)
        return state.nodes

    def _add_paragraph(self, state: _BuildState, element: ClassifiedElement) -> None:
        previous = state.previous
        if previous is not None and previous.type == ElementType.PARAGRAPH:
            gap = element.y - (previous.y + previous.height)
            if gap > previous.height * self.options.paragraph_gap_ratio:
                self._flush_paragraph(state)
        else:
            self._flush_link(state)
            # Closing the lists keeps later items from nesting above this paragraph.
            state.stack.clear()

        text = element.text.strip()
        if not text:
            return
        if self.options.dehyphenate and state.paragraph and HYPHENATED_END.search(state.paragraph[-1]):
            state.paragraph[-1] = state.paragraph[-1][:-1] + text
        else:
            state.paragraph.append(text)

    def _flush_paragraph(self, state: _BuildState) -> None:
        if state.paragraph:
            state.nodes.append(Paragraph(text=" ".join(state.paragraph)))
            state.paragraph = []

    def _add_link(self, state: _BuildState, element: ClassifiedElement) -> None:
        text = element.text.strip()
        pending = state.pending_link
        if pending is not None and pending.url == element.url:
            pending.text = f"{pending.text} {text}".strip()
            return

        self._flush_link(state)
        state.pending_link = Link(url=element.url or "", text=text)

    def _flush_link(self, state: _BuildState) -> None:
        if state.pending_link is not None:
            state.nodes.append(state.pending_link)
            state.pending_link = None

    def _add_list_item(self, state: _BuildState, element: ClassifiedElement) -> None:
        threshold = self.options.indentation_threshold
        x = element.indent_x
        node = ListItem(
            marker=element.marker or "*",
            marker_kind=element.marker_kind or MarkerKind.BULLET,
            text=element.text.strip(),
        )
        stack = state.stack

        # De-indent: close every level anchored clearly to the right of this item.
        if stack and x < stack[-1].anchor - threshold:
            while stack and stack[-1].anchor > x + threshold:
                stack.pop()

        if stack and x > stack[-1].anchor + threshold:
            stack[-1].node.children.append(node)
        else:
            if stack:
                # Same indent: attach to the parent of the previous sibling.
                stack.pop()
            if stack:
                stack[-1].node.children.append(node)
            else:
                state.nodes.append(node)

        stack.append(_ListContext(anchor=x, node=node))
