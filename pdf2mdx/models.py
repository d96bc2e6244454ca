"""Data model shared by the layout reconstruction pipeline."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class PositionedItem:
    """A text fragment placed on a page, in top-left origin coordinates."""

    text: str
    x: float
    y: float
    width: float
    height: float
    font_size: float
    font_name: str = ""
    is_bold: bool = False
    is_italic: bool = False
    url: str | None = None
    page_num: int = 0

    @property
    def bbox(self) -> tuple[float, float, float, float]:
        """Bounding box as (x0, y0, x1, y1)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class Line:
    """Items judged to lie on the same baseline, ordered left to right."""

    items: list[PositionedItem] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(item.text.strip() for item in self.items if item.text.strip())

    @property
    def x(self) -> float:
        return min((item.x for item in self.items), default=0.0)

    @property
    def y(self) -> float:
        return min((item.y for item in self.items), default=0.0)

    @property
    def width(self) -> float:
        if not self.items:
            return 0.0
        return max(item.x + item.width for item in self.items) - self.x

    @property
    def height(self) -> float:
        return max((item.height for item in self.items), default=0.0)

    @property
    def font_size(self) -> float:
        return max((item.font_size for item in self.items), default=0.0)

    @property
    def page_num(self) -> int:
        return self.items[0].page_num if self.items else 0

    @property
    def is_bold(self) -> bool:
        styled = [item for item in self.items if item.text.strip()]
        return bool(styled) and all(item.is_bold for item in styled)

    @property
    def is_italic(self) -> bool:
        styled = [item for item in self.items if item.text.strip()]
        return bool(styled) and all(item.is_italic for item in styled)

    @property
    def url(self) -> str | None:
        """The URL shared by every item of the line, or None."""
        urls = {item.url for item in self.items}
        if len(urls) == 1:
            return urls.pop()
        return None


class ElementType(str, Enum):
    """Semantic type assigned to a line."""

    HEADING = "heading"
    LIST_ITEM = "list_item"
    LINK = "link"
    PARAGRAPH = "paragraph"


class MarkerKind(str, Enum):
    """Kind of list marker."""

    ORDERED = "ordered"
    BULLET = "bullet"


@dataclass
class ClassifiedElement:
    """A line together with its semantic classification."""

    line: Line
    type: ElementType
    text: str
    indent_x: float = 0.0
    indent_level: int = 0
    level: int | None = None
    marker: str | None = None
    marker_kind: MarkerKind | None = None
    url: str | None = None

    @property
    def y(self) -> float:
        return self.line.y

    @property
    def height(self) -> float:
        return self.line.height


# Structure tree nodes. StructureNode is a closed union of the four classes below.


@dataclass
class Heading:
    """A level 1-3 heading."""

    level: int
    text: str


@dataclass
class Paragraph:
    """Merged paragraph text, with inline emphasis and links already applied."""

    text: str


@dataclass
class Link:
    """A standalone hyperlink block."""

    url: str
    text: str


@dataclass
class ListItem:
    """A list item with its original marker and nested child items."""

    marker: str
    marker_kind: MarkerKind
    text: str
    children: list["ListItem"] = field(default_factory=list)


StructureNode = Heading | Paragraph | Link | ListItem
