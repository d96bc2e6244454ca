"""Configuration for PDF to MDX conversion."""

from dataclasses import dataclass

from pdf2mdx.exceptions import InvalidOptionsError


@dataclass
class ConversionOptions:
    """Configuration options for PDF to MDX conversion."""

    preserve_hyperlinks: bool = True
    detect_headings: bool = True
    detect_lists: bool = True
    detect_bold_italic: bool = True
    detect_indented_lists: bool = False  # Treat marker-less indented lines as bullets.
    dehyphenate: bool = True
    line_height_threshold: float = 5.0  # Max vertical delta between items of one line.
    indentation_threshold: float = 10.0  # Min x difference that changes list nesting.
    paragraph_gap_ratio: float = 0.5  # Gap above previous.height * ratio breaks a paragraph.
    indent_unit: float = 20.0
    h1_font_size: float = 22.0
    h2_font_size: float = 18.0
    h3_font_size: float = 15.0
    bold_heading_font_size: float = 14.0  # All-bold lines from this size up become H3.
    indented_list_min_offset: float = 36.0
    bullet_marker: str | None = None  # Replace every bullet marker when set.
    page_separator: str = "\n\n"

    def __post_init__(self):
        positive = (
            "line_height_threshold",
            "indent_unit",
            "h1_font_size",
            "h2_font_size",
            "h3_font_size",
            "bold_heading_font_size",
        )
        for name in positive:
            value = getattr(self, name)
            if value <= 0:
                raise InvalidOptionsError(f"{name} must be positive, got {value}", name, value)

        for name in ("indentation_threshold", "paragraph_gap_ratio", "indented_list_min_offset"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidOptionsError(f"{name} must not be negative, got {value}", name, value)

        if not self.h1_font_size >= self.h2_font_size >= self.h3_font_size:
            raise InvalidOptionsError(
                "Heading font sizes must satisfy h1_font_size >= h2_font_size >= h3_font_size",
                "h1_font_size",
                (self.h1_font_size, self.h2_font_size, self.h3_font_size),
            )

        if self.bullet_marker is not None and not self.bullet_marker.strip():
            raise InvalidOptionsError("bullet_marker must not be blank", "bullet_marker", self.bullet_marker)
