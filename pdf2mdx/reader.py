"""Document reader contract and its PyMuPDF implementation.

The pipeline only talks to the protocols defined here. Coordinates reported by
a reader use the PDF user space convention: origin at the bottom-left corner of
the page, y growing upwards. The layout extractor converts them to a top-left
origin.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

import fitz  # PyMuPDF

from pdf2mdx.exceptions import DocumentOpenError, PageExtractionError, PageFetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRun:
    """One contiguous styled text fragment as reported by the document source.

    ``transform`` is the run's positioning matrix ``[a, b, c, d, e, f]``: ``a``
    and ``d`` hold the font scale, ``e`` and ``f`` the origin.
    """

    text: str
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float
    font_name: str = ""


@dataclass(frozen=True)
class LinkRect:
    """A link annotation rectangle ``(x1, y1, x2, y2)`` and its target."""

    rect: tuple[float, float, float, float]
    url: str


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


class PageHandle(Protocol):
    def get_text_runs(self) -> list[TextRun]: ...

    def get_viewport(self) -> Viewport: ...

    def get_link_rects(self) -> list[LinkRect]: ...

    def close(self) -> None: ...


class DocumentHandle(Protocol):
    page_count: int

    def get_page(self, index: int) -> PageHandle: ...

    def close(self) -> None: ...


class DocumentReader(Protocol):
    def open_document(self, source) -> DocumentHandle: ...


class PyMuPDFPage:
    """PageHandle over a ``fitz.Page``."""

    def __init__(self, page: fitz.Page, page_number: int):
        self._page = page
        self.page_number = page_number

    def _require_page(self) -> fitz.Page:
        if self._page is None:
            raise PageExtractionError(f"Page {self.page_number} is closed", page_number=self.page_number)
        return self._page

    def get_viewport(self) -> Viewport:
        rect = self._require_page().rect
        return Viewport(width=rect.width, height=rect.height)

    def get_text_runs(self) -> list[TextRun]:
        """Read every text span of the page as a TextRun.

        Returns:
            List of TextRun objects in content stream order.
        """
        page = self._require_page()
        page_height = page.rect.height
        runs = []
        text_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)

        for block in text_dict.get("blocks", []):
            if block.get("type") != 0:  # Skip non-text blocks.
                continue

            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    if not text:
                        continue

                    x0, y0, x1, y1 = span.get("bbox", (0, 0, 0, 0))
                    size = float(span.get("size", 0.0))
                    # Re-express the span's top edge in bottom-left user space.
                    runs.append(
                        TextRun(
                            text=text,
                            transform=(size, 0.0, 0.0, size, x0, page_height - y0),
                            width=x1 - x0,
                            height=y1 - y0,
                            font_name=span.get("font", ""),
                        )
                    )

        return runs

    def get_link_rects(self) -> list[LinkRect]:
        """Read the URI link annotations of the page."""
        page = self._require_page()
        page_height = page.rect.height
        rects = []
        for link in page.get_links():
            uri = link.get("uri", "")
            if not uri:
                continue
            area = fitz.Rect(link.get("from", (0, 0, 0, 0)))
            rects.append(LinkRect(rect=(area.x0, page_height - area.y1, area.x1, page_height - area.y0), url=uri))
        return rects

    def close(self) -> None:
        # fitz pages are released with their last reference.
        self._page = None


class PyMuPDFDocument:
    """DocumentHandle over a ``fitz.Document``."""

    def __init__(self, doc: fitz.Document):
        self._doc = doc
        self.page_count = len(doc)

    def get_page(self, index: int) -> PyMuPDFPage:
        """Load a page.

        Args:
            index: One-based page number.

        Returns:
            The page handle.
        """
        if not 1 <= index <= self.page_count:
            raise PageFetchError(f"Page {index} is out of range (1-{self.page_count})", page_number=index)
        try:
            page = self._doc.load_page(index - 1)
        except Exception as e:
            raise PageFetchError(f"Could not load page {index}: {e}", page_number=index, original_error=e) from e
        return PyMuPDFPage(page, index)

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None


class PyMuPDFReader:
    """DocumentReader backed by PyMuPDF.

    Accepts a file path, raw PDF bytes, or a binary stream.
    """

    def open_document(self, source: str | Path | bytes | BinaryIO) -> PyMuPDFDocument:
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise DocumentOpenError(f"PDF file not found: {path}")
            open_kwargs = {"filename": str(path)}
        else:
            data = source if isinstance(source, (bytes, bytearray)) else source.read()
            if not data:
                raise DocumentOpenError("PDF data is empty")
            open_kwargs = {"stream": bytes(data), "filetype": "pdf"}

        try:
            doc = fitz.open(**open_kwargs)
        except Exception as e:
            raise DocumentOpenError(f"Could not open PDF: {e}", original_error=e) from e

        if doc.needs_pass:
            doc.close()
            raise DocumentOpenError("PDF is password protected")

        logger.debug("Opened PDF with %d pages", len(doc))
        return PyMuPDFDocument(doc)
