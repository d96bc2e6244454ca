"""PDF to MDX conversion facade."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from pdf2mdx.builder import StructureBuilder
from pdf2mdx.classifier import ElementClassifier
from pdf2mdx.exceptions import ConversionError, DocumentOpenError, PageExtractionError, PageFetchError
from pdf2mdx.extractor import extract_page_items
from pdf2mdx.grouper import group_lines
from pdf2mdx.options import ConversionOptions
from pdf2mdx.reader import DocumentReader, PageHandle, PyMuPDFReader
from pdf2mdx.renderer import MarkdownRenderer, clean_up


ProgressCallback = Callable[[float], None]


@dataclass
class ConversionResult:
    """Accumulated output of one conversion."""

    total_pages: int
    pages: list[str] = field(default_factory=list)
    skipped_pages: list[int] = field(default_factory=list)
    pages_done: int = 0

    @property
    def progress(self) -> float:
        """Fraction of pages processed, in [0, 1]."""
        if self.total_pages <= 0:
            return 1.0
        return self.pages_done / self.total_pages

    def join(self, separator: str) -> str:
        """Join the non-empty page outputs into the final document."""
        markdown = separator.join(page.strip() for page in self.pages if page.strip())
        return clean_up(markdown).strip()


class MDXConverter:
    """Converts paginated documents to MDX.

    Each page is extracted, grouped into lines, classified, built into a
    structure tree and rendered independently, so list and paragraph state
    never crosses a page boundary.
    """

    def __init__(
        self,
        options: ConversionOptions | None = None,
        reader: DocumentReader | None = None,
        logger: logging.Logger | None = None,
    ):
        """Initialize the converter.

        Args:
            options: Conversion options. Uses defaults if not provided.
            reader: Document reader. Uses PyMuPDF if not provided.
            logger: Logger for progress and page failures. Uses the module logger if not provided.
        """
        self.options = options or ConversionOptions()
        self.reader = reader or PyMuPDFReader()
        self.logger = logger or logging.getLogger(__name__)
        self.classifier = ElementClassifier(self.options)
        self.builder = StructureBuilder(self.options)
        self.renderer = MarkdownRenderer(self.options)

    def convert(self, source, progress_callback: ProgressCallback | None = None) -> str:
        """Convert a document to MDX.

        Args:
            source: Anything the reader accepts (path, bytes, stream).
            progress_callback: Called with the percentage done after each page.

        Returns:
            The MDX document.

        Raises:
            ConversionError: If the document cannot be opened.
        """
        result = self.convert_to_result(source, progress_callback)
        return result.join(self.options.page_separator)

    def convert_to_result(self, source, progress_callback: ProgressCallback | None = None) -> ConversionResult:
        """Convert a document and return the per-page accumulator.

        Args:
            source: Anything the reader accepts (path, bytes, stream).
            progress_callback: Called with the percentage done after each page.

        Returns:
            ConversionResult with one entry per processed page.

        Raises:
            ConversionError: If the document cannot be opened.
        """
        try:
            document = self.reader.open_document(source)
        except DocumentOpenError as e:
            self.logger.error("Could not open document: %s", e.message)
            raise ConversionError(f"Failed to open document: {e.message}", original_error=e) from e

        try:
            total = document.page_count
            result = ConversionResult(total_pages=total)
            self.logger.info("Converting document with %d pages", total)

            for page_number in range(1, total + 1):
                result.pages.append(self._convert_page(document, page_number, result))
                result.pages_done = page_number
                self._report_progress(progress_callback, page_number * 100.0 / total)

            if total == 0:
                self._report_progress(progress_callback, 100.0)

            return result
        finally:
            document.close()

    def convert_file(self, pdf_path: str | Path, output_path: str | Path | None = None) -> str:
        """Convert a PDF file to MDX.

        Args:
            pdf_path: Path to the input PDF file.
            output_path: Optional path to write the MDX output.

        Returns:
            The generated MDX content as a string.
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        mdx = self.convert(pdf_path)

        if output_path:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(mdx, encoding="utf-8")

        return mdx

    def convert_stream(self, stream: BinaryIO) -> str:
        """Convert a PDF from a binary stream to MDX."""
        return self.convert_bytes(stream.read())

    def convert_bytes(self, pdf_data: bytes) -> str:
        """Convert PDF bytes to MDX."""
        return self.convert(pdf_data)

    def _convert_page(self, document, page_number: int, result: ConversionResult) -> str:
        """Convert one page, returning an empty string when the page fails."""
        page: PageHandle | None = None
        try:
            page = document.get_page(page_number)
            items = extract_page_items(page, page_number - 1, self.options.preserve_hyperlinks)
        except (PageFetchError, PageExtractionError) as e:
            self.logger.warning("Skipping page %d: %s", page_number, e.message)
            result.skipped_pages.append(page_number)
            return ""
        finally:
            if page is not None:
                page.close()

        lines = group_lines(items, self.options.line_height_threshold)
        elements = self.classifier.classify(lines)
        nodes = self.builder.build(elements)
        self.logger.debug(
            "Page %d: %d items, %d lines, %d nodes", page_number, len(items), len(lines), len(nodes)
        )
        return self.renderer.render(nodes)

    def _report_progress(self, progress_callback: ProgressCallback | None, percent: float) -> None:
        if progress_callback is None:
            return
        try:
            progress_callback(percent)
        except Exception as e:
            self.logger.warning("Progress callback failed: %s", e)
