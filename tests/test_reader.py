"""Tests for the PyMuPDF document reader, using PDFs built in memory."""

import fitz  # PyMuPDF
import pytest

from pdf2mdx import ConversionError, MDXConverter
from pdf2mdx.exceptions import DocumentOpenError, PageExtractionError, PageFetchError
from pdf2mdx.extractor import extract_page_items
from pdf2mdx.reader import PyMuPDFReader


def make_pdf(*page_builders) -> bytes:
    """Create a PDF with one page per builder callable."""
    doc = fitz.open()
    for build in page_builders:
        page = doc.new_page(width=612, height=792)
        build(page)
    data = doc.tobytes()
    doc.close()
    return data


def text_page(text, fontsize=11, fontname="helv", point=(72, 100)):
    def build(page):
        page.insert_text(point, text, fontsize=fontsize, fontname=fontname)

    return build


def blank_page(page):
    pass


@pytest.fixture
def reader():
    return PyMuPDFReader()


class TestPyMuPDFReader:
    """Tests for opening documents and reading pages."""

    def test_open_bytes(self, reader):
        """Raw bytes open as a document."""
        document = reader.open_document(make_pdf(blank_page, blank_page))

        assert document.page_count == 2
        document.close()

    def test_open_path(self, reader, tmp_path):
        """A file path opens as a document."""
        pdf_path = tmp_path / "doc.pdf"
        pdf_path.write_bytes(make_pdf(blank_page))

        document = reader.open_document(pdf_path)

        assert document.page_count == 1
        document.close()

    def test_missing_file(self, reader):
        """A missing path is a DocumentOpenError."""
        with pytest.raises(DocumentOpenError, match="not found"):
            reader.open_document("/nonexistent/file.pdf")

    def test_invalid_bytes(self, reader):
        """Data that is not a PDF is a DocumentOpenError."""
        with pytest.raises(DocumentOpenError):
            reader.open_document(b"this is not a pdf")

    def test_empty_bytes(self, reader):
        """Empty data is a DocumentOpenError."""
        with pytest.raises(DocumentOpenError, match="empty"):
            reader.open_document(b"")

    def test_page_out_of_range(self, reader):
        """Requesting a page past the end is a PageFetchError."""
        document = reader.open_document(make_pdf(blank_page))

        with pytest.raises(PageFetchError):
            document.get_page(2)
        document.close()

    def test_text_runs(self, reader):
        """Spans are reported with their size, font and a bottom-left origin."""
        document = reader.open_document(make_pdf(text_page("Hello world", fontsize=12)))
        page = document.get_page(1)

        runs = page.get_text_runs()
        viewport = page.get_viewport()

        assert [run.text for run in runs] == ["Hello world"]
        run = runs[0]
        assert run.transform[0] == pytest.approx(12)
        assert run.transform[4] == pytest.approx(72, abs=1)
        # The run's top edge sits above the baseline at y=100 (top-left origin).
        assert 80 < viewport.height - run.transform[5] < 100
        assert "Helvetica" in run.font_name
        assert viewport.height == 792
        page.close()
        document.close()

    def test_closed_page_raises(self, reader):
        """A released page can no longer be read."""
        document = reader.open_document(make_pdf(text_page("Text")))
        page = document.get_page(1)
        page.close()

        with pytest.raises(PageExtractionError):
            page.get_text_runs()
        document.close()

    def test_bold_font_detected(self, reader):
        """Bold base-14 fonts are flagged bold by the extractor."""
        document = reader.open_document(make_pdf(text_page("Strong", fontname="hebo")))
        page = document.get_page(1)

        items = extract_page_items(page, 0)

        assert items[0].is_bold is True
        page.close()
        document.close()

    def test_link_rects(self, reader):
        """URI links are reported in bottom-left user space."""

        def build(page):
            page.insert_text((72, 100), "Example link", fontsize=12)
            page.insert_link({"kind": fitz.LINK_URI, "from": fitz.Rect(70, 80, 300, 110), "uri": "https://example.com"})

        document = reader.open_document(make_pdf(build))
        page = document.get_page(1)

        links = page.get_link_rects()

        assert len(links) == 1
        assert links[0].url == "https://example.com"
        x1, y1, x2, y2 = links[0].rect
        assert (x1, x2) == pytest.approx((70, 300))
        assert (y1, y2) == pytest.approx((792 - 110, 792 - 80))
        page.close()
        document.close()


class TestPyMuPDFConversion:
    """End-to-end conversions through the default reader."""

    def test_heading(self):
        """Large text converts to a level one heading."""
        mdx = MDXConverter().convert_bytes(make_pdf(text_page("Main Title", fontsize=24)))

        assert mdx == "# Main Title"

    def test_paragraph(self):
        """Body text converts to a paragraph."""
        mdx = MDXConverter().convert_bytes(make_pdf(text_page("Hello world", fontsize=11)))

        assert mdx == "Hello world"

    def test_link(self):
        """Text under a URI link converts to a Markdown link."""

        def build(page):
            page.insert_text((72, 100), "Example link", fontsize=12)
            page.insert_link({"kind": fitz.LINK_URI, "from": fitz.Rect(70, 80, 300, 110), "uri": "https://example.com"})

        mdx = MDXConverter().convert_bytes(make_pdf(build))

        assert mdx == "[Example link](https://example.com)"

    def test_multi_page_progress(self, tmp_path):
        """Each page reports progress and the pages are joined in order."""
        pdf_path = tmp_path / "pages.pdf"
        pdf_path.write_bytes(make_pdf(text_page("Page one."), blank_page, text_page("Page three.")))
        progress = []

        mdx = MDXConverter().convert(pdf_path, progress.append)

        assert mdx == "Page one.\n\nPage three."
        assert progress == pytest.approx([100 / 3, 200 / 3, 100.0])
        assert progress[-1] == 100.0

    def test_invalid_document(self):
        """An unreadable document surfaces as ConversionError."""
        with pytest.raises(ConversionError):
            MDXConverter().convert_bytes(b"this is not a pdf")
