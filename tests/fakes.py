"""In-memory document reader used by the tests."""

from pdf2mdx.exceptions import DocumentOpenError, PageFetchError
from pdf2mdx.reader import LinkRect, TextRun, Viewport

PAGE_WIDTH = 600.0
PAGE_HEIGHT = 800.0


def make_run(text, x=50.0, top=100.0, size=12.0, font="Times-Roman", width=None, height=None):
    """Build a TextRun whose top edge sits ``top`` units below the top of the page."""
    return TextRun(
        text=text,
        transform=(size, 0.0, 0.0, size, x, PAGE_HEIGHT - top),
        width=width if width is not None else len(text) * size * 0.5,
        height=height if height is not None else size,
        font_name=font,
    )


def make_link(x0, top, x1, bottom, url):
    """Build a LinkRect from top-left origin coordinates."""
    return LinkRect(rect=(x0, PAGE_HEIGHT - bottom, x1, PAGE_HEIGHT - top), url=url)


class FakePage:
    """PageHandle returning canned runs and links."""

    def __init__(self, runs=None, links=None, error=None):
        self.runs = list(runs or [])
        self.links = list(links or [])
        self.error = error
        self.closed = False
        self.link_requests = 0

    def get_viewport(self):
        return Viewport(width=PAGE_WIDTH, height=PAGE_HEIGHT)

    def get_text_runs(self):
        if self.error is not None:
            raise self.error
        return self.runs

    def get_link_rects(self):
        self.link_requests += 1
        return self.links

    def close(self):
        self.closed = True


class FakeDocument:
    """DocumentHandle over a list of FakePage objects.

    A list entry that is an exception makes ``get_page`` fail for that page.
    """

    def __init__(self, pages):
        self.pages = pages
        self.page_count = len(pages)
        self.closed = False
        self.requested = []

    def get_page(self, index):
        self.requested.append(index)
        page = self.pages[index - 1]
        if isinstance(page, Exception):
            raise PageFetchError(f"Could not load page {index}", page_number=index, original_error=page)
        return page

    def close(self):
        self.closed = True


class FakeReader:
    """DocumentReader returning a fixed document, or failing to open."""

    def __init__(self, document=None, error=None):
        self.document = document
        self.error = error
        self.sources = []

    def open_document(self, source):
        self.sources.append(source)
        if self.error is not None:
            raise DocumentOpenError(str(self.error), original_error=self.error)
        return self.document
