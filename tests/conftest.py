"""Pytest configuration and shared fixtures."""

import pytest

from fakes import FakeDocument, FakePage, FakeReader
from pdf2mdx import ConversionOptions, MDXConverter


@pytest.fixture
def no_feature_options():
    """Return options with all optional features disabled."""
    return ConversionOptions(
        preserve_hyperlinks=False,
        detect_headings=False,
        detect_lists=False,
        detect_bold_italic=False,
        dehyphenate=False,
    )


@pytest.fixture
def single_page_converter():
    """Return a factory building a converter over one fake page of runs."""

    def build(runs, links=None, options=None):
        reader = FakeReader(FakeDocument([FakePage(runs, links)]))
        return MDXConverter(options, reader=reader)

    return build
