"""Exceptions raised by the PDF to MDX converter.

Exception Hierarchy
-------------------
- Pdf2MdxError (base exception)
  - InvalidOptionsError (option validation)
  - DocumentOpenError (document cannot be opened, fatal)
  - PageFetchError (a single page cannot be loaded, recovered)
  - PageExtractionError (a single page's text cannot be read, recovered)
  - ConversionError (the one error surfaced by the converter)
"""

from typing import Any


class Pdf2MdxError(Exception):
    """Base class for all pdf2mdx errors.

    Args:
        message: Human-readable description of the error.
        original_error: The exception that caused this one, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidOptionsError(Pdf2MdxError):
    """Raised when ConversionOptions hold an invalid value."""

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class DocumentOpenError(Pdf2MdxError):
    """Raised when the source document cannot be opened."""


class PageFetchError(Pdf2MdxError):
    """Raised when a page handle cannot be obtained from an open document."""

    def __init__(self, message: str, page_number: int | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.page_number = page_number


class PageExtractionError(Pdf2MdxError):
    """Raised when the text runs or links of a page cannot be extracted."""

    def __init__(self, message: str, page_number: int | None = None, original_error: Exception | None = None):
        super().__init__(message, original_error=original_error)
        self.page_number = page_number


class ConversionError(Pdf2MdxError):
    """Raised when a conversion fails as a whole."""
