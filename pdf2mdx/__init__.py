"""PDF to MDX converter package."""

from pdf2mdx.converter import ConversionResult, MDXConverter
from pdf2mdx.exceptions import ConversionError, DocumentOpenError, Pdf2MdxError
from pdf2mdx.options import ConversionOptions

__all__ = [
    "MDXConverter",
    "ConversionOptions",
    "ConversionResult",
    "ConversionError",
    "DocumentOpenError",
    "Pdf2MdxError",
]
__version__ = "0.1.0"
