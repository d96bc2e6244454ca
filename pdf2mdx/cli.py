"""Command-line interface for PDF to MDX conversion."""

import argparse
import logging
import sys
from pathlib import Path

from pdf2mdx.converter import MDXConverter
from pdf2mdx.exceptions import Pdf2MdxError
from pdf2mdx.options import ConversionOptions


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Command-line arguments. Uses sys.argv if None.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="pdf2mdx",
        description="Convert PDF documents to MDX, reconstructing headings, paragraphs, nested lists and links.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pdf2mdx document.pdf                    Convert to stdout
  pdf2mdx document.pdf -o output.mdx      Convert to file
  pdf2mdx *.pdf -o ./output/              Batch convert multiple files
        """,
    )

    parser.add_argument(
        "input",
        nargs="+",
        type=Path,
        help="Input PDF file(s) to convert",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file or directory. If directory, creates .mdx files with same names as inputs.",
    )

    parser.add_argument(
        "--no-links",
        action="store_true",
        help="Do not preserve hyperlinks",
    )

    parser.add_argument(
        "--no-headings",
        action="store_true",
        help="Do not detect headings based on font size",
    )

    parser.add_argument(
        "--no-lists",
        action="store_true",
        help="Do not detect list items",
    )

    parser.add_argument(
        "--no-formatting",
        action="store_true",
        help="Do not detect bold/italic formatting",
    )

    parser.add_argument(
        "--indented-lists",
        action="store_true",
        help="Treat indented lines without a marker as bullet items",
    )

    parser.add_argument(
        "--bullet-marker",
        help="Render every bullet with this marker instead of the original one",
    )

    parser.add_argument(
        "--page-separator",
        default="\n\n",
        help="String to insert between pages (default: blank line)",
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Print per-page progress percentages to stderr",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log conversion progress to stderr",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log debug details with timestamps and logger names",
    )

    parser.add_argument(
        "--log-file",
        help="Also write log output to this file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    return parser.parse_args(args)


def configure_logging(verbose: bool = False, debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """Configure the package logger for command-line use.

    Args:
        verbose: Log at INFO level.
        debug: Log at DEBUG level with timestamps and logger names.
        log_file: Optional path to tee log output to.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    package_logger = logging.getLogger("pdf2mdx")
    package_logger.setLevel(level)
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if debug else "%(levelname)s: %(message)s"
    formatter = logging.Formatter(format_str, datefmt="%Y-%m-%d %H:%M:%S" if debug else None)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            package_logger.warning("Could not create log file %s: %s", log_file, e)
        else:
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)

    return package_logger


def create_options(args: argparse.Namespace) -> ConversionOptions:
    """Create ConversionOptions from parsed arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Configured ConversionOptions object.
    """
    return ConversionOptions(
        preserve_hyperlinks=not args.no_links,
        detect_headings=not args.no_headings,
        detect_lists=not args.no_lists,
        detect_bold_italic=not args.no_formatting,
        detect_indented_lists=args.indented_lists,
        bullet_marker=args.bullet_marker,
        page_separator=args.page_separator,
    )


def _print_progress(percent: float) -> None:
    print(f"  {percent:5.1f}%", file=sys.stderr)


def process_single_file(
    input_path: Path,
    output_path: Path | None,
    converter: MDXConverter,
    show_progress: bool = False,
) -> bool:
    """Process a single PDF file.

    Args:
        input_path: Path to the input PDF.
        output_path: Path to write output, or None for stdout.
        converter: Configured MDXConverter instance.
        show_progress: Whether to print per-page progress.

    Returns:
        True if conversion succeeded, False otherwise.
    """
    logger = logging.getLogger("pdf2mdx.cli")

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return False

    if not input_path.suffix.lower() == ".pdf":
        logger.warning("%s may not be a PDF file", input_path)

    logger.info("Converting: %s", input_path)

    try:
        mdx = converter.convert(input_path, _print_progress if show_progress else None)
    except Pdf2MdxError as e:
        print(f"Error converting {input_path}: {e.message}", file=sys.stderr)
        return False

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(mdx, encoding="utf-8")
        logger.info("  -> %s", output_path)
    else:
        print(mdx)

    return True


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments. Uses sys.argv if None.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    parsed_args = parse_args(args)
    configure_logging(parsed_args.verbose, parsed_args.debug, parsed_args.log_file)

    try:
        options = create_options(parsed_args)
    except Pdf2MdxError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    converter = MDXConverter(options)

    input_files = parsed_args.input
    output = parsed_args.output

    success_count = 0
    error_count = 0

    if output and len(input_files) > 1:
        # Output is a directory for multiple files.
        output.mkdir(parents=True, exist_ok=True)
        targets = [(input_path, output / (input_path.stem + ".mdx")) for input_path in input_files]
    else:
        targets = [(input_path, output) for input_path in input_files]

    for input_path, output_path in targets:
        if process_single_file(input_path, output_path, converter, parsed_args.progress):
            success_count += 1
        else:
            error_count += 1

    if len(input_files) > 1:
        logging.getLogger("pdf2mdx.cli").info("Processed %d files, %d errors", success_count, error_count)

    return 0 if error_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
