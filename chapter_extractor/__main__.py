"""Command-line interface for the chapter extractor."""

import argparse
import sys
from pathlib import Path

from .config import ExtractorConfig
from .epub_extractor import extract_chapters, extract_epub_chapters
from .errors import BookError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for chapter extractor CLI."""
    parser = argparse.ArgumentParser(
        description="List or extract the chapters of an EPUB as plain text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the chapters found in an EPUB
  python -m chapter_extractor book.epub

  # Extract chapters to text files
  python -m chapter_extractor book.epub --output chapters/

  # Verbose output
  python -m chapter_extractor book.epub --output chapters/ --verbose

Output files will be named with lexicographic ordering:
  0001_chapter_name.txt
  0002_another_chapter.txt
  ...
        """,
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input EPUB file",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output directory for extracted chapters (omit to only list them)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "--min-chars",
        type=int,
        default=20,
        help="Chapters shorter than this many characters are skipped (default: 20)",
    )

    args = parser.parse_args(argv)

    # Validate input file
    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    if args.input.suffix.lower() != ".epub":
        print(f"Error: Unsupported file type: {args.input.suffix}", file=sys.stderr)
        print("Supported types: .epub", file=sys.stderr)
        return 1

    try:
        config = ExtractorConfig(min_chars=args.min_chars, verbose=args.verbose)

        if args.output is None:
            result = extract_chapters(args.input.read_bytes(), config)
            for chapter in result.chapters:
                print(f"{chapter.index:4d}  {chapter.title}  ({len(chapter.text)} chars)")
            print(f"{len(result.chapters)} chapters found")
            return 0

        files = extract_epub_chapters(
            epub_path=args.input,
            output_dir=args.output,
            verbose=args.verbose,
            config=config,
        )

        if not args.verbose:
            print(f"Successfully extracted {len(files)} chapters to {args.output}")

        return 0

    except BookError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
