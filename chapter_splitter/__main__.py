"""Command-line interface for the chapter splitter.

Usage:
    python -m chapter_splitter book.epub --output exports/
    python -m chapter_splitter book.epub --config export.json --format pdf
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from chapter_extractor.config import ExtractorConfig

from .config import ExportConfig
from .job import export_job, import_job

# Flag name -> ExportConfig field
OVERRIDES = {
    "pattern": "pattern",
    "start": "start_number",
    "offset": "offset",
    "skip_last": "skip_last",
    "mode": "mode",
    "group_size": "group_size",
    "format": "output_format",
    "font_size": "font_size",
    "cjk_font": "cjk_font",
    "latin_font": "latin_font",
    "select": "selection",
}


def load_config(config_path: Path) -> dict[str, Any]:
    """Load export settings from a JSON file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        json.JSONDecodeError: If config file is invalid JSON
    """
    with config_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def parse_selection(value: str) -> list[int]:
    """Parse "0,2,5-7" into [0, 2, 5, 6, 7]."""
    indices: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            first, last = part.split("-", 1)
            indices.extend(range(int(first), int(last) + 1))
        else:
            indices.append(int(part))
    return indices


def build_config(args: argparse.Namespace) -> ExportConfig:
    settings = load_config(args.config) if args.config else {}
    for flag, name in OVERRIDES.items():
        value = getattr(args, flag)
        if value is not None:
            settings[name] = value
    return ExportConfig.from_dict(settings)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for chapter splitter CLI."""
    parser = argparse.ArgumentParser(
        description="Split an EPUB into numbered chapter files packaged as one ZIP archive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One text file per chapter: Chapter01.txt, Chapter02.txt, ...
  python -m chapter_splitter book.epub --output exports/

  # PDFs of four chapters each, numbered from 10
  python -m chapter_splitter book.epub --format pdf --mode grouped --group-size 4 --start 10

  # Export chapters 3 to 8 only, skipping the first of them
  python -m chapter_splitter book.epub --select 3-8 --offset 1

  # Settings from a JSON file (ExportConfig fields), flags take precedence
  python -m chapter_splitter book.epub --config export.json --pattern Part

  # Write a default configuration file and exit
  python -m chapter_splitter --create-config
        """,
    )

    parser.add_argument("input", nargs="?", type=Path, help="Input EPUB file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="Directory to write the archive to (default: current directory)",
    )
    parser.add_argument("-c", "--config", type=Path, help="JSON file with export settings")
    parser.add_argument(
        "--create-config",
        action="store_true",
        help="Create a default configuration file (export_config.json) and exit",
    )
    parser.add_argument("--list", action="store_true", help="List the chapters found and exit")
    parser.add_argument("--pattern", help='Filename prefix (default: "Chapter")')
    parser.add_argument("--start", type=int, help="Number of the first exported chapter (default: 1)")
    parser.add_argument("--offset", type=int, help="Skip this many chapters at the start (default: 0)")
    parser.add_argument("--skip-last", type=int, help="Skip this many chapters at the end (default: 0)")
    parser.add_argument("--mode", choices=["single", "grouped"], help="One file per chapter or grouped")
    parser.add_argument("--group-size", type=int, help="Chapters per file in grouped mode (default: 4)")
    parser.add_argument("--format", choices=["txt", "pdf", "docx"], help="Output format (default: txt)")
    parser.add_argument("--font-size", type=float, help="PDF body font size (default: 14)")
    parser.add_argument("--cjk-font", help="PDF font for CJK text: built-in name, file or URL")
    parser.add_argument("--latin-font", help="PDF font for other text: built-in name, file or URL")
    parser.add_argument(
        "--select",
        type=parse_selection,
        help='Chapter indices to export, e.g. "0,2,5-9" (default: all)',
    )
    parser.add_argument(
        "--min-chars",
        type=int,
        default=20,
        help="Chapters shorter than this many characters are skipped (default: 20)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print verbose progress information")

    args = parser.parse_args(argv)

    if args.create_config:
        config_path = Path("export_config.json")
        ExportConfig().to_json(config_path)
        print(f"Created default configuration: {config_path}")
        return 0

    if not args.input:
        parser.error("input file is required (or use --create-config)")

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    if args.config and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = build_config(args)
        extractor_config = ExtractorConfig(min_chars=args.min_chars, verbose=args.verbose)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in config file: {e}", file=sys.stderr)
        return 1
    except (TypeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    imported = import_job(args.input.read_bytes(), extractor_config)
    if not imported.success:
        print(f"Error [{imported.code}]: {imported.message}", file=sys.stderr)
        return 1

    print(imported.message)
    if args.verbose:
        for warning in imported.warnings:
            print(f"  warning: {warning}")

    if args.list:
        for chapter in imported.extraction.chapters:
            print(f"{chapter.index:4d}  {chapter.title}")
        return 0

    result = export_job(
        imported.extraction,
        config,
        verbose=args.verbose,
        show_progress=not args.verbose,
    )
    if not result.success:
        print(f"Error [{result.code}]: {result.message}", file=sys.stderr)
        return 1

    path = result.archive.write(args.output)
    print(result.message)
    print(f"  Output: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
