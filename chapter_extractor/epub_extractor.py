"""EPUB chapter extractor."""

import re
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from .config import ExtractorConfig
from .errors import TocError, WarningLog
from .markup import decode_bytes, document_body, epub_types, find_by_id, local_name, parse_markup, section_ancestor
from .models import Chapter, ExtractionResult, PackageDescriptor, TocEntry
from .package import open_package, read_entry, resolve_package
from .strategies import apply_strategies
from .text_normalizer import markup_to_text
from .toc import resolve_toc


def safe_filename(name: str, default: str = "chapter") -> str:
    """Convert a string to a safe filename.

    Args:
        name: The original name
        default: Default name if result is empty

    Returns:
        A safe filename string
    """
    # Replace any non-word/non-dash/non-dot characters with underscore
    slug = re.sub(r"[^\w.-]+", "_", name.strip())
    # Remove leading/trailing underscores and dots
    slug = slug.strip("._")
    return slug or default


@dataclass
class LoadedDocument:
    path: str
    document: BeautifulSoup | None
    problems: list[str]


def load_document(archive: zipfile.ZipFile, path: str) -> LoadedDocument:
    """Read, decode and parse one content document.

    Problems are returned rather than raised so documents can be loaded on
    worker threads and reported in reading order afterwards.
    """
    problems: list[str] = []
    raw = read_entry(archive, path)
    if raw is None:
        return LoadedDocument(path, None, [f"Content file not found: {path}"])

    decoded = decode_bytes(raw)
    if decoded.lossy:
        problems.append(f"{path} could not be fully decoded; unreadable bytes were replaced.")
    elif not decoded.is_utf8:
        problems.append(f"{path} is not UTF-8; decoded as {decoded.encoding}.")

    try:
        document, _ = parse_markup(decoded.text)
    except Exception as e:
        problems.append(f"Could not parse {path}: {e}")
        return LoadedDocument(path, None, problems)
    return LoadedDocument(path, document, problems)


def load_documents(archive: zipfile.ZipFile, paths: list[str], max_workers: int) -> list[LoadedDocument]:
    """Load documents concurrently; results keep the order of ``paths``."""
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(lambda path: load_document(archive, path), paths))


def locate_chapter_node(
    document: BeautifulSoup, fragment_id: str | None, log: WarningLog, path: str = ""
) -> Tag | BeautifulSoup:
    """Find the subtree holding a chapter.

    With a fragment id, the nearest sectioning container around the target
    element is used. Otherwise (or if that fails) the first
    ``section[epub:type=chapter]``, then the first ``section``, then the body.
    """
    if fragment_id:
        target = find_by_id(document, fragment_id)
        if target is None:
            log.warn(f"Fragment #{fragment_id} not found in {path}")
        else:
            section = section_ancestor(target)
            if section is not None:
                return section

    sections = [tag for tag in document.find_all(True) if local_name(tag) == "section"]
    for section in sections:
        if "chapter" in epub_types(section):
            return section
    if sections:
        return sections[0]
    return document_body(document)


def _chapters_from_toc(
    archive: zipfile.ZipFile, entries: list[TocEntry], config: ExtractorConfig, log: WarningLog
) -> list[Chapter]:
    paths = [entry.target_path for entry in entries]
    loaded = load_documents(archive, paths, config.max_workers)

    chapters: list[Chapter] = []
    for entry, item in zip(entries, loaded):
        for problem in item.problems:
            log.warn(problem)
        if item.document is None:
            continue

        node = locate_chapter_node(item.document, entry.fragment_id, log, entry.target_path)
        text = markup_to_text(node)
        if len(text) < config.min_chars:
            log.warn(f'Chapter "{entry.title}" has insufficient content ({len(text)} chars); skipped.')
            continue

        chapters.append(Chapter(index=entry.original_index, title=entry.title, text=text))
        log.info(f"  [{entry.original_index:04d}] {entry.title} ({len(text)} chars)")
    return chapters


def _chapters_from_reading_order(
    archive: zipfile.ZipFile, descriptor: PackageDescriptor, config: ExtractorConfig, log: WarningLog
) -> list[Chapter]:
    loaded = load_documents(archive, descriptor.reading_paths(), config.max_workers)

    chapters: list[Chapter] = []
    for item in loaded:
        for problem in item.problems:
            log.warn(problem)
        if item.document is None:
            continue

        drafts = apply_strategies(item.document, config.min_chars)
        if not drafts:
            log.info(f"  Skipping item (too short): {item.path}")
            continue

        for draft in drafts:
            title = draft.title or f"Chapter {len(chapters) + 1}"
            if len(draft.text) < config.min_chars:
                log.warn(f'Chapter "{title}" in {item.path} has insufficient content ({len(draft.text)} chars); skipped.')
                continue
            chapters.append(Chapter(index=len(chapters), title=title, text=draft.text))
            log.info(f"  [{len(chapters) - 1:04d}] {title} ({len(draft.text)} chars)")
    return chapters


def extract_chapters(data: bytes, config: ExtractorConfig | None = None) -> ExtractionResult:
    """Extract the ordered chapter list of an EPUB.

    The table of contents drives extraction. Without one (or when it yields
    nothing) every reading-order document is scanned with the heuristic
    strategies instead, and a warning is recorded.

    Args:
        data: Raw bytes of the EPUB file
        config: Extraction settings (default: ``ExtractorConfig()``)

    Returns:
        ExtractionResult with chapters in reading order and collected warnings

    Raises:
        ContainerError: If container.xml or the package descriptor is unusable
        TocError: If neither the table of contents nor the fallback finds a chapter
    """
    config = config or ExtractorConfig()
    log = WarningLog(verbose=config.verbose)

    with open_package(data) as archive:
        descriptor = resolve_package(archive)
        log.info(f"Package descriptor: {descriptor.descriptor_path}")

        try:
            entries = resolve_toc(archive, descriptor, log)
        except TocError as err:
            log.warn(f"{err} Falling back to scanning content files.")
            entries = []

        chapters = _chapters_from_toc(archive, entries, config, log) if entries else []
        used_toc = bool(chapters)
        if entries and not chapters:
            log.warn("The table of contents yielded no chapters; scanning content files instead.")
        if not chapters:
            chapters = _chapters_from_reading_order(archive, descriptor, config, log)

    if not chapters:
        raise TocError("No chapters found. Check the EPUB structure.")

    log.info(f"Extracted {len(chapters)} chapters")
    return ExtractionResult(chapters=chapters, warnings=log.messages, used_toc=used_toc, descriptor=descriptor)


def extract_epub_chapters(
    epub_path: Path,
    output_dir: Path,
    verbose: bool = False,
    config: ExtractorConfig | None = None,
) -> list[Path]:
    """Extract chapters from an EPUB file into numbered text files.

    Chapters are saved as text files with names like:
        0001_chapter_title.txt
        0002_another_chapter.txt
        ...

    This ensures proper lexicographic ordering when listing files.

    Args:
        epub_path: Path to the EPUB file
        output_dir: Directory to save extracted chapters
        verbose: Whether to print progress information
        config: Extraction settings

    Returns:
        List of paths to extracted chapter files

    Raises:
        FileNotFoundError: If EPUB file doesn't exist
    """
    if not epub_path.exists():
        raise FileNotFoundError(f"EPUB file not found: {epub_path}")

    config = config or ExtractorConfig(verbose=verbose)
    output_dir.mkdir(parents=True, exist_ok=True)

    if verbose:
        print(f"Extracting chapters from: {epub_path}")
        print(f"Output directory: {output_dir}")

    result = extract_chapters(epub_path.read_bytes(), config)

    extracted_files = []
    seen_titles: dict[str, int] = {}
    for position, chapter in enumerate(result.chapters, 1):
        title = chapter.title
        # Handle duplicate titles
        if title in seen_titles:
            seen_titles[title] += 1
            title = f"{title}_{seen_titles[title]}"
        else:
            seen_titles[title] = 1

        stem = safe_filename(title, default=f"chapter_{position:04d}")
        out_path = output_dir / f"{position:04d}_{stem}.txt"
        out_path.write_text(chapter.text, encoding="utf-8")
        extracted_files.append(out_path)

    if verbose:
        print(f"\nExtracted {len(extracted_files)} chapters to {output_dir}")

    return extracted_files
