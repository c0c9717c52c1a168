"""Import and export jobs.

These are the boundaries a front end talks to: ``import_job`` turns EPUB bytes
into a chapter list, ``export_job`` turns a selection plus an ``ExportConfig``
into one archive. Both catch ``BookError`` and report it as a ``JobResult``
rather than raising.
"""

from dataclasses import dataclass, field

from tqdm import tqdm

from chapter_extractor.config import ExtractorConfig
from chapter_extractor.epub_extractor import extract_chapters
from chapter_extractor.errors import BookError
from chapter_extractor.models import Chapter, ExtractionResult

from .config import ExportConfig
from .docx_emitter import DocxEmitter
from .emitter import Emitter
from .packager import Archive, archive_name, build_archive
from .pdf_emitter import PdfEmitter, PdfEmitterConfig
from .planner import ExportPlan, plan_export
from .text_emitter import TextEmitter

FORMAT_DESCRIPTIONS = {
    "txt": ".txt files in a ZIP archive",
    "pdf": "PDFs in a ZIP archive",
    "docx": ".docx files in a ZIP archive",
}


@dataclass
class JobResult:
    """Outcome of one job.

    Args:
        success: Whether the job finished
        message: Human-readable status line
        code: Error code when the job failed
        archive: The export archive (export jobs only)
        extraction: The extracted chapters (import jobs only)
        warnings: Non-fatal problems met along the way
    """

    success: bool
    message: str
    code: str | None = None
    archive: Archive | None = None
    extraction: ExtractionResult | None = None
    warnings: list[str] = field(default_factory=list)


def create_emitter(config: ExportConfig) -> Emitter:
    """Emitter for ``config.output_format``."""
    if config.output_format == "pdf":
        return PdfEmitter(
            PdfEmitterConfig(
                font_size=config.font_size,
                cjk_font=config.cjk_font,
                latin_font=config.latin_font,
            )
        )
    if config.output_format == "docx":
        return DocxEmitter()
    return TextEmitter()


def run_export(
    chapters: list[Chapter],
    config: ExportConfig,
    verbose: bool = False,
    show_progress: bool = False,
) -> Archive:
    """Plan, emit and package one export.

    Args:
        chapters: Selected chapters in extraction order
        config: Export settings
        verbose: Print one line per emitted file
        show_progress: Show a tqdm progress bar over output files

    Returns:
        The archive holding every output file

    Raises:
        EmptySelection: If nothing is left to export
        FontLoadError: If PDF fonts cannot be loaded
    """
    units = plan_export(chapters, ExportPlan.from_config(config))
    emitter = create_emitter(config)
    if verbose:
        print(f"Exporting {len(units)} file(s) with {emitter!r}")

    files = []
    for unit in tqdm(units, desc="Exporting", unit="file", disable=not show_progress):
        emitted = emitter.emit_file(unit)
        if verbose:
            print(f"  {emitted.filename} ({len(unit.chapters)} chapter(s), {len(emitted.data)} bytes)")
        files.append(emitted)

    return build_archive(files, archive_name(config.pattern, emitter.archive_suffix))


def import_job(data: bytes, config: ExtractorConfig | None = None) -> JobResult:
    """Extract chapters from EPUB bytes, reporting failure as a result."""
    try:
        extraction = extract_chapters(data, config)
    except BookError as e:
        return JobResult(success=False, message=str(e), code=e.code)

    count = len(extraction.chapters)
    message = f"Found {count} chapter(s)."
    if not extraction.used_toc:
        message += " No usable table of contents; chapters were detected from the content."
    return JobResult(
        success=True,
        message=message,
        extraction=extraction,
        warnings=list(extraction.warnings),
    )


def export_job(
    source: ExtractionResult | list[Chapter],
    config: ExportConfig,
    verbose: bool = False,
    show_progress: bool = False,
) -> JobResult:
    """Export the selected chapters, reporting failure as a result.

    A failed export never carries a partial archive.

    Args:
        source: An import result, or chapters already selected
        config: Export settings; ``config.selection`` picks chapters by index
        verbose: Print progress information
        show_progress: Show a progress bar over output files
    """
    if isinstance(source, ExtractionResult):
        chapters = source.select(config.selection)
    elif config.selection is not None:
        wanted = set(config.selection)
        chapters = [chapter for chapter in source if chapter.index in wanted]
    else:
        chapters = list(source)

    try:
        archive = run_export(chapters, config, verbose=verbose, show_progress=show_progress)
    except BookError as e:
        return JobResult(success=False, message=str(e), code=e.code)

    count = len(archive.names())
    return JobResult(
        success=True,
        message=f"Exported {count} file(s) as {FORMAT_DESCRIPTIONS[config.output_format]}: {archive.filename}",
        archive=archive,
    )
