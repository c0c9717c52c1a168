"""Chapter splitter: export extracted chapters as numbered files.

Chapters are planned into output units (one per chapter, or grouped), emitted
as plain text, PDF or Word documents, and packaged into a single ZIP archive.
"""

from .config import ExportConfig
from .docx_emitter import DocxEmitter, DocxEmitterConfig
from .emitter import EmittedFile, Emitter, EmitterConfig
from .errors import EmptySelection, FontLoadError, InvalidExportConfig
from .fonts import FontCache, FontPair
from .job import JobResult, export_job, import_job, run_export
from .layout import DocumentModel, LayoutConfig, layout_document
from .packager import Archive, build_archive
from .pdf_emitter import PdfEmitter, PdfEmitterConfig
from .planner import ExportPlan, OutputUnit, plan_export
from .text_emitter import TextEmitter, TextEmitterConfig

__all__ = [
    "Archive",
    "DocumentModel",
    "DocxEmitter",
    "DocxEmitterConfig",
    "EmittedFile",
    "Emitter",
    "EmitterConfig",
    "EmptySelection",
    "ExportConfig",
    "ExportPlan",
    "FontCache",
    "FontLoadError",
    "FontPair",
    "InvalidExportConfig",
    "JobResult",
    "LayoutConfig",
    "OutputUnit",
    "PdfEmitter",
    "PdfEmitterConfig",
    "TextEmitter",
    "TextEmitterConfig",
    "build_archive",
    "export_job",
    "import_job",
    "layout_document",
    "plan_export",
    "run_export",
]
