"""Chapter extractor for EPUB packages.

This package recovers the ordered chapter list of an EPUB from its table of
contents, falling back to heuristics when the package has none, and converts
each chapter to paragraph-separated plain text.
"""

from .config import BaseConfig, ExtractorConfig
from .epub_extractor import extract_chapters, extract_epub_chapters
from .errors import BookError, ContainerError, ExtractionWarning, TocError
from .models import Chapter, ExtractionResult, PackageDescriptor, TocEntry

__all__ = [
    "BaseConfig",
    "BookError",
    "Chapter",
    "ContainerError",
    "ExtractionResult",
    "ExtractionWarning",
    "ExtractorConfig",
    "PackageDescriptor",
    "TocEntry",
    "TocError",
    "extract_chapters",
    "extract_epub_chapters",
]
