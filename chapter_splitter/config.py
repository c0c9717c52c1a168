"""Export configuration."""

from dataclasses import dataclass
from typing import Literal

from chapter_extractor.config import BaseConfig

from .errors import InvalidExportConfig

DEFAULT_CJK_FONT = "china-s"
DEFAULT_LATIN_FONT = "helv"


@dataclass
class ExportConfig(BaseConfig):
    """Configuration for one export job.

    Args:
        pattern: Filename prefix for every output file (default: "Chapter")
        start_number: Number given to the first exported chapter (default: 1)
        offset: Leading chapters of the selection to skip (default: 0)
        skip_last: Trailing chapters of the selection to skip (default: 0)
        mode: "single" for one file per chapter, "grouped" for runs of chapters
        group_size: Chapters per file in grouped mode (default: 4)
        output_format: "txt", "pdf" or "docx" (default: "txt")
        font_size: PDF body font size in points (default: 14)
        cjk_font: Font for wide/ideographic text: a PyMuPDF built-in font name,
            a font file path, or an http(s) URL (default: "china-s")
        latin_font: Font for all other text, same forms (default: "helv")
        selection: Chapter indices to export, None for all (default: None)
    """

    pattern: str = "Chapter"
    start_number: int = 1
    offset: int = 0
    skip_last: int = 0
    mode: Literal["single", "grouped"] = "single"
    group_size: int = 4
    output_format: Literal["txt", "pdf", "docx"] = "txt"
    font_size: float = 14
    cjk_font: str = DEFAULT_CJK_FONT
    latin_font: str = DEFAULT_LATIN_FONT
    selection: list[int] | None = None

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.pattern.strip():
            self.pattern = "Chapter"

        if self.start_number < 1:
            raise InvalidExportConfig("Start Number must be 1 or greater.")

        if self.offset < 0:
            raise InvalidExportConfig("Offset must be 0 or greater.")

        if self.skip_last < 0:
            raise InvalidExportConfig("Skip Last must be 0 or greater.")

        if self.mode not in ["single", "grouped"]:
            raise InvalidExportConfig(f"mode must be one of: single, grouped. Got: {self.mode}")

        if self.mode == "grouped" and self.group_size < 1:
            raise InvalidExportConfig("Chapters per File must be 1 or greater.")

        if self.output_format not in ["txt", "pdf", "docx"]:
            raise InvalidExportConfig(
                f"output_format must be one of: txt, pdf, docx. Got: {self.output_format}"
            )

        if self.font_size <= 0:
            raise InvalidExportConfig("font_size must be > 0")
