"""Word (.docx) emitter."""

import io
from dataclasses import dataclass

from docx import Document
from docx.shared import Pt

from chapter_extractor.text_normalizer import PARAGRAPH_SEPARATOR

from .emitter import Emitter, EmitterConfig
from .planner import OutputUnit


@dataclass
class DocxEmitterConfig(EmitterConfig):
    """Configuration for the Word emitter.

    Args:
        heading_level: Heading level used for chapter titles (default: 1)
        font_size: Body text size in points, None to keep the template's
    """

    heading_level: int = 1
    font_size: float | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.heading_level <= 9:
            raise ValueError("heading_level must be between 0 and 9")


class DocxEmitter(Emitter):
    """One heading per chapter, one paragraph per text paragraph, a page break between chapters."""

    extension = ".docx"
    archive_suffix = "_chapters_docx.zip"

    def __init__(self, config: DocxEmitterConfig | None = None):
        super().__init__(config or DocxEmitterConfig())
        self.config: DocxEmitterConfig

    def emit(self, unit: OutputUnit) -> bytes:
        document = Document()
        if self.config.font_size:
            document.styles["Normal"].font.size = Pt(self.config.font_size)

        for i, chapter in enumerate(unit.chapters):
            if i:
                document.add_page_break()
            document.add_heading(chapter.title, level=self.config.heading_level)
            for paragraph in chapter.text.split(PARAGRAPH_SEPARATOR):
                if paragraph.strip():
                    document.add_paragraph(paragraph)

        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"DocxEmitter(heading_level={self.config.heading_level})"
