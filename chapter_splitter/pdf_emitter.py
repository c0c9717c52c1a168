"""PDF emitter.

Each output unit becomes one PDF: a contents section with clickable rows, one
page run per chapter, and a bookmark outline. Drawing follows the
``DocumentModel`` produced by ``layout.layout_document``.
"""

from dataclasses import dataclass

import fitz  # PyMuPDF

from .config import DEFAULT_CJK_FONT, DEFAULT_LATIN_FONT
from .emitter import Emitter
from .fonts import FontCache, FontPair
from .layout import DocumentModel, LayoutConfig, layout_document
from .planner import OutputUnit


@dataclass
class PdfEmitterConfig(LayoutConfig):
    """Configuration for the PDF emitter.

    Args:
        cjk_font: Font source for wide/ideographic runs (default: "china-s")
        latin_font: Font source for all other runs (default: "helv")
    """

    cjk_font: str = DEFAULT_CJK_FONT
    latin_font: str = DEFAULT_LATIN_FONT


def render_document(model: DocumentModel, fonts: FontPair) -> bytes:
    """Draw a laid-out document with PyMuPDF and return the PDF bytes."""
    doc = fitz.open()
    try:
        for page_model in model.pages:
            page = doc.new_page(width=model.page_width, height=model.page_height)
            if not page_model.runs:
                continue
            writer = fitz.TextWriter(page.rect)
            for run in page_model.runs:
                writer.append((run.x, run.y), run.text, font=fonts.font(run.font), fontsize=run.size)
            writer.write_text(page)

        # Links point forward, so every target page must exist first
        for page_index, page_model in enumerate(model.pages):
            page = doc[page_index]
            for link in page_model.links:
                page.insert_link(
                    {
                        "kind": fitz.LINK_GOTO,
                        "from": fitz.Rect(link.x0, link.y0, link.x1, link.y1),
                        "page": link.target_page,
                        "to": fitz.Point(0, 0),
                    }
                )

        doc.set_toc(model.outline.to_toc())
        return doc.tobytes(garbage=3, deflate=True)
    finally:
        doc.close()


class PdfEmitter(Emitter):
    """Lays out and renders each unit as a PDF.

    Fonts come from a ``FontCache``; the default fonts share the process-wide
    cache, so they are loaded once however many exports run.
    """

    extension = ".pdf"
    archive_suffix = "_chapters_pdf.zip"

    def __init__(self, config: PdfEmitterConfig | None = None, fonts: FontCache | None = None):
        super().__init__(config or PdfEmitterConfig())
        self.config: PdfEmitterConfig
        self.fonts = fonts or FontCache.for_sources(self.config.cjk_font, self.config.latin_font)

    def layout(self, unit: OutputUnit) -> DocumentModel:
        return layout_document(unit.chapters, self.fonts.get(), self.config)

    def emit(self, unit: OutputUnit) -> bytes:
        fonts = self.fonts.get()
        return render_document(layout_document(unit.chapters, fonts, self.config), fonts)

    def __repr__(self) -> str:
        return (
            f"PdfEmitter(font_size={self.config.font_size}, "
            f"cjk_font={self.config.cjk_font!r}, latin_font={self.config.latin_font!r})"
        )
