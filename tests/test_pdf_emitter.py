"""Tests for the PDF emitter."""

import pytest

fitz = pytest.importorskip("fitz")

from chapter_extractor.models import Chapter
from chapter_splitter.fonts import FontCache
from chapter_splitter.pdf_emitter import PdfEmitter, PdfEmitterConfig
from chapter_splitter.planner import OutputUnit


def make_unit(chapters: list[Chapter]) -> OutputUnit:
    return OutputUnit(filename="Chapter01-02", chapters=tuple(chapters), first_number=1, last_number=len(chapters))


@pytest.fixture(scope="module")
def emitter() -> PdfEmitter:
    return PdfEmitter()


class TestPdfEmitter:
    """Tests for PdfEmitter."""

    def test_pages_toc_and_outline(self, emitter: PdfEmitter) -> None:
        """Test that the PDF has a contents page, chapter pages and bookmarks."""
        chapters = [
            Chapter(index=0, title="First Chapter", text="Opening words.\n\nSecond paragraph."),
            Chapter(index=1, title="Second Chapter", text="Closing words."),
        ]
        data = emitter.emit(make_unit(chapters))

        with fitz.open(stream=data, filetype="pdf") as doc:
            assert doc.page_count == 3
            assert "Table of Contents" in doc[0].get_text()
            assert "First Chapter" in doc[1].get_text()
            assert "Closing words." in doc[2].get_text()
            assert [entry[1:3] for entry in doc.get_toc()] == [["First Chapter", 2], ["Second Chapter", 3]]

    def test_toc_rows_link_to_chapter_pages(self, emitter: PdfEmitter) -> None:
        chapters = [Chapter(index=i, title=f"Part {i}", text="Some text.") for i in range(3)]
        data = emitter.emit(make_unit(chapters))

        with fitz.open(stream=data, filetype="pdf") as doc:
            targets = [link["page"] for link in doc[0].get_links()]
        assert targets == [1, 2, 3]

    def test_toc_page_numbers_match_title_pages(self, emitter: PdfEmitter) -> None:
        """Test that each chapter title appears on the page the contents page names."""
        body = "\n\n".join("A line of body text that repeats to fill several pages." for _ in range(120))
        chapters = [Chapter(index=i, title=f"Chapter Title {i}", text=body) for i in range(3)]
        unit = make_unit(chapters)

        model = emitter.layout(unit)
        with fitz.open(stream=emitter.emit(unit), filetype="pdf") as doc:
            assert doc.page_count == model.page_count
            for entry in model.toc_map:
                assert entry.title in doc[entry.page_number - 1].get_text()

    def test_mixed_script_text(self, emitter: PdfEmitter) -> None:
        chapters = [Chapter(index=0, title="混合 Mixed", text="Hello 世界")]
        data = emitter.emit(make_unit(chapters))

        with fitz.open(stream=data, filetype="pdf") as doc:
            text = doc[1].get_text()
            fonts = {font[3] for font in doc[1].get_fonts()}
        assert "Hello" in text
        assert "世界" in text
        assert len(fonts) >= 2

    def test_font_size(self) -> None:
        emitter = PdfEmitter(PdfEmitterConfig(font_size=10))
        assert emitter.config.title_size == 12
        assert emitter.emit(make_unit([Chapter(index=0, title="T", text="x")])).startswith(b"%PDF")

    def test_default_fonts_use_shared_cache(self, emitter: PdfEmitter) -> None:
        assert emitter.fonts is FontCache.shared()

    def test_extension_and_suffix(self, emitter: PdfEmitter) -> None:
        emitted = emitter.emit_file(make_unit([Chapter(index=0, title="T", text="x")]))
        assert emitted.filename == "Chapter01-02.pdf"
        assert emitter.archive_suffix == "_chapters_pdf.zip"
