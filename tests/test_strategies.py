"""Tests for the heuristic chapter strategies."""

from chapter_extractor.markup import parse_markup
from chapter_extractor.strategies import (
    ChapterDraft,
    apply_strategies,
    chapter_sections,
    heading_split,
    whole_document,
)
from conftest import paragraphs, xhtml

LONG = "This paragraph is comfortably longer than the threshold."


def _document(body: str, title: str = "Doc Title"):
    document, _ = parse_markup(xhtml(body, title))
    return document


class TestChapterSections:
    """Tests for the explicit chapter section strategy."""

    def test_each_section_is_a_chapter(self) -> None:
        document = _document(
            '<section epub:type="chapter"><h2>First</h2>' + paragraphs("alpha") + "</section>"
            '<section epub:type="chapter"><h2>Second</h2>' + paragraphs("beta") + "</section>"
        )
        assert chapter_sections(document, 20) == [
            ChapterDraft(title="First", text="alpha"),
            ChapterDraft(title="Second", text="beta"),
        ]

    def test_no_sections(self) -> None:
        assert chapter_sections(_document(paragraphs(LONG)), 20) is None


class TestHeadingSplit:
    """Tests for the repeated heading strategy."""

    def test_splits_at_repeated_headings(self) -> None:
        """Test that a file holding several chapters is split at its headings."""
        document = _document(
            paragraphs("Front matter") + "<h2>One</h2>" + paragraphs("first") + "<h2>Two</h2>" + paragraphs("second")
        )
        drafts = heading_split(document, 20)
        assert drafts == [
            ChapterDraft(title="One", text="Front matter\n\nfirst"),
            ChapterDraft(title="Two", text="second"),
        ]

    def test_prefers_highest_repeated_level(self) -> None:
        document = _document(
            "<h1>Book</h1><h2>A</h2>" + paragraphs("a") + "<h3>A.1</h3>" + paragraphs("a1")
            + "<h2>B</h2>" + paragraphs("b") + "<h3>B.1</h3>" + paragraphs("b1")
        )
        drafts = heading_split(document, 20)
        assert [draft.title for draft in drafts] == ["A", "B"]

    def test_single_heading_does_not_split(self) -> None:
        assert heading_split(_document("<h1>Only</h1>" + paragraphs(LONG)), 20) is None


class TestWholeDocument:
    """Tests for the whole file strategy."""

    def test_title_from_heading(self) -> None:
        drafts = whole_document(_document("<h1>Heading</h1>" + paragraphs(LONG)), 20)
        assert drafts == [ChapterDraft(title="Heading", text=LONG)]

    def test_title_from_document_title(self) -> None:
        drafts = whole_document(_document(paragraphs(LONG), title="From Title"), 20)
        assert drafts[0].title == "From Title"

    def test_too_short(self) -> None:
        assert whole_document(_document(paragraphs("tiny")), 20) is None


class TestApplyStrategies:
    """Tests for strategy ordering."""

    def test_first_non_empty_result_wins(self) -> None:
        calls = []

        def never(document, min_chars):
            calls.append("never")
            return None

        def always(document, min_chars):
            calls.append("always")
            return [ChapterDraft(title="x", text="y")]

        def unreachable(document, min_chars):
            calls.append("unreachable")
            return []

        drafts = apply_strategies(_document(""), 20, (never, always, unreachable))
        assert drafts == [ChapterDraft(title="x", text="y")]
        assert calls == ["never", "always"]

    def test_nothing_found(self) -> None:
        assert apply_strategies(_document(paragraphs("tiny")), 20) == []
