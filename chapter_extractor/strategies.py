"""
Heuristics for finding chapters in packages without a usable table of contents.

Each strategy takes a parsed content document and returns a list of chapter
drafts, or ``None`` when the document does not have the structure it looks for.
Strategies are tried in priority order; the first non-empty result wins.
"""

from dataclasses import dataclass
from typing import Callable

from bs4 import BeautifulSoup, Tag

from .markup import document_body, epub_types, local_name
from .text_normalizer import (
    HEADING_TAGS,
    TITLE_EXCLUDED_TAGS,
    first_heading,
    markup_to_text,
    split_by_headings,
)


@dataclass(frozen=True)
class ChapterDraft:
    """A chapter candidate; ``title`` is None when it has to be synthesized."""

    title: str | None
    text: str


Strategy = Callable[[BeautifulSoup, int], "list[ChapterDraft] | None"]


def chapter_sections(document: BeautifulSoup, min_chars: int) -> list[ChapterDraft] | None:
    """Every ``<section epub:type="chapter">`` becomes one chapter."""
    sections = [
        section
        for section in document.find_all(True)
        if local_name(section) == "section" and "chapter" in epub_types(section)
    ]
    if not sections:
        return None

    return [
        ChapterDraft(
            title=first_heading(section),
            text=markup_to_text(section, TITLE_EXCLUDED_TAGS),
        )
        for section in sections
    ]


def heading_split(document: BeautifulSoup, min_chars: int) -> list[ChapterDraft] | None:
    """Split a file holding several chapters at its repeated headings.

    The highest heading level that occurs at least twice is used as the
    boundary. Text before the first heading is kept at the start of the first
    chapter.
    """
    body = document_body(document)
    tags = [local_name(tag) for tag in body.find_all(True)]
    level = next((heading for heading in HEADING_TAGS if tags.count(heading) >= 2), None)
    if level is None:
        return None

    preamble, sections = split_by_headings(body, level, TITLE_EXCLUDED_TAGS)
    drafts = [ChapterDraft(title=title or None, text=text) for title, text in sections]
    if preamble and drafts:
        first = drafts[0]
        text = f"{preamble}\n\n{first.text}" if first.text else preamble
        drafts[0] = ChapterDraft(title=first.title, text=text)
    return drafts


def whole_document(document: BeautifulSoup, min_chars: int) -> list[ChapterDraft] | None:
    """The whole file is a single chapter if it holds enough text."""
    body = document_body(document)
    text = markup_to_text(body, TITLE_EXCLUDED_TAGS)
    if len(text) < min_chars:
        return None

    title = first_heading(body)
    if title is None:
        title_tag = document.find("title")
        if isinstance(title_tag, Tag):
            title = " ".join(title_tag.get_text().split()) or None
    return [ChapterDraft(title=title, text=text)]


STRATEGIES: tuple[Strategy, ...] = (chapter_sections, heading_split, whole_document)


def apply_strategies(
    document: BeautifulSoup,
    min_chars: int,
    strategies: tuple[Strategy, ...] = STRATEGIES,
) -> list[ChapterDraft]:
    """Run ``strategies`` in order and return the first non-empty result."""
    for strategy in strategies:
        drafts = strategy(document, min_chars)
        if drafts:
            return drafts
    return []
