"""Page layout for paginated export.

Layout is separated from rendering: ``layout_document`` turns chapters into a
``DocumentModel`` of positioned text runs, link regions, a ToC page map and an
outline, and the PDF emitter only draws what the model says. All coordinates
are in points with the origin at the top-left corner of the page; ``TextRun.y``
is the text baseline.
"""

import math
from dataclasses import dataclass, field
from typing import Sequence

from chapter_extractor.models import Chapter
from chapter_extractor.text_normalizer import PARAGRAPH_SEPARATOR

from .emitter import EmitterConfig
from .errors import InvalidExportConfig
from .fonts import FontPair, script_runs, wrap_tokens

A4 = (595.0, 842.0)
ELLIPSIS = "..."


@dataclass
class LayoutConfig(EmitterConfig):
    """Page geometry and type sizes.

    Args:
        page_width: Page width in points (default: A4)
        page_height: Page height in points (default: A4)
        margin: Margin on every side in points (default: 72)
        font_size: Body text size (default: 14)
        title_scale: Chapter title size relative to the body (default: 1.25)
        line_spacing: Line height as a multiple of the type size (default: 1.5)
        paragraph_spacing: Extra space after a paragraph, in lines (default: 0.5)
        toc_title: Heading drawn on the contents pages
        toc_heading_size: Size of the contents heading (default: 22)
        toc_row_size: Size of contents rows (default: 14)
        toc_row_pitch: Row height as a multiple of the row size (default: 1.8)
    """

    page_width: float = A4[0]
    page_height: float = A4[1]
    margin: float = 72.0
    font_size: float = 14.0
    title_scale: float = 1.25
    line_spacing: float = 1.5
    paragraph_spacing: float = 0.5
    toc_title: str = "Table of Contents"
    toc_heading_size: float = 22.0
    toc_row_size: float = 14.0
    toc_row_pitch: float = 1.8

    def __post_init__(self):
        if self.font_size <= 0:
            raise InvalidExportConfig("Font size must be greater than 0.")
        if self.margin < 0 or 2 * self.margin >= min(self.page_width, self.page_height):
            raise InvalidExportConfig(f"Margin {self.margin} does not fit the page.")

    @property
    def title_size(self) -> int:
        return round(self.font_size * self.title_scale)

    @property
    def usable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    @property
    def toc_rows_top(self) -> float:
        return self.margin + self.toc_heading_size * 2.5

    @property
    def toc_rows_per_page(self) -> int:
        pitch = self.toc_row_size * self.toc_row_pitch
        return max(1, int((self.bottom - self.toc_rows_top) // pitch))


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    font: str
    size: float


@dataclass(frozen=True)
class LinkRegion:
    """Clickable rectangle jumping to the top of ``target_page`` (0-based)."""

    x0: float
    y0: float
    x1: float
    y1: float
    target_page: int


@dataclass
class PageModel:
    runs: list[TextRun] = field(default_factory=list)
    links: list[LinkRegion] = field(default_factory=list)

    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class TocPageEntry:
    title: str
    page_number: int


@dataclass
class Bookmark:
    title: str
    page_index: int
    top: float = 0.0
    parent: int | None = None
    prev: int | None = None
    next: int | None = None


class OutlineTree:
    """Outline stored as an arena of bookmarks addressed by index.

    Nodes are allocated first with ``add`` and wired afterwards with
    ``link_siblings``, so no node ever refers to one that does not exist yet.
    """

    def __init__(self):
        self.nodes: list[Bookmark] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def add(self, title: str, page_index: int, top: float = 0.0, parent: int | None = None) -> int:
        self.nodes.append(Bookmark(title=title, page_index=page_index, top=top, parent=parent))
        return len(self.nodes) - 1

    def link_siblings(self) -> None:
        previous: dict[int | None, int] = {}
        for index, node in enumerate(self.nodes):
            before = previous.get(node.parent)
            if before is not None:
                node.prev = before
                self.nodes[before].next = index
            previous[node.parent] = index

    def level(self, index: int) -> int:
        depth = 1
        parent = self.nodes[index].parent
        while parent is not None:
            depth += 1
            parent = self.nodes[parent].parent
        return depth

    def to_toc(self) -> list[list]:
        """Outline in PyMuPDF ``set_toc`` form: [level, title, page, top]."""
        return [
            [self.level(i), node.title, node.page_index + 1, node.top]
            for i, node in enumerate(self.nodes)
        ]


@dataclass
class DocumentModel:
    page_width: float
    page_height: float
    pages: list[PageModel] = field(default_factory=list)
    toc_map: list[TocPageEntry] = field(default_factory=list)
    outline: OutlineTree = field(default_factory=OutlineTree)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def new_page(self) -> int:
        self.pages.append(PageModel())
        return len(self.pages) - 1


def toc_page_count(chapter_count: int, config: LayoutConfig) -> int:
    return max(1, math.ceil(chapter_count / config.toc_rows_per_page))


class Typesetter:
    """Measures, wraps and places text with one font pair."""

    def __init__(self, fonts: FontPair, config: LayoutConfig):
        self.fonts = fonts
        self.config = config

    def measure(self, text: str, size: float) -> float:
        return self.fonts.measure(text, size)

    def _split_oversized(self, text: str, size: float, width: float) -> list[str]:
        pieces = []
        current = ""
        for char in text:
            if current and self.measure(current + char, size) > width:
                pieces.append(current)
                current = char
            else:
                current += char
        pieces.append(current)
        return pieces

    def wrap(self, text: str, size: float, width: float | None = None) -> list[str]:
        """Greedy line breaking by measured width.

        A token wider than the whole line is broken between characters.
        """
        width = self.config.usable_width if width is None else width
        lines: list[str] = []
        line = ""
        for token in wrap_tokens(text):
            candidate = line + token
            if line.strip() and self.measure(candidate.rstrip(), size) > width:
                lines.append(line.rstrip())
                line = token.lstrip()
            else:
                line = candidate.lstrip()

            if self.measure(line.rstrip(), size) > width:
                pieces = self._split_oversized(line, size, width)
                lines.extend(pieces[:-1])
                line = pieces[-1]

        if line.strip():
            lines.append(line.rstrip())
        return lines

    def place(self, text: str, x: float, y: float, size: float) -> list[TextRun]:
        """Runs for one line, one per script segment."""
        runs = []
        for key, run in script_runs(text):
            runs.append(TextRun(x=x, y=y, text=run, font=key, size=size))
            x += self.fonts.font(key).text_length(run, fontsize=size)
        return runs

    def truncate(self, text: str, size: float, width: float) -> str:
        if self.measure(text, size) <= width:
            return text
        for end in range(len(text) - 1, 0, -1):
            shortened = text[:end].rstrip() + ELLIPSIS
            if self.measure(shortened, size) <= width:
                return shortened
        return ELLIPSIS


class _Cursor:
    """Vertical position on the current page of a flowing chapter."""

    def __init__(self, model: DocumentModel, config: LayoutConfig, page_index: int):
        self.model = model
        self.config = config
        self.page_index = page_index
        self.y = config.margin

    @property
    def page(self) -> PageModel:
        return self.model.pages[self.page_index]

    def reserve(self, height: float) -> float:
        """Make room for a line; returns the top of the line."""
        if self.y > self.config.margin and self.y + height > self.config.bottom:
            self.page_index = self.model.new_page()
            self.y = self.config.margin
        top = self.y
        self.y += height
        return top


def _layout_chapter(model: DocumentModel, setter: Typesetter, chapter: Chapter) -> None:
    config = setter.config
    start_page = model.new_page()
    model.toc_map.append(TocPageEntry(title=chapter.title, page_number=start_page + 1))
    model.outline.add(chapter.title, start_page)

    cursor = _Cursor(model, config, start_page)
    title_size = config.title_size
    for line in setter.wrap(chapter.title, title_size):
        top = cursor.reserve(title_size * config.line_spacing)
        cursor.page.runs.extend(setter.place(line, config.margin, top + title_size, title_size))
    cursor.y += config.font_size * config.line_spacing

    size = config.font_size
    line_height = size * config.line_spacing
    for paragraph in chapter.text.split(PARAGRAPH_SEPARATOR):
        for line in setter.wrap(paragraph, size):
            top = cursor.reserve(line_height)
            cursor.page.runs.extend(setter.place(line, config.margin, top + size, size))
        cursor.y += line_height * config.paragraph_spacing


def _layout_toc(model: DocumentModel, setter: Typesetter, page_count: int) -> None:
    config = setter.config
    size = config.toc_row_size
    pitch = size * config.toc_row_pitch
    per_page = config.toc_rows_per_page
    right = config.page_width - config.margin

    for page_index in range(page_count):
        page = model.pages[page_index]
        heading_size = config.toc_heading_size
        page.runs.extend(setter.place(config.toc_title, config.margin, config.margin + heading_size, heading_size))

        rows = model.toc_map[page_index * per_page:(page_index + 1) * per_page]
        for row, entry in enumerate(rows):
            baseline = config.toc_rows_top + row * pitch + size
            number = str(entry.page_number)
            number_x = right - setter.measure(number, size)
            title_width = number_x - config.margin - size
            title = setter.truncate(entry.title, size, title_width)

            page.runs.extend(setter.place(title, config.margin, baseline, size))
            page.runs.extend(setter.place(number, number_x, baseline, size))
            page.links.append(
                LinkRegion(
                    x0=config.margin,
                    y0=baseline - size,
                    x1=right,
                    y1=baseline + size * (config.toc_row_pitch - 1),
                    target_page=entry.page_number - 1,
                )
            )


def layout_document(
    chapters: Sequence[Chapter],
    fonts: FontPair,
    config: LayoutConfig | None = None,
) -> DocumentModel:
    """Lay out a contents section followed by one page run per chapter.

    The contents pages come first; their number is fixed from the chapter count
    before any chapter is placed, so recorded page numbers are final.

    Args:
        chapters: Chapters in output order
        fonts: Loaded font pair used for every measurement
        config: Page geometry (default: A4 with 72pt margins)

    Returns:
        The complete document model
    """
    config = config or LayoutConfig()
    setter = Typesetter(fonts, config)
    model = DocumentModel(page_width=config.page_width, page_height=config.page_height)

    toc_pages = toc_page_count(len(chapters), config)
    for _ in range(toc_pages):
        model.new_page()

    for chapter in chapters:
        _layout_chapter(model, setter, chapter)

    model.outline.link_siblings()
    _layout_toc(model, setter, toc_pages)
    return model
