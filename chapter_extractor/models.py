"""Shared data types for chapter extraction."""

from dataclasses import dataclass, field

from .markup import resolve_href

HTML_MEDIA_TYPES = {"application/xhtml+xml", "text/html", "application/html"}


@dataclass(frozen=True)
class PackageDescriptor:
    """The resolved package descriptor (OPF) of an EPUB.

    Args:
        descriptor_path: Archive path of the OPF file
        base_dir: Parent directory of the OPF file ("" at the archive root)
        manifest: Manifest item id -> href (relative to base_dir)
        reading_order: Spine item ids, navigation-like items filtered out
        media_types: Manifest item id -> declared media type
        nav_href: Href of the navigation document, if declared
        ncx_href: Href of the legacy NCX navigation map, if declared
    """

    descriptor_path: str
    base_dir: str
    manifest: dict[str, str]
    reading_order: list[str]
    media_types: dict[str, str] = field(default_factory=dict)
    nav_href: str | None = None
    ncx_href: str | None = None

    def resolve(self, href: str) -> str | None:
        """Resolve a descriptor-relative href to an archive path."""
        return resolve_href(href, self.base_dir)

    def reading_paths(self) -> list[str]:
        """Archive paths of the reading-order content documents."""
        paths = []
        for item_id in self.reading_order:
            media_type = self.media_types.get(item_id)
            if media_type and media_type not in HTML_MEDIA_TYPES:
                continue
            path = self.resolve(self.manifest[item_id])
            if path:
                paths.append(path)
        return paths


@dataclass(frozen=True)
class TocEntry:
    title: str
    target_path: str  # archive path, fragment removed
    fragment_id: str | None
    original_index: int


@dataclass(frozen=True)
class Chapter:
    """A single extracted chapter.

    Args:
        index: Position in the navigation list, or in the extraction order when
            the package has no table of contents
        title: Display title
        text: Plain text, paragraphs separated by exactly one blank line
    """

    index: int
    title: str
    text: str


@dataclass
class ExtractionResult:
    """Chapters recovered from one package plus the warnings raised on the way."""

    chapters: list[Chapter]
    warnings: list[str] = field(default_factory=list)
    used_toc: bool = True
    descriptor: PackageDescriptor | None = None

    def titles(self) -> list[str]:
        return [chapter.title for chapter in self.chapters]

    def select(self, indices: list[int] | None) -> list[Chapter]:
        """Chapters whose ``index`` is in ``indices``, in extraction order.

        ``None`` selects everything.
        """
        if indices is None:
            return list(self.chapters)
        wanted = set(indices)
        return [chapter for chapter in self.chapters if chapter.index in wanted]
