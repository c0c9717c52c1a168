"""Table-of-contents resolution for EPUB 3 nav documents and EPUB 2 NCX maps."""

import zipfile

from bs4 import BeautifulSoup, Tag
from lxml import etree

from .errors import TocError, WarningLog
from .markup import decode_bytes, epub_types, local_name, parent_dir, parse_markup, resolve_href, split_href
from .models import PackageDescriptor, TocEntry
from .package import read_entry

RawLink = tuple[str, str | None]  # (title, href)


def _clean(text: str) -> str:
    return " ".join(text.split())


def _is_toc_nav(nav: Tag) -> bool:
    return "toc" in epub_types(nav) or "doc-toc" in epub_types(nav)


def parse_nav_document(document: BeautifulSoup, log: WarningLog, path: str = "") -> list[RawLink]:
    """Collect (title, href) pairs from an EPUB 3 navigation document.

    Anchors are read from the list inside ``<nav epub:type="toc">``. If the
    document has no such container, the first list in the document is used
    instead and a warning is recorded.
    """
    container: Tag | None = None
    for nav in document.find_all(True):
        if local_name(nav) == "nav" and _is_toc_nav(nav):
            lists = [tag for tag in nav.find_all(True) if local_name(tag) in ("ol", "ul")]
            container = lists[0] if lists else nav
            break

    if container is None:
        lists = [tag for tag in document.find_all(True) if local_name(tag) in ("ol", "ul")]
        if not lists:
            return []
        log.warn(f"No table-of-contents nav found in {path or 'navigation document'}; using the first list.")
        container = lists[0]

    return [
        (_clean(anchor.get_text()), anchor.get("href"))
        for anchor in container.find_all(True)
        if local_name(anchor) == "a"
    ]


def parse_ncx_document(root: etree._Element) -> list[RawLink]:
    """Collect (title, href) pairs from every navPoint of an NCX map, in document order."""
    links: list[RawLink] = []
    for point in root.xpath("//*[local-name()='navPoint']"):
        labels = point.xpath("./*[local-name()='navLabel']/*[local-name()='text']")
        title = _clean("".join(labels[0].itertext())) if labels else ""
        sources = point.xpath("./*[local-name()='content']/@src")
        links.append((title, str(sources[0]) if sources else None))
    return links


def build_entries(links: list[RawLink], base_dir: str, log: WarningLog) -> list[TocEntry]:
    """Resolve raw links into de-duplicated ``TocEntry`` values.

    Entries without a title or a usable href are dropped with a warning.
    When several entries resolve to the same file, the first one wins.
    """
    entries: list[TocEntry] = []
    seen: set[str] = set()
    for index, (title, href) in enumerate(links):
        if not href or not href.strip():
            log.warn(f"ToC entry {index + 1} ({title or 'untitled'}) has no href; skipped.")
            continue
        if not title:
            log.warn(f"ToC entry {index + 1} ({href}) has no title; skipped.")
            continue

        path_part, fragment = split_href(href.strip())
        target = resolve_href(path_part, base_dir) if path_part else None
        if not target:
            log.warn(f"ToC entry '{title}' points outside the package ({href}); skipped.")
            continue
        if target in seen:
            continue
        seen.add(target)
        entries.append(TocEntry(title=title, target_path=target, fragment_id=fragment, original_index=index))
    return entries


def _load_nav(archive: zipfile.ZipFile, path: str, log: WarningLog) -> list[RawLink]:
    raw = read_entry(archive, path)
    if raw is None:
        raise TocError(f"Navigation document not found at {path}.")
    document, _ = parse_markup(decode_bytes(raw).text)
    return parse_nav_document(document, log, path)


def _load_ncx(archive: zipfile.ZipFile, path: str) -> list[RawLink]:
    raw = read_entry(archive, path)
    if raw is None:
        raise TocError(f"NCX navigation map not found at {path}.")
    try:
        root = etree.fromstring(raw, parser=etree.XMLParser(no_network=True))
    except etree.XMLSyntaxError as err:
        raise TocError(f"Could not parse NCX navigation map {path}: {err}") from err
    return parse_ncx_document(root)


def resolve_toc(archive: zipfile.ZipFile, descriptor: PackageDescriptor, log: WarningLog) -> list[TocEntry]:
    """Resolve the package's table of contents.

    The EPUB 3 navigation document is preferred; the NCX map is used when
    there is no navigation document or it yields nothing.

    Raises:
        TocError: If no navigation document is declared, none can be read, or
            none yields a usable entry
    """
    candidates: list[tuple[str, str]] = []
    if descriptor.nav_href:
        candidates.append(("nav", descriptor.nav_href))
    if descriptor.ncx_href:
        candidates.append(("ncx", descriptor.ncx_href))
    if not candidates:
        raise TocError("No navigation document (nav or NCX) is declared in the package.")

    reason = "The table of contents has no usable entries."
    for kind, href in candidates:
        path = descriptor.resolve(href)
        if not path:
            continue
        try:
            links = _load_nav(archive, path, log) if kind == "nav" else _load_ncx(archive, path)
        except TocError as err:
            log.warn(str(err))
            reason = str(err)
            continue

        entries = build_entries(links, parent_dir(path), log)
        if entries:
            log.info(f"Resolved {len(entries)} ToC entries from {path}")
            return entries
        log.warn(f"{path} has no usable table-of-contents entries.")

    raise TocError(reason)
