"""Container resolution: locate and parse the package descriptor of an EPUB."""

import io
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager

from lxml import etree

from .errors import ContainerError
from .markup import parent_dir
from .models import PackageDescriptor

CONTAINER_PATH = "META-INF/container.xml"
NCX_MEDIA_TYPE = "application/x-dtbncx+xml"

# Spine items whose href merely contains one of these are treated as navigation
# documents. This is a name heuristic and can exclude a content file named,
# for example, "canvas.xhtml".
NAVIGATION_HREF_MARKERS = ("toc", "nav")


@contextmanager
def open_package(data: bytes) -> Iterator[zipfile.ZipFile]:
    """Open EPUB bytes as a ZIP archive, closing it when the block exits.

    Raises:
        ContainerError: If the bytes are not a ZIP archive
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as err:
        raise ContainerError(f"Not a valid EPUB archive: {err}") from err
    with archive:
        yield archive


def read_entry(archive: zipfile.ZipFile, path: str) -> bytes | None:
    """Read an archive member, falling back to a case-insensitive lookup."""
    try:
        return archive.read(path)
    except KeyError:
        pass

    wanted = path.lower()
    for name in archive.namelist():
        if name.lower() == wanted:
            return archive.read(name)
    return None


def parse_xml(raw: bytes, path: str) -> etree._Element:
    """Strictly parse an XML package file.

    Raises:
        ContainerError: If the file is not well-formed XML
    """
    try:
        return etree.fromstring(raw, parser=etree.XMLParser(no_network=True))
    except etree.XMLSyntaxError as err:
        raise ContainerError(f"Could not parse {path}: {err}") from err


def _find(root: etree._Element, name: str) -> list[etree._Element]:
    return root.xpath(f"//*[local-name()='{name}']")


def find_descriptor_path(archive: zipfile.ZipFile) -> str:
    """Return the archive path of the package descriptor named by container.xml."""
    raw = read_entry(archive, CONTAINER_PATH)
    if raw is None:
        raise ContainerError(f"{CONTAINER_PATH} not found.")

    container = parse_xml(raw, CONTAINER_PATH)
    for rootfile in _find(container, "rootfile"):
        full_path = (rootfile.get("full-path") or "").strip()
        if full_path:
            return full_path.lstrip("/")
    raise ContainerError(f"Could not find the package descriptor path in {CONTAINER_PATH}.")


def resolve_package(archive: zipfile.ZipFile) -> PackageDescriptor:
    """Build the ``PackageDescriptor`` of an opened EPUB archive.

    Raises:
        ContainerError: If container.xml or the descriptor is missing or malformed
    """
    descriptor_path = find_descriptor_path(archive)
    raw = read_entry(archive, descriptor_path)
    if raw is None:
        raise ContainerError(f"Package descriptor not found at {descriptor_path}.")
    opf = parse_xml(raw, descriptor_path)

    manifest: dict[str, str] = {}
    media_types: dict[str, str] = {}
    nav_href = None
    ncx_href = None
    for item in _find(opf, "item"):
        item_id = item.get("id")
        href = item.get("href")
        if not item_id or not href:
            continue
        manifest[item_id] = href
        media_type = (item.get("media-type") or "").strip().lower()
        if media_type:
            media_types[item_id] = media_type
        if nav_href is None and "nav" in (item.get("properties") or "").split():
            nav_href = href

    spines = _find(opf, "spine")
    spine = spines[0] if spines else None
    toc_id = spine.get("toc") if spine is not None else None
    if toc_id and toc_id in manifest:
        ncx_href = manifest[toc_id]
    else:
        ncx_href = next(
            (manifest[item_id] for item_id, kind in media_types.items() if kind == NCX_MEDIA_TYPE),
            None,
        )

    reading_order: list[str] = []
    if spine is not None:
        for itemref in spine.xpath("./*[local-name()='itemref']"):
            idref = itemref.get("idref")
            href = manifest.get(idref or "")
            if href is None:
                continue
            if any(marker in href for marker in NAVIGATION_HREF_MARKERS):
                continue
            reading_order.append(idref)

    return PackageDescriptor(
        descriptor_path=descriptor_path,
        base_dir=parent_dir(descriptor_path),
        manifest=manifest,
        reading_order=reading_order,
        media_types=media_types,
        nav_href=nav_href,
        ncx_href=ncx_href,
    )
