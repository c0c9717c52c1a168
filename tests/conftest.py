"""Shared fixtures: small EPUB packages built in memory."""

import io
import zipfile
from dataclasses import dataclass

import pytest

from chapter_splitter.fonts import FontPair

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def xhtml(body: str, title: str = "Test") -> str:
    """A well-formed XHTML content document."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">'
        f"<head><title>{title}</title></head><body>{body}</body></html>"
    )


def paragraphs(*texts: str) -> str:
    return "".join(f"<p>{text}</p>" for text in texts)


@dataclass
class _Item:
    item_id: str
    href: str
    content: str | bytes
    media_type: str
    properties: str | None
    spine: bool


class EpubBuilder:
    """Builds EPUB bytes from manifest items.

    Hrefs are relative to the package descriptor, which lives in ``opf_dir``.
    """

    def __init__(self, opf_dir: str = "OEBPS"):
        self.opf_dir = opf_dir
        self.items: list[_Item] = []
        self.raw_files: dict[str, str | bytes] = {}
        self.spine_toc: str | None = None
        self.container = True

    @property
    def opf_path(self) -> str:
        return f"{self.opf_dir}/content.opf" if self.opf_dir else "content.opf"

    def add(
        self,
        item_id: str,
        href: str,
        content: str | bytes,
        media_type: str = "application/xhtml+xml",
        properties: str | None = None,
        spine: bool = True,
    ) -> "EpubBuilder":
        self.items.append(_Item(item_id, href, content, media_type, properties, spine))
        return self

    def add_chapter(self, item_id: str, href: str, body: str, title: str = "Test") -> "EpubBuilder":
        return self.add(item_id, href, xhtml(body, title))

    def add_nav(self, links: list[tuple[str, str]], href: str = "nav.xhtml") -> "EpubBuilder":
        anchors = "".join(f'<li><a href="{target}">{label}</a></li>' for label, target in links)
        body = f'<nav epub:type="toc" id="toc"><h1>Contents</h1><ol>{anchors}</ol></nav>'
        return self.add("nav", href, xhtml(body, "Contents"), properties="nav", spine=False)

    def add_ncx(self, links: list[tuple[str, str]], href: str = "toc.ncx") -> "EpubBuilder":
        points = "".join(
            f'<navPoint id="p{i}" playOrder="{i}"><navLabel><text>{label}</text></navLabel>'
            f'<content src="{target}"/></navPoint>'
            for i, (label, target) in enumerate(links, 1)
        )
        ncx = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">'
            f"<head/><docTitle><text>Book</text></docTitle><navMap>{points}</navMap></ncx>"
        )
        self.spine_toc = "ncx"
        return self.add("ncx", href, ncx, media_type="application/x-dtbncx+xml", spine=False)

    def add_file(self, path: str, content: str | bytes) -> "EpubBuilder":
        self.raw_files[path] = content
        return self

    def opf(self) -> str:
        manifest = "".join(
            f'<item id="{item.item_id}" href="{item.href}" media-type="{item.media_type}"'
            + (f' properties="{item.properties}"' if item.properties else "")
            + "/>"
            for item in self.items
        )
        spine = "".join(f'<itemref idref="{item.item_id}"/>' for item in self.items if item.spine)
        toc = f' toc="{self.spine_toc}"' if self.spine_toc else ""
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="id">'
            '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/"><dc:title>Book</dc:title></metadata>'
            f"<manifest>{manifest}</manifest><spine{toc}>{spine}</spine></package>"
        )

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
            if self.container:
                zf.writestr("META-INF/container.xml", CONTAINER_XML.format(path=self.opf_path))
            zf.writestr(self.opf_path, self.opf())
            prefix = f"{self.opf_dir}/" if self.opf_dir else ""
            for item in self.items:
                zf.writestr(prefix + item.href, item.content)
            for path, content in self.raw_files.items():
                zf.writestr(path, content)
        return buffer.getvalue()


@pytest.fixture
def epub_builder() -> EpubBuilder:
    return EpubBuilder()


@pytest.fixture
def three_chapter_epub() -> bytes:
    """Three chapters, each in its own file, listed in an EPUB 3 nav document."""
    builder = EpubBuilder()
    builder.add_chapter("c1", "text/chapter1.xhtml", "<h1>One</h1>" + paragraphs("The first chapter begins here."))
    builder.add_chapter("c2", "text/chapter2.xhtml", "<h1>Two</h1>" + paragraphs("The second chapter follows on."))
    builder.add_chapter("c3", "text/chapter3.xhtml", "<h1>Three</h1>" + paragraphs("The third chapter ends the book."))
    builder.add_nav(
        [
            ("Chapter One", "text/chapter1.xhtml"),
            ("Chapter Two", "text/chapter2.xhtml"),
            ("Chapter Three", "text/chapter3.xhtml"),
        ]
    )
    return builder.build()


class FixedWidthFont:
    """Stand-in for a font: every character is ``ratio`` ems wide."""

    def __init__(self, ratio: float):
        self.ratio = ratio

    def text_length(self, text: str, fontsize: float = 11) -> float:
        return len(text) * fontsize * self.ratio


@pytest.fixture
def fake_fonts():
    return FontPair(cjk=FixedWidthFont(1.0), latin=FixedWidthFont(0.5))
