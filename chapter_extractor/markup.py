"""Decoding, tolerant parsing and path helpers for EPUB content documents."""

import posixpath
import re
import warnings
from dataclasses import dataclass
from urllib.parse import unquote

import ftfy
from bs4 import BeautifulSoup, Tag, UnicodeDammit, XMLParsedAsHTMLWarning
from lxml import etree

SECTIONING_TAGS = {"section", "div", "article"}

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_URI_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_UTF8_NAMES = {"utf-8", "utf8", "ascii", "us-ascii"}


@dataclass
class Decoded:
    """Text decoded from a content file.

    Args:
        text: Decoded and mojibake-repaired text
        encoding: Encoding the bytes were decoded with
        lossy: True if the bytes could only be decoded with replacement characters
    """

    text: str
    encoding: str
    lossy: bool = False

    @property
    def is_utf8(self) -> bool:
        return self.encoding.lower() in _UTF8_NAMES


def decode_bytes(raw: bytes) -> Decoded:
    """Best-effort decode of content bytes.

    UTF-8 is tried first; otherwise the encoding is sniffed from the markup
    declaration and byte patterns. Mis-decoded text is repaired with ftfy.
    """
    dammit = UnicodeDammit(raw, ["utf-8"], is_html=True)
    if dammit.unicode_markup is None:
        text = raw.decode("utf-8", errors="replace")
        encoding, lossy = "utf-8", True
    else:
        text = dammit.unicode_markup
        encoding = dammit.original_encoding or "utf-8"
        lossy = dammit.contains_replacement_characters

    # Width and quote fixes would rewrite legitimate CJK punctuation and typography
    text = ftfy.fix_text(
        text,
        unescape_html=False,
        uncurl_quotes=False,
        fix_character_width=False,
    )
    return Decoded(text=text, encoding=encoding, lossy=lossy)


def parse_markup(text: str) -> tuple[BeautifulSoup, bool]:
    """Parse a content document, strictly if possible.

    The document is first checked for XML well-formedness. Well-formed
    documents are parsed with the XML tree builder; anything else is re-parsed
    as permissive HTML.

    Returns:
        Tuple of (parsed document, whether the strict parse succeeded)
    """
    body = _XML_DECLARATION.sub("", text, count=1)
    try:
        etree.fromstring(body.encode("utf-8"), parser=etree.XMLParser(no_network=True))
    except etree.XMLSyntaxError:
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
            return BeautifulSoup(body, "lxml"), False
    return BeautifulSoup(body, "lxml-xml"), True


def local_name(tag: Tag) -> str:
    """Tag name without namespace prefix, lower-cased."""
    return (tag.name or "").rsplit(":", 1)[-1].lower()


def epub_types(tag: Tag) -> set[str]:
    """Tokens of the ``epub:type`` attribute (any prefix), plus ARIA ``role``."""
    tokens: set[str] = set()
    for name, value in tag.attrs.items():
        if name == "type" or name.endswith(":type") or name == "role":
            if isinstance(value, list):
                value = " ".join(value)
            tokens.update(token.lower() for token in str(value).split())
    return tokens


def find_by_id(document: BeautifulSoup, element_id: str) -> Tag | None:
    found = document.find(attrs={"id": element_id})
    return found if isinstance(found, Tag) else None


def section_ancestor(element: Tag) -> Tag | None:
    """Return the nearest sectioning container at or above ``element``.

    The walk stops at ``body``; a fragment that sits directly in the body has
    no sectioning ancestor.
    """
    current: Tag | None = element
    while isinstance(current, Tag):
        name = local_name(current)
        if name in ("body", "html", "[document]"):
            return None
        if name in SECTIONING_TAGS:
            return current
        current = current.parent
    return None


def document_body(document: BeautifulSoup) -> Tag:
    body = document.find("body")
    return body if isinstance(body, Tag) else document


def split_href(href: str) -> tuple[str, str | None]:
    """Split ``href`` into its path part and decoded fragment id."""
    path, _, fragment = href.partition("#")
    return path, unquote(fragment) or None


def resolve_href(href: str, base_dir: str) -> str | None:
    """Resolve a reference to an archive path.

    Handles percent-encoding, ``../`` segments and root-absolute references.
    External URIs (``http:``, ``mailto:`` and the like) resolve to ``None``.

    Args:
        href: Reference without fragment
        base_dir: Directory the reference is relative to ("" for the root)

    Returns:
        Normalized archive path, or None for external references
    """
    if _URI_SCHEME.match(href):
        return None

    path = unquote(href)
    if path.startswith("/"):
        joined = path.lstrip("/")
    elif base_dir:
        joined = posixpath.join(base_dir, path)
    else:
        joined = path

    normalized = posixpath.normpath(joined) if joined else ""
    # Segments that climb above the archive root are clamped to it
    parts = [part for part in normalized.split("/") if part not in ("", ".", "..")]
    return "/".join(parts)


def parent_dir(path: str) -> str:
    return posixpath.dirname(path)
