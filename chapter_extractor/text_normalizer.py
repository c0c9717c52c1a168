"""Utilities for turning markup and raw text into paragraph-separated plain text."""

import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from .markup import local_name

# Block elements that should start on a new line when collapsing to text.
BLOCK_LEVEL_TAGS = {
    "address",
    "article",
    "aside",
    "blockquote",
    "caption",
    "dd",
    "div",
    "dl",
    "dt",
    "figcaption",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hgroup",
    "hr",
    "li",
    "main",
    "nav",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "td",
    "th",
    "tr",
    "ul",
    "br",
}

HEADING_TAGS = ("h1", "h2", "h3")

DEFAULT_EXCLUDED_TAGS = frozenset({"script", "style", "head"})

# Headings become chapter titles in heuristic extraction; page furniture is noise
TITLE_EXCLUDED_TAGS = DEFAULT_EXCLUDED_TAGS | {"h1", "h2", "h3", "header", "footer", "nav"}

PARAGRAPH_SEPARATOR = "\n\n"

_WHITESPACE = re.compile(r"\s+")
_HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
_SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


def reflow_text(text: str) -> str:
    """
    Normalize raw text into paragraphs separated by one blank line.

    Steps:
      - Normalize line endings
      - Trim each line
      - Drop blank lines
      - Join the remaining lines with a blank line between them
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = [line.strip() for line in text.split("\n")]
    return PARAGRAPH_SEPARATOR.join(line for line in paragraphs if line)


def _preformatted_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return "\n".join(_HORIZONTAL_WHITESPACE.sub(" ", line) for line in text.split("\n"))


def _collect(
    node: Tag | NavigableString,
    exclude: frozenset[str],
    parts: list[str],
    preformatted: bool = False,
) -> None:
    if isinstance(node, _SKIPPED_STRINGS):
        return
    if isinstance(node, NavigableString):
        text = str(node)
        parts.append(_preformatted_text(text) if preformatted else _WHITESPACE.sub(" ", text))
        return
    if not isinstance(node, Tag):
        return

    name = local_name(node)
    if name in exclude:
        return

    is_block = name in BLOCK_LEVEL_TAGS
    if is_block:
        parts.append("\n")
    preformatted = preformatted or name == "pre"
    for child in node.children:
        _collect(child, exclude, parts, preformatted)
    if is_block:
        parts.append("\n")


def markup_lines(node: Tag | BeautifulSoup, exclude: frozenset[str] = DEFAULT_EXCLUDED_TAGS) -> str:
    """Flatten a markup subtree to text with one line per block element.

    Inline elements are unwrapped and whitespace inside text nodes collapses to
    single spaces, so source indentation never reaches the output.
    Inside ``<pre>`` the line breaks are content and each line is kept.
    """
    parts: list[str] = []
    _collect(node, exclude, parts)
    return "".join(parts)


def markup_to_text(node: Tag | BeautifulSoup, exclude: frozenset[str] = DEFAULT_EXCLUDED_TAGS) -> str:
    """Convert a markup subtree into normalized paragraph text."""
    return reflow_text(markup_lines(node, exclude))


def split_by_headings(
    node: Tag | BeautifulSoup,
    heading: str,
    exclude: frozenset[str] = DEFAULT_EXCLUDED_TAGS,
) -> tuple[str, list[tuple[str, str]]]:
    """Split a subtree at every ``heading`` element, in document order.

    Args:
        node: Subtree to split
        heading: Local tag name that starts a new section (e.g. "h2")
        exclude: Tags whose content is ignored

    Returns:
        Tuple of (text before the first heading, [(heading text, section text)])
    """
    preamble: list[str] = []
    sections: list[tuple[str, list[str]]] = []

    def walk(current: Tag | NavigableString) -> None:
        parts = sections[-1][1] if sections else preamble
        if isinstance(current, Tag) and local_name(current) == heading:
            sections.append((markup_to_text(current, DEFAULT_EXCLUDED_TAGS), []))
            return
        if isinstance(current, Tag) and local_name(current) == "pre":
            _collect(current, exclude, parts)
            return
        if isinstance(current, Tag) and local_name(current) not in exclude:
            name = local_name(current)
            is_block = name in BLOCK_LEVEL_TAGS
            if is_block:
                parts.append("\n")
            for child in current.children:
                walk(child)
            # Sections may have changed while walking the children
            parts = sections[-1][1] if sections else preamble
            if is_block:
                parts.append("\n")
            return
        if not isinstance(current, Tag):
            _collect(current, exclude, parts)

    walk(node)
    return (
        reflow_text("".join(preamble)),
        [(title, reflow_text("".join(body))) for title, body in sections],
    )


def first_heading(node: Tag | BeautifulSoup, tags: tuple[str, ...] = HEADING_TAGS) -> str | None:
    """Text of the first heading found in ``node``, if any."""
    for element in node.find_all(True):
        if local_name(element) in tags:
            text = " ".join(element.get_text().split())
            if text:
                return text
    return None
