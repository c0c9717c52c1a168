"""Font assets and mixed-script text measurement for PDF export.

Text is split into runs of wide/ideographic codepoints and runs of everything
else. Each run is measured and drawn with its own font, so a single line can
mix a CJK font and a Latin font without missing glyphs.
"""

import re
import threading
import unicodedata
import urllib.request
from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF

from .config import DEFAULT_CJK_FONT, DEFAULT_LATIN_FONT
from .errors import FontLoadError

CJK = "cjk"
LATIN = "latin"

_WIDE_WIDTHS = {"W", "F"}
_WORDS = re.compile(r"\s+|\S+")


def is_wide(char: str) -> bool:
    """True for wide/ideographic codepoints (East Asian Width W or F)."""
    return unicodedata.east_asian_width(char) in _WIDE_WIDTHS


def font_key(char: str) -> str:
    return CJK if is_wide(char) else LATIN


def script_runs(text: str) -> list[tuple[str, str]]:
    """Split ``text`` into maximal (font key, run) pairs."""
    return [(key, "".join(chars)) for key, chars in groupby(text, key=font_key)]


def wrap_tokens(text: str) -> list[str]:
    """Break units for word wrapping.

    Wide runs break between any two characters; other runs break only at
    whitespace, which is kept as separate tokens.
    """
    tokens: list[str] = []
    for key, run in script_runs(text):
        if key == CJK:
            tokens.extend(run)
        else:
            tokens.extend(_WORDS.findall(run))
    return tokens


@dataclass(frozen=True)
class FontPair:
    """The two typefaces used for one document.

    Args:
        cjk: Font for wide/ideographic runs (anything with ``text_length``)
        latin: Font for all other runs
    """

    cjk: Any
    latin: Any

    def font(self, key: str) -> Any:
        return self.cjk if key == CJK else self.latin

    def measure(self, text: str, size: float) -> float:
        """Width of ``text`` at ``size`` points, summed run by run."""
        return sum(self.font(key).text_length(run, fontsize=size) for key, run in script_runs(text))


def _read_source(source: str, timeout: float) -> bytes | None:
    """Bytes of a font given as a URL or file path; None for built-in names."""
    if source.startswith(("http://", "https://")):
        with urllib.request.urlopen(source, timeout=timeout) as response:
            return response.read()

    path = Path(source).expanduser()
    if path.is_file():
        return path.read_bytes()
    return None


def load_font(source: str, timeout: float = 30.0) -> "fitz.Font":
    """Load one font from a built-in name, a file path or an http(s) URL.

    Raises:
        FontLoadError: If the font cannot be fetched or is not a usable font
    """
    try:
        data = _read_source(source, timeout)
        if data is None:
            return fitz.Font(fontname=source)
        return fitz.Font(fontbuffer=data)
    except Exception as e:
        raise FontLoadError(f"Font load for PDF failed ({source}): {e}") from e


class FontCache:
    """Lazily loaded font pair.

    The pair is loaded on first use and kept for the life of the cache; it is
    never reloaded. ``FontCache.shared()`` returns the process-wide instance for
    the default fonts, which concurrent exports read without copying.
    """

    _shared: "FontCache | None" = None
    _shared_lock = threading.Lock()

    def __init__(
        self,
        cjk_source: str = DEFAULT_CJK_FONT,
        latin_source: str = DEFAULT_LATIN_FONT,
        timeout: float = 30.0,
    ):
        self.cjk_source = cjk_source
        self.latin_source = latin_source
        self.timeout = timeout
        self._fonts: FontPair | None = None
        self._lock = threading.Lock()

    @classmethod
    def shared(cls) -> "FontCache":
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    @classmethod
    def for_sources(cls, cjk_source: str, latin_source: str) -> "FontCache":
        """The shared cache for the default fonts, or a private one otherwise."""
        if (cjk_source, latin_source) == (DEFAULT_CJK_FONT, DEFAULT_LATIN_FONT):
            return cls.shared()
        return cls(cjk_source, latin_source)

    @property
    def loaded(self) -> bool:
        return self._fonts is not None

    def get(self) -> FontPair:
        """Return the font pair, loading it on first call.

        Raises:
            FontLoadError: If either font cannot be loaded
        """
        with self._lock:
            if self._fonts is None:
                self._fonts = FontPair(
                    cjk=load_font(self.cjk_source, self.timeout),
                    latin=load_font(self.latin_source, self.timeout),
                )
            return self._fonts

    def __repr__(self) -> str:
        return f"FontCache(cjk={self.cjk_source!r}, latin={self.latin_source!r}, loaded={self.loaded})"
