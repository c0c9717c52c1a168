"""Export errors."""

from chapter_extractor.errors import BookError


class EmptySelection(BookError):
    """The selection, offset and skip settings leave nothing to export."""

    code = "empty_selection"


class FontLoadError(BookError):
    """The typefaces needed for PDF export could not be loaded."""

    code = "font_load_error"


class InvalidExportConfig(BookError, ValueError):
    """An export setting is out of range."""

    code = "invalid_config"
