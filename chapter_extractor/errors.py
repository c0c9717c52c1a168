"""Error taxonomy shared by the extractor and the exporter."""

import warnings


class BookError(Exception):
    """Base class for errors reported to the user.

    Every error carries a stable ``code`` so callers can tell failures apart
    without parsing the message.
    """

    code = "book_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ContainerError(BookError):
    """The root locator or package descriptor is missing or unparsable."""

    code = "container_error"


class TocError(BookError):
    """No usable navigation document could be found.

    Recoverable during import: extraction falls back to scanning content files.
    """

    code = "toc_missing"


class ExtractionWarning(UserWarning):
    """A content file, fragment or ToC entry was skipped."""


class WarningLog:
    """Collects non-fatal problems for the caller while also emitting them.

    Messages are kept in order so they can be shown next to the chapter list;
    each one is also raised as an ``ExtractionWarning``.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.messages: list[str] = []

    def warn(self, message: str) -> None:
        self.messages.append(message)
        warnings.warn(message, ExtractionWarning, stacklevel=3)

    def info(self, message: str) -> None:
        if self.verbose:
            print(message)
