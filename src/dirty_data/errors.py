"""Exception taxonomy shared by the loader, analyzer, store, and HTTP layer.

Whether an error is fatal depends on where it is raised, not on its type:
an UpstreamError from the primary pass aborts the request, the same error
from the review pass only drops the review.
"""


class DirtyDataError(Exception):
    """Base class for all application errors."""


class UpstreamError(DirtyDataError):
    """The model API call failed at the transport or API level."""


class MalformedResponseError(DirtyDataError):
    """Model text did not parse into the expected JSON shape.

    Attributes:
        raw_text: The unparsed model output, kept for debugging.
    """

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class PersistenceError(DirtyDataError):
    """Saving, listing, or deleting analysis records failed."""


class UnsupportedInputError(DirtyDataError):
    """The uploaded file's extension is not one the loader understands."""


class InputParseError(DirtyDataError):
    """A supported file could not be read (corrupt workbook, broken PDF, ...)."""
