"""Error taxonomy for site builds.

Every failure that aborts a build derives from :class:`SiteBuildError` and
records the document identifier (``source``) and the offending ``field`` so
authors can fix the source file directly. None of these are retried: a build
over a fixed input set either completes or stops at the first error.
"""

from __future__ import annotations


class SiteBuildError(RuntimeError):
    """Base class for fatal build errors.

    Attributes
    ----------
    source : str | None
        Identifier of the document or file involved, usually a path relative
        to the content root.
    field : str | None
        Header key or setting that triggered the failure.
    """

    def __init__(
        self, message: str, *, source: str | None = None, field: str | None = None
    ) -> None:
        self.source = source
        self.field = field
        self.reason = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        location = self.source or "<unknown>"
        if self.field:
            return f"{location} [{self.field}]: {message}"
        return f"{location}: {message}"


class MalformedMetadata(SiteBuildError, ValueError):
    """Raised when a header block is missing, unparsable, or incomplete."""


class UnknownTemplate(SiteBuildError, LookupError):
    """Raised when a document names a layout with no matching template."""


class DuplicatePermalink(SiteBuildError):
    """Raised when two rendered pages resolve to the same output path."""

    def __init__(self, permalink: str, *, source: str, other: str) -> None:
        self.permalink = permalink
        self.other = other
        message = f"permalink '{permalink}' is already used by {other}"
        super().__init__(message, source=source, field="permalink")


class IOFailure(SiteBuildError):
    """Raised when an input cannot be read or an output cannot be written."""


__all__ = [
    "DuplicatePermalink",
    "IOFailure",
    "MalformedMetadata",
    "SiteBuildError",
    "UnknownTemplate",
]
