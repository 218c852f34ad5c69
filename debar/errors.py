"""Exceptions raised while reading ar archives."""


class ArError(Exception):
    """Base class for ar archive errors."""


class FormatError(ArError, ValueError):
    """The input is not a well formed ar archive.

    Raised for a bad magic string, a short or malformed member header, or a
    numeric header field that does not parse. The read position is not
    trustworthy afterwards, so the parse must stop.
    """


class SourceError(ArError, OSError):
    """The byte source could not supply the requested bytes."""
